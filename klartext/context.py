"""
Context Evaluator — Per-Occurrence Keyword Evaluation

Decides, for one keyword inside one sentence, whether the keyword is
active, neutralized, or weight-reduced. Prevents false RED alerts when
an urgent keyword appears in a non-actionable context:

    "Die Zwangsvollstreckung wurde AUFGEHOBEN."
    -> keyword "zwangsvollstreckung" is present but cancelled
    -> effective_weight = 0, no RED alert

Rules are applied in a fixed order and the first hit is terminal:

  1. Strong negator in the ±5 token window     -> neutralized
  2. Cancellation verb anywhere in the sentence -> neutralized
  3. Rejection phrase in the window             -> neutralized
  4. Informational marker in the sentence       -> reduced
  5. Conditional marker in the window           -> reduced
  6. Nothing found                              -> full weight

The order lives in SENTENCE_RULES, not in control flow.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from klartext.keywords import get_keyword_urgency
from klartext.patterns import (
    CANCELLATION_VERBS,
    CONDITIONAL_MARKERS,
    INFORMATIONAL_MARKERS,
    REJECTION_PATTERNS,
    STRONG_NEGATORS,
    MitigationPattern,
    NegationPattern,
)

WINDOW_SIZE = 5
DISPLAY_CONTEXT_CHARS = 30

DIRECT_REASON = "Direkte/handlungsrelevante Aussage"


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class EvaluatedKeyword:
    """Evaluation result for a single keyword occurrence."""
    keyword: str
    category: str
    urgency: str            # Tier of the dictionary entry, not of the score
    original_weight: int
    effective_weight: int
    is_neutralized: bool    # True only for negation/cancellation/rejection
    reason: str             # Human-readable (German) justification
    context: str            # Display snippet, never used for decisions
    rule: str = "direct"    # Which rule decided the outcome


@dataclass(frozen=True)
class EvaluationRule:
    """One step of the evaluation order."""
    id: str
    patterns: tuple
    scope: str      # "window" (±5 tokens) or "sentence"
    reason: str     # Format string with {name} and {percent}


SENTENCE_RULES: tuple[EvaluationRule, ...] = (
    EvaluationRule("strong_negation", STRONG_NEGATORS, "window",
                   'Negiert durch "{name}"'),
    EvaluationRule("cancellation", CANCELLATION_VERBS, "sentence",
                   'Aufgehoben/Erledigt: "{name}"'),
    EvaluationRule("rejection", REJECTION_PATTERNS, "window",
                   'Abgelehnt: "{name}"'),
    EvaluationRule("informational", INFORMATIONAL_MARKERS, "sentence",
                   'Nur zur Information: "{name}" (-{percent}%)'),
    EvaluationRule("conditional", CONDITIONAL_MARKERS, "window",
                   'Bedingt: "{name}" (-{percent}%)'),
)


# ============================================================
# SHARED HELPERS
# ============================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def reduce_weight(original_weight: int, reduction: float) -> int:
    """Apply a mitigation reduction to a base weight."""
    return round_half_up(original_weight * (1 - reduction))


def apply_pattern(
    rule: EvaluationRule,
    pattern: Union[NegationPattern, MitigationPattern],
    keyword: str,
    category: str,
    original_weight: int,
    context: str,
) -> EvaluatedKeyword:
    """Build the evaluation result for a rule hit."""
    if isinstance(pattern, NegationPattern):
        effective_weight = 0
        neutralized = True
        percent = 100
    else:
        effective_weight = reduce_weight(original_weight, pattern.reduction)
        neutralized = False
        percent = round_half_up(pattern.reduction * 100)

    return EvaluatedKeyword(
        keyword=keyword,
        category=category,
        urgency=get_keyword_urgency(keyword),
        original_weight=original_weight,
        effective_weight=effective_weight,
        is_neutralized=neutralized,
        reason=rule.reason.format(name=pattern.name, percent=percent),
        context=context,
        rule=rule.id,
    )


def first_match(patterns: tuple, text: str):
    """Return the first pattern in table order that matches the text."""
    for pattern in patterns:
        if pattern.pattern.search(text):
            return pattern
    return None


# ============================================================
# WINDOW + DISPLAY CONTEXT
# ============================================================

def _tokenize(sentence: str) -> list[str]:
    return sentence.lower().split()


def _find_keyword_token_index(tokens: list[str], keyword: str) -> int:
    """Index of the first token containing the keyword's first word, or -1."""
    first_word = keyword.lower().split()[0]
    for i, token in enumerate(tokens):
        if first_word in token:
            return i
    return -1


def context_window(sentence: str, keyword: str, window_size: int = WINDOW_SIZE) -> str:
    """
    Lowercased ±window_size token window around the keyword.

    Falls back to the whole lowercased sentence when the keyword's first
    word cannot be located among the tokens.
    """
    tokens = _tokenize(sentence)
    index = _find_keyword_token_index(tokens, keyword)
    if index < 0:
        return sentence.lower()
    keyword_length = len(keyword.split())
    start = max(0, index - window_size)
    end = min(len(tokens), index + keyword_length + window_size)
    return " ".join(tokens[start:end])


def display_context(sentence: str, keyword: str) -> str:
    """Snippet of the original-case sentence around the keyword."""
    match = re.search(re.escape(keyword), sentence, re.IGNORECASE)
    position, keyword_end = match.span() if match else (-1, len(keyword) - 1)
    start = max(0, position - DISPLAY_CONTEXT_CHARS)
    end = min(len(sentence), keyword_end + DISPLAY_CONTEXT_CHARS)
    return f"...{sentence[start:end].strip()}..."


# ============================================================
# EVALUATION
# ============================================================

def evaluate_keyword_in_context(
    sentence: str,
    keyword: str,
    category: str,
    original_weight: int,
) -> EvaluatedKeyword:
    """
    Evaluate a keyword within its sentence.

    Args:
        sentence: The sentence containing the keyword.
        keyword: The dictionary keyword (lowercase).
        category: The keyword's letter category.
        original_weight: The keyword's base weight.

    Returns:
        EvaluatedKeyword with the effective weight and the reason.
    """
    scopes = {
        "window": context_window(sentence, keyword),
        "sentence": sentence.lower(),
    }
    context = display_context(sentence, keyword)

    for rule in SENTENCE_RULES:
        hit = first_match(rule.patterns, scopes[rule.scope])
        if hit is not None:
            return apply_pattern(rule, hit, keyword, category, original_weight, context)

    return EvaluatedKeyword(
        keyword=keyword,
        category=category,
        urgency=get_keyword_urgency(keyword),
        original_weight=original_weight,
        effective_weight=original_weight,
        is_neutralized=False,
        reason=DIRECT_REASON,
        context=context,
    )


def has_strong_negation(sentence: str) -> bool:
    """True if any negation, cancellation or rejection pattern occurs in the sentence."""
    lowered = sentence.lower()
    return any(
        first_match(table, lowered) is not None
        for table in (STRONG_NEGATORS, CANCELLATION_VERBS, REJECTION_PATTERNS)
    )


def has_informational_framing(sentence: str) -> bool:
    """True if the sentence carries an informational marker."""
    return first_match(INFORMATIONAL_MARKERS, sentence) is not None
