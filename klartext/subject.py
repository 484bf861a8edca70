"""
Subject-Line Handler — "Betreff" Evaluation Against the Whole Body

Official letters often state the critical term in a terse subject line
("Betreff: Haftbefehl") with no prose around it to carry a negation.
Whatever cancels or conditions that term lives in the body, so subject
keywords are evaluated against the entire body instead of a local
token window.

Rule order (first hit wins):

  1. Keyword and negator/rejection phrase adjacent in the body  -> neutralized
  2. Body sentence with keyword + cancellation verb              -> neutralized
  3. Body sentence with keyword + strong negator                 -> neutralized
  4. Body sentence with keyword + rejection phrase               -> neutralized
  5. Exclusion pattern anywhere in the body                      -> reduced
  6. Informational marker anywhere in the body                   -> reduced
  7. Nothing found                                               -> full weight
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from klartext.context import (
    EvaluatedKeyword,
    EvaluationRule,
    apply_pattern,
    first_match,
)
from klartext.keywords import get_keyword_urgency
from klartext.patterns import (
    CANCELLATION_VERBS,
    EXCLUSION_PATTERNS,
    INFORMATIONAL_MARKERS,
    REJECTION_PATTERNS,
    STRONG_NEGATORS,
    SUBJECT_NEGATION_TERMS,
    SUBJECT_REJECTION_TERMS,
)
from klartext.segmenter import split_into_sentences

SUBJECT_CONTEXT_CHARS = 50

# Priority order: Betreff > Betr. > Bezug. The first label found anywhere
# in the text wins, even if a lower-priority label appears earlier.
SUBJECT_PATTERNS: tuple[re.Pattern, ...] = tuple(
    re.compile(
        rf"^[ \t]*{label}[ \t]*:[ \t]*(\S[^\n]*?)[ \t]*(?:\r?\n|\Z)",
        re.IGNORECASE | re.MULTILINE,
    )
    for label in (r"Betreff", r"Betr\.", r"Bezug")
)

SUBJECT_SENTENCE_RULES: tuple[EvaluationRule, ...] = (
    EvaluationRule("cancellation", CANCELLATION_VERBS, "cooccurrence",
                   'Betreff-Keyword im Body aufgehoben: "{name}"'),
    EvaluationRule("strong_negation", STRONG_NEGATORS, "cooccurrence",
                   'Betreff-Keyword negiert: "{name}"'),
    EvaluationRule("rejection", REJECTION_PATTERNS, "cooccurrence",
                   'Betreff-Keyword abgelehnt: "{name}"'),
)

SUBJECT_BODY_RULES: tuple[EvaluationRule, ...] = (
    EvaluationRule("exclusion", EXCLUSION_PATTERNS, "body",
                   'Betreff in Verwaltungskontext: "{name}" (-{percent}%)'),
    EvaluationRule("informational", INFORMATIONAL_MARKERS, "body",
                   'Betreff zur Information: "{name}" (-{percent}%)'),
)


# ============================================================
# DETECTION
# ============================================================

@dataclass(frozen=True)
class SubjectExtraction:
    """A detected subject line and the remaining body."""
    subject: str
    body: str
    subject_start: int      # Offset of the subject text in the source
    line_start: int         # Removed region [line_start, line_end)
    line_end: int
    body_lead: int          # Whitespace stripped from the front of the body

    @property
    def subject_end(self) -> int:
        return self.subject_start + len(self.subject)

    def to_source_offset(self, body_offset: int) -> int:
        """Map an offset inside `body` back to an offset in the source text."""
        joined = body_offset + self.body_lead
        if joined < self.line_start:
            return joined
        return joined + (self.line_end - self.line_start)


def extract_subject_and_body(text: str) -> Optional[SubjectExtraction]:
    """
    Detect a subject line and split it from the body.

    Returns None when no subject label is present.
    """
    for pattern in SUBJECT_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        joined = text[:match.start()] + text[match.end():]
        body = joined.strip()
        return SubjectExtraction(
            subject=match.group(1),
            body=body,
            subject_start=match.start(1),
            line_start=match.start(),
            line_end=match.end(),
            body_lead=len(joined) - len(joined.lstrip()),
        )
    return None


# ============================================================
# EVALUATION
# ============================================================

@lru_cache(maxsize=None)
def _adjacency_patterns(keyword: str) -> tuple[re.Pattern, ...]:
    """Directional keyword/negator regexes that never cross a period."""
    kw = re.escape(keyword.lower())
    negation = rf"\b(?:{SUBJECT_NEGATION_TERMS})\b"
    rejection = rf"\b(?:{SUBJECT_REJECTION_TERMS})\b"
    return tuple(
        re.compile(regex, re.IGNORECASE)
        for regex in (
            rf"{kw}[^.]*{negation}",
            rf"{negation}[^.]*{kw}",
            rf"{kw}[^.]*{rejection}",
            rf"{rejection}[^.]*{kw}",
        )
    )


def evaluate_subject_keyword(
    keyword: str,
    category: str,
    original_weight: int,
    subject_line: str,
    body_text: str,
) -> EvaluatedKeyword:
    """
    Evaluate a subject-line keyword against the full body.

    Args:
        keyword: The dictionary keyword found in the subject line.
        category: The keyword's letter category.
        original_weight: The keyword's base weight.
        subject_line: The subject text (used for the display context).
        body_text: The letter body without the subject line.

    Returns:
        EvaluatedKeyword with the effective weight and the reason.
    """
    lowered_keyword = keyword.lower()
    lowered_body = body_text.lower()
    context = f"Betreff: {subject_line[:SUBJECT_CONTEXT_CHARS]}..."

    # --- Rule 1: keyword negated right where the body mentions it ---
    if any(p.search(lowered_body) for p in _adjacency_patterns(lowered_keyword)):
        return EvaluatedKeyword(
            keyword=keyword,
            category=category,
            urgency=get_keyword_urgency(keyword),
            original_weight=original_weight,
            effective_weight=0,
            is_neutralized=True,
            reason="Betreff-Keyword im Body negiert",
            context=context,
            rule="subject_negation",
        )

    # --- Rules 2-4: same body sentence carries keyword + negation ---
    mentioning = [
        sentence.lower()
        for sentence in split_into_sentences(body_text)
        if lowered_keyword in sentence.lower()
    ]
    for rule in SUBJECT_SENTENCE_RULES:
        for pattern in rule.patterns:
            if any(pattern.pattern.search(sentence) for sentence in mentioning):
                return apply_pattern(
                    rule, pattern, keyword, category, original_weight, context,
                )

    # --- Rules 5-6: administrative or informational framing ---
    for rule in SUBJECT_BODY_RULES:
        hit = first_match(rule.patterns, body_text)
        if hit is not None:
            return apply_pattern(rule, hit, keyword, category, original_weight, context)

    return EvaluatedKeyword(
        keyword=keyword,
        category=category,
        urgency=get_keyword_urgency(keyword),
        original_weight=original_weight,
        effective_weight=original_weight,
        is_neutralized=False,
        reason="Betreff: Kein neutralisierender Kontext im Body",
        context=context,
    )
