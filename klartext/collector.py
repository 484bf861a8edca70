"""
Match Collector — Context-Aware Keyword Detection

Walks a letter unit by unit (subject line first, then body sentences),
finds every dictionary keyword in each unit and evaluates it in its
context. The walk is shared: the scorer consumes the evaluated keywords,
the highlighter consumes the absolute positions. Both see the exact same
evaluation for the same text.

One evaluation per (unit, keyword). The same keyword appearing in two
sentences is evaluated twice, because it may be cancelled in one and
active in the other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator

from klartext.context import EvaluatedKeyword, evaluate_keyword_in_context
from klartext.keywords import ALL_KEYWORDS, KeywordDefinition
from klartext.segmenter import iter_sentences
from klartext.subject import evaluate_subject_keyword, extract_subject_and_body

# Fast pre-filter only; no context evaluation
QUICK_CHECK_KEYWORDS: tuple[str, ...] = (
    "zwangsvollstreckung",
    "vollstreckung",
    "erzwingungshaft",
    "haftbefehl",
    "pfändung",
)


@dataclass(frozen=True)
class KeywordOccurrence:
    """One evaluated keyword inside one unit of the letter."""
    definition: KeywordDefinition
    evaluated: EvaluatedKeyword
    unit: str                                   # Subject line or sentence
    positions: tuple[tuple[int, int], ...]      # Absolute [start, end) offsets
    is_subject: bool = False


def find_keyword_positions(unit: str, keyword: str) -> list[tuple[int, int]]:
    """
    [start, end) offsets of all non-overlapping, case-insensitive occurrences.

    Matched on the unit itself: lowercasing can change the string length
    ("İ" becomes two code points), which would shift every later offset.
    """
    return [m.span() for m in re.finditer(re.escape(keyword), unit, re.IGNORECASE)]


def _walk_sentences(
    text: str,
    to_source: Callable[[int], int],
) -> Iterator[KeywordOccurrence]:
    for sentence in iter_sentences(text):
        for definition in ALL_KEYWORDS:
            spans = find_keyword_positions(sentence.text, definition.keyword)
            if not spans:
                continue
            evaluated = evaluate_keyword_in_context(
                sentence.text,
                definition.keyword,
                definition.category,
                definition.weight,
            )
            positions = []
            for start, end in spans:
                absolute = to_source(sentence.start + start)
                positions.append((absolute, absolute + end - start))
            yield KeywordOccurrence(
                definition=definition,
                evaluated=evaluated,
                unit=sentence.text,
                positions=tuple(positions),
            )


def iter_keyword_occurrences(text: str) -> Iterator[KeywordOccurrence]:
    """
    Yield every evaluated keyword occurrence in a letter.

    With a subject line, subject keywords are evaluated against the whole
    body and the body is walked sentence by sentence. Without one, the
    whole text is walked sentence by sentence.
    """
    extraction = extract_subject_and_body(text)
    if extraction is None:
        yield from _walk_sentences(text, lambda offset: offset)
        return

    for definition in ALL_KEYWORDS:
        spans = find_keyword_positions(extraction.subject, definition.keyword)
        if not spans:
            continue
        evaluated = evaluate_subject_keyword(
            definition.keyword,
            definition.category,
            definition.weight,
            extraction.subject,
            extraction.body,
        )
        yield KeywordOccurrence(
            definition=definition,
            evaluated=evaluated,
            unit=extraction.subject,
            positions=tuple(
                (extraction.subject_start + start, extraction.subject_start + end)
                for start, end in spans
            ),
            is_subject=True,
        )

    yield from _walk_sentences(extraction.body, extraction.to_source_offset)


def collect_matches(text: str) -> list[EvaluatedKeyword]:
    """Find all keywords in a letter and evaluate each in its context."""
    return [occurrence.evaluated for occurrence in iter_keyword_occurrences(text)]


def has_keywords(text: str) -> bool:
    """True if any dictionary keyword occurs in the text (no context evaluation)."""
    lowered = text.lower()
    return any(definition.keyword in lowered for definition in ALL_KEYWORDS)


def quick_urgency_check(text: str) -> bool:
    """
    Fast pre-filter: does the text mention a core enforcement keyword?

    Does NOT apply context evaluation. Use analyze_text() for scoring.
    """
    lowered = text.lower()
    return any(keyword in lowered for keyword in QUICK_CHECK_KEYWORDS)
