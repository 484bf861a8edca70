"""
Highlight Projector

Maps every evaluated keyword occurrence onto absolute character offsets
in the source text, for previews that color keywords by tier and show
why a keyword was or was not counted.

Reads the same occurrence walk as the scorer, so a keyword shown as
neutralized here is exactly the keyword the scorer ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from klartext.collector import has_keywords, iter_keyword_occurrences


@dataclass(frozen=True)
class HighlightSpan:
    keyword: str
    start: int
    end: int
    urgency: str
    category: str
    is_neutralized: bool
    reason: str
    original_weight: int
    effective_weight: int
    sentence_context: str


@dataclass
class HighlightResult:
    spans: list[HighlightSpan] = field(default_factory=list)
    active_count: dict[str, int] = field(
        default_factory=lambda: {"red": 0, "yellow": 0, "green": 0}
    )
    neutralized_count: int = 0


def get_highlight_spans(text: str) -> HighlightResult:
    """
    Compute highlight spans for a text.

    One span per keyword occurrence; spans sharing the same (start, end)
    are kept once. Spans are sorted by start offset.
    """
    result = HighlightResult()
    seen: set[tuple[int, int]] = set()

    for occurrence in iter_keyword_occurrences(text):
        evaluated = occurrence.evaluated
        sentence_context = (
            f"Betreff: {occurrence.unit}" if occurrence.is_subject else occurrence.unit
        )
        for start, end in occurrence.positions:
            if (start, end) in seen:
                continue
            seen.add((start, end))
            result.spans.append(HighlightSpan(
                keyword=evaluated.keyword,
                start=start,
                end=end,
                urgency=occurrence.definition.urgency,
                category=evaluated.category,
                is_neutralized=evaluated.is_neutralized,
                reason=evaluated.reason,
                original_weight=evaluated.original_weight,
                effective_weight=evaluated.effective_weight,
                sentence_context=sentence_context,
            ))
            if evaluated.is_neutralized:
                result.neutralized_count += 1
            else:
                result.active_count[occurrence.definition.urgency] += 1

    result.spans.sort(key=lambda span: span.start)
    return result


def has_highlightable_content(text: str) -> bool:
    return has_keywords(text)
