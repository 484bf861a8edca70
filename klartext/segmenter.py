"""
Sentence Segmenter

Splits letter text into units that are evaluated independently.

Contrastive conjunctions ("aber", "jedoch", ...) start a new unit, so a
cancellation in one clause cannot leak into the next:

    "Die Pfändung wurde aufgehoben, aber eine neue Pfändung wird eingeleitet."
    -> ["Die Pfändung wurde aufgehoben,",
        "aber eine neue Pfändung wird eingeleitet."]

Units keep their character offsets in the input so the highlighter can
map matches back onto the original text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from klartext.patterns import CONTRASTIVE_CONJUNCTIONS, SENTENCE_DELIMITERS


@dataclass(frozen=True)
class Sentence:
    """A trimmed, non-empty unit and its [start, end) offsets in the source."""
    text: str
    start: int
    end: int


def _breaks(text: str) -> list[tuple[int, int]]:
    """Regions removed between units. Conjunction breaks are zero-width."""
    regions = [(m.start(), m.end()) for m in SENTENCE_DELIMITERS.finditer(text)]
    regions.extend((m.start(), m.start()) for m in CONTRASTIVE_CONJUNCTIONS.finditer(text))
    regions.sort()
    return regions


def iter_sentences(text: str) -> Iterator[Sentence]:
    """
    Lazily yield the sentence units of a text.

    Each call starts from scratch; the same text always yields the same
    sequence.
    """
    pos = 0
    for start, end in _breaks(text) + [(len(text), len(text))]:
        raw = text[pos:start]
        stripped = raw.strip()
        if stripped:
            offset = pos + (len(raw) - len(raw.lstrip()))
            yield Sentence(text=stripped, start=offset, end=offset + len(stripped))
        pos = end


def split_into_sentences(text: str) -> list[str]:
    """Split text into trimmed, non-empty sentence strings."""
    return [sentence.text for sentence in iter_sentences(text)]
