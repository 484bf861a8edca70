"""
Letter Analyzer

Runs one letter through the full pipeline:

  validate (normalize + length bounds) -> extract fields -> score
  -> optionally highlight

The scorer and highlighter are pure; this module only wires them to
the normalized text and the extracted deadline.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from klartext.extractor import ExtractedData, extract_data
from klartext.highlighter import HighlightResult, get_highlight_spans
from klartext.scorer import ScoringResult, analyze_text
from klartext.validation import validate_letter

logger = logging.getLogger(__name__)


class InvalidLetterError(ValueError):
    """Raised when a text cannot be analyzed (too short or too long)."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.message = message
        self.text = text


@dataclass(frozen=True)
class LetterAnalysis:
    text: str                                   # Normalized text
    extracted: ExtractedData
    scoring: ScoringResult
    highlights: Optional[HighlightResult] = None


def analyze_letter(
    raw_text: str,
    include_highlights: bool = False,
    deadline_days: Optional[int] = None,
) -> LetterAnalysis:
    """
    Analyze a raw letter.

    Args:
        raw_text: Text as delivered by OCR, PDF extraction or the user.
        include_highlights: Also compute highlight spans on the normalized text.
        deadline_days: Overrides the deadline found in the text.

    Raises:
        InvalidLetterError: the normalized text fails validation.
    """
    start = time.time()

    validation = validate_letter(raw_text)
    if not validation.is_valid:
        raise InvalidLetterError(validation.message or "", validation.text)

    text = validation.text
    extracted = extract_data(text)
    if deadline_days is None:
        deadline_days = extracted.deadline_days

    scoring = analyze_text(text, deadline_days=deadline_days)
    highlights = get_highlight_spans(text) if include_highlights else None

    logger.info(
        "Letter analyzed",
        extra={
            "urgency": scoring.urgency,
            "score": scoring.score,
            "category": scoring.category,
            "matches_count": len(scoring.matches),
            "neutralized_count": len(scoring.neutralized_matches),
            "duration_ms": round((time.time() - start) * 1000, 1),
        },
    )

    return LetterAnalysis(
        text=text,
        extracted=extracted,
        scoring=scoring,
        highlights=highlights,
    )
