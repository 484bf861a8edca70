"""
Klartext — Urgency Classification for German Official Letters

Deterministic rule engine that reads a letter (debt-collection notice,
enforcement order, payment reminder) and decides how urgently the
recipient has to act. Keywords are evaluated in context, so a
cancelled seizure does not raise a red alert.

Public API:
  - analyze_text:         Score a letter -> ScoringResult
  - analyze_letter:       Validate, extract and score raw OCR text
  - collect_matches:      Context-evaluated keyword matches
  - get_highlight_spans:  Keyword spans with absolute offsets
  - extract_data:         Dates, amounts, IBANs, references, deadline
  - normalize_text:       OCR cleanup
  - validate_letter:      Length bounds on normalized text

Usage:
    from klartext import analyze_text
    result = analyze_text("Die Zwangsvollstreckung wurde aufgehoben.")
    result.urgency  # "green"
"""

__version__ = "1.0.0"

from klartext.scorer import (
    ScoringResult,
    analyze_text,
    calculate_score,
    determine_category,
)
from klartext.collector import (
    collect_matches,
    has_keywords,
    iter_keyword_occurrences,
    quick_urgency_check,
)
from klartext.context import EvaluatedKeyword, evaluate_keyword_in_context
from klartext.subject import evaluate_subject_keyword, extract_subject_and_body
from klartext.segmenter import split_into_sentences
from klartext.highlighter import HighlightResult, HighlightSpan, get_highlight_spans
from klartext.extractor import ExtractedData, extract_data
from klartext.normalizer import normalize_text
from klartext.validation import ValidationResult, validate_letter
from klartext.analyzer import InvalidLetterError, LetterAnalysis, analyze_letter

__all__ = [
    "ScoringResult",
    "analyze_text",
    "calculate_score",
    "determine_category",
    "collect_matches",
    "has_keywords",
    "iter_keyword_occurrences",
    "quick_urgency_check",
    "EvaluatedKeyword",
    "evaluate_keyword_in_context",
    "evaluate_subject_keyword",
    "extract_subject_and_body",
    "split_into_sentences",
    "HighlightResult",
    "HighlightSpan",
    "get_highlight_spans",
    "ExtractedData",
    "extract_data",
    "normalize_text",
    "validate_letter",
    "ValidationResult",
    "InvalidLetterError",
    "LetterAnalysis",
    "analyze_letter",
]
