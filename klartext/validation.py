"""
Letter validation: normalizes the text and rejects input that is too
short to analyze or long enough to make regex scanning pathological.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from klartext.config import settings
from klartext.normalizer import normalize_text

TOO_SHORT_MESSAGE = "Dokument zu kurz für automatische Analyse."
TOO_LONG_MESSAGE = "Dokument zu lang für automatische Analyse."


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    text: str                       # Normalized text
    message: Optional[str] = None   # German, for end users


def validate_letter(text: str) -> ValidationResult:
    cleaned = normalize_text(text)

    if len(cleaned) < settings.MIN_TEXT_LENGTH:
        return ValidationResult(is_valid=False, text=cleaned, message=TOO_SHORT_MESSAGE)
    if len(cleaned) > settings.MAX_TEXT_LENGTH:
        return ValidationResult(is_valid=False, text=cleaned, message=TOO_LONG_MESSAGE)

    return ValidationResult(is_valid=True, text=cleaned)
