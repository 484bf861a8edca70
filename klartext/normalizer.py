"""
Text Normalizer — OCR Cleanup for German Letters

OCR output of scanned letters breaks words ("Mahn ung"), confuses
digits with letters ("Pf0ndung") and splits currency amounts
("1 .200,00 €"). Keyword matching is a substring search, so these
errors are repaired before analysis.
"""

from __future__ import annotations

import re
import unicodedata

DISPLAY_MAX_CHARS = 500

# (pattern, replacement), applied in order
OCR_CORRECTIONS: tuple[tuple[re.Pattern, str], ...] = (
    # Letter confusions
    (re.compile(r"l{2,}"), "ll"),
    (re.compile(r"([a-z])0([a-z])", re.IGNORECASE), r"\1o\2"),
    (re.compile(r"([a-z])1([a-z])", re.IGNORECASE), r"\1l\2"),
    (re.compile(r"([a-z])5([a-z])", re.IGNORECASE), r"\1s\2"),
    (re.compile(r"rn"), "m"),
    # Broken words
    (re.compile(r"\bMahn\s*ung\b", re.IGNORECASE), "Mahnung"),
    (re.compile(r"\bZah\s*lung\b", re.IGNORECASE), "Zahlung"),
    (re.compile(r"\bFor\s*de\s*rung\b", re.IGNORECASE), "Forderung"),
    (re.compile(r"\bVoll\s*stre\s*ckung\b", re.IGNORECASE), "Vollstreckung"),
    (re.compile(r"Zahl ungs", re.IGNORECASE), "Zahlungs"),
    (re.compile(r"Mahn gebühren", re.IGNORECASE), "Mahngebühren"),
    (re.compile(r"Voll streck", re.IGNORECASE), "Vollstreck"),
)

CURRENCY_FIXES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"(\d)\s+\.(\d)"), r"\1.\2"),    # "1 .200,00"
    (re.compile(r"(\d)\.\s+(\d)"), r"\1.\2"),    # "1. 200,00"
    (re.compile(r"(\d)\s+,(\d)"), r"\1,\2"),     # "1.200 ,00"
)


def _apply(replacements: tuple[tuple[re.Pattern, str], ...], text: str) -> str:
    for pattern, replacement in replacements:
        text = pattern.sub(replacement, text)
    return text


def normalize_whitespace(text: str) -> str:
    text = text.replace("\t", " ")
    text = re.sub(r"  +", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def normalize_text(raw_text: str) -> str:
    """
    Normalize OCR text for analysis.

    Composes decomposed umlauts (NFC), applies OCR corrections, repairs
    split currency amounts and cleans whitespace.
    """
    text = unicodedata.normalize("NFC", raw_text)
    text = _apply(OCR_CORRECTIONS, text)
    text = _apply(CURRENCY_FIXES, text)
    return normalize_whitespace(text)


def clean_for_display(text: str) -> str:
    """Collapse all whitespace and truncate for display."""
    return re.sub(r"\s+", " ", text).strip()[:DISPLAY_MAX_CHARS]
