"""
Field Extractor

Pulls structured data out of a letter: dates, amounts, IBANs, reference
numbers and the response deadline in days. The deadline feeds the
scorer's deadline multiplier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

# DD.MM.YYYY or DD.MM.YY
DATE_PATTERN = re.compile(r"\b(\d{1,2})\.(\d{1,2})\.(\d{2,4})\b")

# 1.234,56 € / 1234,56 EUR / 50 Euro
AMOUNT_PATTERN = re.compile(
    r"(\d{1,3}(?:\.\d{3})*(?:,\d{2})?)\s*(?:€|EUR|Euro)", re.IGNORECASE,
)

IBAN_PATTERN = re.compile(r"\b([A-Z]{2}\d{2}(?:\s?\d{4}){4}\s?\d{2})\b", re.IGNORECASE)

REFERENCE_PATTERN = re.compile(
    r"(?:Az\.?|Aktenzeichen|Geschäftszeichen|Vorgangsnummer|Rechnungs-?Nr\.?)"
    r"[:.]?\s*([A-Z0-9\-/]+)",
    re.IGNORECASE,
)

# "innerhalb von 14 Tagen", "Frist von 7 Tagen", "binnen 10 Werktagen"
DEADLINE_DAYS_PATTERN = re.compile(
    r"(?:innerhalb\s+(?:von\s+)?|frist\s+(?:von\s+)?|binnen\s+)(\d+)\s*(?:tage[n]?|werktage[n]?)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Amount:
    value: float
    formatted: str


@dataclass
class ExtractedData:
    dates: list[str] = field(default_factory=list)
    amounts: list[Amount] = field(default_factory=list)
    ibans: list[str] = field(default_factory=list)
    references: list[str] = field(default_factory=list)
    deadline_days: Optional[int] = None


def _unique(values: list[str]) -> list[str]:
    """De-duplicate, keeping first-seen order."""
    return list(dict.fromkeys(values))


def parse_german_number(value: str) -> float:
    """'1.234,56' -> 1234.56"""
    return float(value.replace(".", "").replace(",", ".", 1))


def extract_dates(text: str) -> list[str]:
    return _unique([m.group(0) for m in DATE_PATTERN.finditer(text)])


def extract_amounts(text: str) -> list[Amount]:
    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        try:
            value = parse_german_number(match.group(1))
        except ValueError:
            continue
        amounts.append(Amount(value=value, formatted=match.group(0).strip()))
    return amounts


def extract_ibans(text: str) -> list[str]:
    return _unique([re.sub(r"\s", "", m.group(1)) for m in IBAN_PATTERN.finditer(text)])


def extract_references(text: str) -> list[str]:
    return _unique([m.group(1) for m in REFERENCE_PATTERN.finditer(text)])


def extract_deadline_days(text: str) -> Optional[int]:
    match = DEADLINE_DAYS_PATTERN.search(text)
    return int(match.group(1)) if match else None


def extract_data(text: str) -> ExtractedData:
    """Extract all structured fields from a letter."""
    return ExtractedData(
        dates=extract_dates(text),
        amounts=extract_amounts(text),
        ibans=extract_ibans(text),
        references=extract_references(text),
        deadline_days=extract_deadline_days(text),
    )
