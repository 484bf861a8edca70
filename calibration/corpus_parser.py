"""
Corpus Parser — Labelled Letters for Calibration

A corpus file holds letters separated by '---' lines. Each letter starts
with header lines, then the letter text:

    ---
    urgency: red
    category: enforcement
    deadline_days: 7
    source: Finanzamt, anonymisiert
    notes: Kontopfändung angekündigt

    Sehr geehrte Damen und Herren,
    ...
    ---

Only `urgency` is required. `deadline_days` is handed to the scorer as
is; leave it out to let the extractor read the deadline from the text.
Lines starting with '#' inside the header are comments; a block that
starts with '#' is skipped entirely. Blocks without an urgency label
are treated as not yet labelled and skipped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from klartext.keywords import CATEGORIES, URGENCY_LEVELS

HEADER_KEYS = ("urgency", "category", "deadline_days", "source", "notes")

_HEADER_LINE = re.compile(rf"^({'|'.join(HEADER_KEYS)})\s*:\s*(.+)$", re.IGNORECASE)
_SEPARATOR = re.compile(r"(?:^|\n)\s*---\s*(?:\n|$)")


@dataclass
class CalibrationSample:
    """One labelled letter."""
    text: str
    urgency: str                        # Expected tier
    category: Optional[str]             # Expected category, if labelled
    deadline_days: Optional[int]
    source: str
    notes: str

    # Set by benchmark.evaluate_sample
    engine_result: Optional[dict] = None


def parse_corpus(filepath: str | Path) -> list[CalibrationSample]:
    """
    Read every labelled letter from one corpus file.

    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: a letter carries an unknown urgency or category label.
    """
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"Corpus file not found: {path}")

    samples = []
    for block in _SEPARATOR.split(path.read_text(encoding="utf-8")):
        block = block.strip()
        if not block or block.startswith("#"):
            continue
        try:
            sample = _parse_block(block)
        except ValueError as e:
            raise ValueError(f"{path.name}: {e}") from e
        if sample is not None:
            samples.append(sample)
    return samples


def _split_header(block: str) -> tuple[dict[str, str], str]:
    """Header fields up to the first line that is not a header or comment."""
    header: dict[str, str] = {}
    lines = block.split("\n")
    for i, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _HEADER_LINE.match(stripped)
        if match is None:
            return header, "\n".join(lines[i:]).strip()
        header[match.group(1).lower()] = match.group(2).strip()
    return header, ""


def _label(value: str, allowed: tuple[str, ...], kind: str) -> str:
    value = value.lower()
    if value not in allowed:
        raise ValueError(f"Unknown {kind} label: {value}")
    return value


def _parse_block(block: str) -> Optional[CalibrationSample]:
    header, text = _split_header(block)
    if not text or "urgency" not in header:
        return None

    category = header.get("category")
    deadline = header.get("deadline_days")

    return CalibrationSample(
        text=text,
        urgency=_label(header["urgency"], URGENCY_LEVELS, "urgency"),
        category=_label(category, CATEGORIES, "category") if category else None,
        deadline_days=int(deadline) if deadline is not None else None,
        source=header.get("source", "unknown"),
        notes=header.get("notes", ""),
    )


def parse_all_corpora(corpus_dir: str | Path) -> list[CalibrationSample]:
    """All letters from every *.txt file in a directory, in file name order."""
    samples = []
    for path in sorted(Path(corpus_dir).glob("*.txt")):
        samples.extend(parse_corpus(path))
    return samples
