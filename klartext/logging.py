"""
Structured Logging

Log lines carry the verdict fields (urgency, score, category) as
structured extras, so analyses can be filtered without parsing message
text. Production emits one JSON object per line; development gets a
readable line with the extras appended as key=value pairs.

Usage:
    from klartext.logging import get_logger
    logger = get_logger("api")
    logger.info("Letter analyzed", extra={"urgency": "red", "score": 100})

Library modules log through logging.getLogger(__name__), which lands
under the same "klartext" namespace.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

LOG_LEVEL = os.getenv("KLARTEXT_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("KLARTEXT_LOG_FORMAT", "json")  # "json" or "text"

# Extras copied into the output; anything else passed via extra= is dropped
EXTRA_FIELDS = (
    "urgency", "score", "category", "matches_count", "neutralized_count",
    "input_source", "entry_id", "deleted", "engine_version",
    "method", "path", "status_code", "duration_ms",
    "error", "error_type",
)


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: getattr(record, key)
        for key in EXTRA_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record. Umlauts are written as-is."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += "  " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Configure the "klartext" logger. Call once at app startup.

    Safe to call again: existing handlers are replaced, not stacked.
    """
    level = (level or LOG_LEVEL).upper()
    fmt = fmt or LOG_FORMAT

    root = logging.getLogger("klartext")
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Named logger under the klartext namespace."""
    return logging.getLogger(f"klartext.{name}")
