"""
History Store — Bounded Analysis History

Keeps the most recent analyses in a local SQLite database so a user can
revisit earlier verdicts. Only a reduced projection is stored: the
verdict, a short preview and the per-keyword decisions. The full letter
text never touches the database.

The store is bounded: once it holds more than max_entries rows, the
oldest rows are dropped on the next save.
"""

from __future__ import annotations

import json
import re
import secrets
import sqlite3
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Optional

from klartext.scorer import ScoringResult

INPUT_SOURCES: tuple[str, ...] = ("pdf", "camera", "text")

INPUT_SOURCE_LABELS: dict[str, str] = {
    "pdf": "PDF",
    "camera": "Kamera",
    "text": "Text",
}

PREVIEW_CHARS = 100
PREVIEW_MIN_WORD_CUT = 60


@dataclass(frozen=True)
class HistoryMatch:
    keyword: str
    weight: int             # Original dictionary weight
    effective_weight: int
    is_neutralized: bool
    reason: str


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    timestamp: int          # Milliseconds since the epoch
    input_source: str
    urgency: str
    score: int
    category: str
    category_label: str
    preview: str
    summary: str
    matches: list[HistoryMatch] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        data = dict(data)
        data["matches"] = [HistoryMatch(**m) for m in data.get("matches", [])]
        return cls(**data)


# ============================================================
# PROJECTION
# ============================================================

def generate_entry_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def extract_preview(text: str) -> str:
    """First ~100 characters, cut at a word boundary when one is close."""
    cleaned = re.sub(r"\s+", " ", text).strip()
    if len(cleaned) <= PREVIEW_CHARS:
        return cleaned

    truncated = cleaned[:PREVIEW_CHARS]
    last_space = truncated.rfind(" ")
    if last_space > PREVIEW_MIN_WORD_CUT:
        return truncated[:last_space] + "…"
    return truncated + "…"


def create_history_entry(
    result: ScoringResult,
    raw_text: str,
    input_source: str = "text",
) -> HistoryEntry:
    """Build the privacy-preserving history projection of one analysis."""
    if input_source not in INPUT_SOURCES:
        raise ValueError(f"Unknown input source: {input_source}")

    return HistoryEntry(
        id=generate_entry_id(),
        timestamp=int(time.time() * 1000),
        input_source=input_source,
        urgency=result.urgency,
        score=result.score,
        category=result.category,
        category_label=result.category_label,
        preview=extract_preview(raw_text),
        summary=result.summary,
        matches=[
            HistoryMatch(
                keyword=m.keyword,
                weight=m.original_weight,
                effective_weight=m.effective_weight,
                is_neutralized=m.is_neutralized,
                reason=m.reason,
            )
            for m in result.matches
        ],
        recommendations=list(result.recommendations),
    )


# ============================================================
# STORAGE
# ============================================================

class HistoryStore:
    """Newest-first analysis history backed by SQLite."""

    def __init__(self, db_path: str = "klartext_history.db", max_entries: int = 20):
        self.db_path = db_path
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._init_db()

    def _init_db(self):
        with self._get_conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS history (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    timestamp INTEGER NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def save(self, entry: HistoryEntry) -> str:
        """Store an entry and drop anything beyond max_entries. Returns the entry id."""
        with self._lock:
            with self._get_conn() as conn:
                conn.execute(
                    "INSERT INTO history (id, timestamp, data) VALUES (?, ?, ?)",
                    (entry.id, entry.timestamp, json.dumps(entry.to_dict(), ensure_ascii=False)),
                )
                conn.execute(
                    """DELETE FROM history WHERE seq NOT IN (
                           SELECT seq FROM history ORDER BY seq DESC LIMIT ?
                       )""",
                    (self.max_entries,),
                )
                conn.commit()
        return entry.id

    def get_recent(self, limit: Optional[int] = None) -> list[HistoryEntry]:
        """Entries newest first."""
        limit = self.max_entries if limit is None else limit
        with self._get_conn() as conn:
            rows = conn.execute(
                "SELECT data FROM history ORDER BY seq DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [HistoryEntry.from_dict(json.loads(r[0])) for r in rows]

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        with self._get_conn() as conn:
            row = conn.execute(
                "SELECT data FROM history WHERE id = ?", (entry_id,),
            ).fetchone()
        return HistoryEntry.from_dict(json.loads(row[0])) if row else None

    def delete(self, entry_id: str) -> bool:
        """Delete one entry. Returns False if it did not exist."""
        with self._lock:
            with self._get_conn() as conn:
                cursor = conn.execute("DELETE FROM history WHERE id = ?", (entry_id,))
                conn.commit()
                return cursor.rowcount > 0

    def clear(self) -> int:
        """Delete every entry. Returns the number removed."""
        with self._lock:
            with self._get_conn() as conn:
                cursor = conn.execute("DELETE FROM history")
                conn.commit()
                return cursor.rowcount

    def get_count(self) -> int:
        with self._get_conn() as conn:
            row = conn.execute("SELECT COUNT(*) FROM history").fetchone()
            return row[0] if row else 0


def _get_history_store() -> HistoryStore:
    """Factory — reads db path and size limit from config."""
    from klartext.config import settings
    return HistoryStore(
        db_path=settings.HISTORY_DB_PATH,
        max_entries=settings.HISTORY_MAX_ENTRIES,
    )


history_store = _get_history_store()
