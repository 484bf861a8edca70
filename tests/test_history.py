"""
Tests for the bounded analysis history.
"""

import sqlite3

import pytest

from klartext.history import (
    HistoryStore,
    create_history_entry,
    extract_preview,
)
from klartext.scorer import analyze_text

LETTER = (
    "Sehr geehrter Herr Beispiel, wir kündigen hiermit die Kontopfändung an. "
    "Zahlen Sie den offenen Betrag innerhalb von 7 Tagen, um weitere Kosten zu vermeiden."
)


@pytest.fixture
def store(tmp_path):
    return HistoryStore(db_path=str(tmp_path / "history.db"), max_entries=3)


def _entry(text=LETTER, source="text"):
    return create_history_entry(analyze_text(text), text, source)


class TestProjection:

    def test_entry_carries_verdict_not_full_text(self):
        entry = _entry()
        assert entry.urgency == "red"
        assert entry.category == "enforcement"
        assert entry.input_source == "text"
        assert entry.preview != LETTER
        assert entry.preview.endswith("…")
        assert LETTER not in repr(entry)

    def test_match_projection(self):
        entry = _entry("Die Zwangsvollstreckung wurde aufgehoben.")
        match = entry.matches[0]
        assert match.keyword == "zwangsvollstreckung"
        assert match.weight == 100
        assert match.effective_weight == 0
        assert match.is_neutralized is True
        assert match.reason == 'Aufgehoben/Erledigt: "aufgehoben"'

    def test_unknown_input_source(self):
        with pytest.raises(ValueError):
            _entry(source="fax")

    def test_preview_short_text_unchanged(self):
        assert extract_preview("  Kurzer   Text\n") == "Kurzer Text"

    def test_preview_cuts_at_word_boundary(self):
        text = "wort " * 40
        preview = extract_preview(text)
        assert preview.endswith("…")
        assert len(preview) <= 101
        assert not preview[:-1].endswith(" ")

    def test_preview_without_late_space(self):
        text = "x" * 150
        assert extract_preview(text) == "x" * 100 + "…"


class TestStore:

    def test_save_and_get(self, store):
        entry = _entry()
        assert store.save(entry) == entry.id
        assert store.get(entry.id) == entry

    def test_get_missing(self, store):
        assert store.get("does-not-exist") is None

    def test_newest_first(self, store):
        first = _entry()
        second = _entry("Die Zwangsvollstreckung wurde aufgehoben.")
        store.save(first)
        store.save(second)
        assert [e.id for e in store.get_recent()] == [second.id, first.id]

    def test_bounded_to_max_entries(self, store):
        entries = [_entry() for _ in range(5)]
        for e in entries:
            store.save(e)
        assert store.get_count() == 3
        kept = [e.id for e in store.get_recent()]
        assert kept == [e.id for e in reversed(entries[2:])]

    def test_delete(self, store):
        entry = _entry()
        store.save(entry)
        assert store.delete(entry.id) is True
        assert store.delete(entry.id) is False
        assert store.get_count() == 0

    def test_clear(self, store):
        store.save(_entry())
        store.save(_entry())
        assert store.clear() == 2
        assert store.get_recent() == []

    def test_duplicate_id_propagates(self, store):
        entry = _entry()
        store.save(entry)
        with pytest.raises(sqlite3.IntegrityError):
            store.save(entry)
