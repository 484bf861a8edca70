"""
Tests for logging and configuration.
"""

import json
import logging

import pytest


def _record(msg="Test message"):
    return logging.LogRecord(
        name="klartext.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestLogging:
    """Structured logging tests."""

    def test_json_formatter(self):
        from klartext.logging import JSONFormatter

        parsed = json.loads(JSONFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "klartext.test"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        from klartext.logging import JSONFormatter

        record = _record("Letter analyzed")
        record.urgency = "yellow"
        record.score = 72
        record.unrelated = "dropped"
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["urgency"] == "yellow"
        assert parsed["score"] == 72
        assert "unrelated" not in parsed

    def test_json_formatter_history_fields(self):
        from klartext.logging import JSONFormatter

        record = _record("History cleared")
        record.deleted = 3
        assert json.loads(JSONFormatter().format(record))["deleted"] == 3

    def test_json_formatter_keeps_umlauts(self):
        from klartext.logging import JSONFormatter

        output = JSONFormatter().format(_record("Pfändung erkannt"))
        assert "Pfändung" in output

    def test_text_formatter_appends_extras(self):
        from klartext.logging import TextFormatter

        record = _record("Letter analyzed")
        record.urgency = "red"
        output = TextFormatter().format(record)
        assert "klartext.test: Letter analyzed" in output
        assert output.endswith("urgency=red")

    def test_get_logger(self):
        from klartext.logging import get_logger
        log = get_logger("scorer")
        assert log.name == "klartext.scorer"

    def test_setup_logging_installs_one_handler(self):
        from klartext.logging import setup_logging
        setup_logging()
        root = setup_logging()
        assert root.name == "klartext"
        assert len(root.handlers) == 1


class TestSettings:

    def test_defaults(self):
        from klartext.config import settings
        assert settings.ENGINE_VERSION
        assert settings.MIN_TEXT_LENGTH < settings.MAX_TEXT_LENGTH
        assert settings.HISTORY_MAX_ENTRIES > 0

    def test_settings_are_frozen(self):
        from dataclasses import FrozenInstanceError
        from klartext.config import settings
        with pytest.raises(FrozenInstanceError):
            settings.MIN_TEXT_LENGTH = 1

    def test_history_db_points_at_test_location(self):
        import os
        from klartext.config import settings
        assert settings.HISTORY_DB_PATH == os.environ["KLARTEXT_HISTORY_DB"]
