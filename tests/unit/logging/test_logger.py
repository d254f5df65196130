# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py: logger factory and formatters."""

from __future__ import annotations

import json
import logging

import pytest

from cropwatch.logging.context import set_request_context, set_step_context
from cropwatch.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def _detach_handlers():
    yield
    root = logging.getLogger("cropwatch")
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("req1", "crop_001")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {"crop_id": "crop_001", "request_id": "req1"}

    def test_format_with_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"slot": 1})))
        assert parsed["data"] == {"slot": 1}


class TestTextFormatter:
    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_request_and_step(self):
        set_request_context("req9")
        set_step_context("normalize")
        output = TextFormatter().format(_record())
        assert "[req9]" in output
        assert "(normalize)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("facade").name == "cropwatch.facade"


class TestSetupLogging:
    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("cropwatch")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text_with_file(self, tmp_path):
        setup_logging(level="INFO", log_format="text", log_file=str(tmp_path / "cw.log"))
        root = logging.getLogger("cropwatch")
        try:
            assert root.level == logging.INFO
            assert len(root.handlers) == 2
            assert all(isinstance(h.formatter, TextFormatter) for h in root.handlers)
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("cropwatch").handlers) == 1
