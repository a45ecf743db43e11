"""Unit tests for logging infrastructure."""

import json
import logging
import sys

import pytest

from pantry_chef.utils.logger import JSONFormatter, RichTextFormatter, get_logger, logger


def make_record(msg="Test message", level=logging.INFO, name="test_logger", exc_info=None):
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture
def fresh_logger_name():
    """Yield a logger name with no handlers attached, cleaned up afterwards."""
    name = "pantry_chef_test_fresh"
    logging.getLogger(name).handlers.clear()
    yield name
    logging.getLogger(name).handlers.clear()


class TestJSONFormatter:
    """Test JSONFormatter produces valid JSON output."""

    def test_json_formatter_outputs_valid_json(self):
        output = JSONFormatter().format(make_record())
        parsed = json.loads(output)

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert "timestamp" in parsed

    def test_json_formatter_includes_exception_traceback(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            record = make_record("Error occurred", logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(JSONFormatter().format(record))

        assert "exception" in parsed
        assert "ValueError" in parsed["exception"]

    def test_json_formatter_includes_workflow_context(self):
        record = make_record()
        record.request_id = 7
        record.phase = "GENERATING_IMAGES"

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["request_id"] == 7
        assert parsed["phase"] == "GENERATING_IMAGES"

    def test_json_formatter_omits_absent_context(self):
        parsed = json.loads(JSONFormatter().format(make_record()))
        assert "request_id" not in parsed
        assert "phase" not in parsed


class TestRichTextFormatter:
    """Test RichTextFormatter produces colored text output."""

    @pytest.mark.parametrize(
        "level,icon",
        [
            (logging.DEBUG, "🔍"),
            (logging.INFO, "🍳"),
            (logging.WARNING, "⚠️"),
            (logging.ERROR, "❌"),
        ],
    )
    def test_includes_level_icon(self, level, icon):
        assert icon in RichTextFormatter().format(make_record(level=level))

    def test_includes_level_logger_and_message(self):
        output = RichTextFormatter().format(make_record("Custom message", name="my_logger"))

        assert "INFO" in output
        assert "my_logger" in output
        assert "Custom message" in output

    def test_prefixes_request_id_when_present(self):
        record = make_record()
        record.request_id = 3

        assert "[req 3]" in RichTextFormatter().format(record)

    def test_includes_exception_traceback(self):
        try:
            raise RuntimeError("Test error")
        except RuntimeError:
            record = make_record("Error occurred", logging.ERROR, exc_info=sys.exc_info())

        output = RichTextFormatter().format(record)
        assert "RuntimeError" in output
        assert "Test error" in output


class TestGetLogger:
    """Test get_logger function."""

    def test_returns_same_configured_instance(self, fresh_logger_name):
        first = get_logger(fresh_logger_name)
        second = get_logger(fresh_logger_name)

        assert first is second
        assert len(second.handlers) == 1

    def test_respects_log_level_env(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert get_logger(fresh_logger_name).level == logging.DEBUG

    def test_invalid_log_level_defaults_to_info(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_LEVEL", "INVALID")
        assert get_logger(fresh_logger_name).level == logging.INFO

    def test_log_type_json_uses_json_formatter(self, monkeypatch, fresh_logger_name):
        monkeypatch.setenv("LOG_TYPE", "json")
        handler = get_logger(fresh_logger_name).handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)

    def test_log_type_defaults_to_text(self, monkeypatch, fresh_logger_name):
        monkeypatch.delenv("LOG_TYPE", raising=False)
        handler = get_logger(fresh_logger_name).handlers[0]
        assert isinstance(handler.formatter, RichTextFormatter)


class TestModuleLevelLogger:
    """Test module-level logger instance."""

    def test_logger_is_configured(self):
        assert isinstance(logger, logging.Logger)
        assert logger.name == "pantry_chef"
        assert len(logger.handlers) > 0

    def test_third_party_loggers_quietened(self):
        assert logging.getLogger("google.genai").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING
