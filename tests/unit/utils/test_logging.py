"""Tests for logging utilities module."""

import io
import json
import logging
import sys

import pytest

from richedit.utils.logging import (
    SafeStreamHandler,
    _filter_event_dict,
    _truncate_data_uris,
    get_logger,
    set_log_output,
    setup_logging,
)


@pytest.fixture
def log_stream():
    """Route console logging into a buffer for one test."""
    stream = io.StringIO()
    set_log_output(stream)
    yield stream
    set_log_output(sys.stderr)
    logging.getLogger().handlers.clear()


class TestSafeStreamHandler:
    """Tests for SafeStreamHandler class."""

    def test_emit_normal_message(self):
        """Test emitting a normal message."""
        stream = io.StringIO()
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="Image resized",
            args=(),
            exc_info=None,
        )

        handler.emit(record)
        assert "Image resized" in stream.getvalue()

    def test_emit_unencodable_message(self):
        """Characters the stream cannot encode are replaced."""
        raw = io.BytesIO()
        stream = io.TextIOWrapper(raw, encoding="ascii", errors="strict")
        handler = SafeStreamHandler(stream)
        handler.setFormatter(logging.Formatter("%(message)s"))

        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="",
            lineno=0,
            msg="café 🌍",
            args=(),
            exc_info=None,
        )

        handler.emit(record)
        stream.flush()
        assert raw.getvalue().startswith(b"caf?")


class TestTruncateDataUris:
    """Tests for _truncate_data_uris processor."""

    def test_truncates_data_uri(self):
        """Test that image payloads are replaced by their length."""
        event = {"event": "encoded", "uri": "data:image/png;base64," + "A" * 200}

        result = _truncate_data_uris(None, "info", event)

        assert result["uri"].startswith("data:image/png;base64,[BASE64:")
        assert "A" * 200 not in result["uri"]

    def test_truncates_plain_base64(self):
        event = {"event": "payload", "data": "A" * 600}

        result = _truncate_data_uris(None, "info", event)

        assert result["data"] == "[BASE64:600 chars]"

    def test_does_not_truncate_short_strings(self):
        event = {"event": "short", "uri": "data:image/png;base64,YWJj"}

        result = _truncate_data_uris(None, "info", event)

        assert result["uri"] == "data:image/png;base64,YWJj"

    def test_handles_non_string_values(self):
        event = {"event": "size", "width": 640}
        assert _truncate_data_uris(None, "info", event)["width"] == 640


class TestFilterEventDict:
    """Tests for _filter_event_dict processor."""

    def test_truncates_long_string(self):
        event = {"event": "long", "html": "x" * 1000}

        result = _filter_event_dict(None, "info", event)

        assert result["html"].startswith("x" * 500)
        assert result["html"].endswith("[1000 chars total]")

    def test_handles_binary_data(self):
        event = {"event": "bytes", "data": b"\x89PNG" * 10}

        result = _filter_event_dict(None, "info", event)

        assert result["data"] == "[BINARY DATA: 40 bytes]"

    def test_handles_memoryview(self):
        event = {"event": "view", "data": memoryview(bytearray(12))}
        assert _filter_event_dict(None, "info", event)["data"] == "[BINARY DATA: 12 bytes]"

    def test_does_not_truncate_short_string(self):
        event = {"event": "short", "name": "photo.png"}
        assert _filter_event_dict(None, "info", event)["name"] == "photo.png"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_root_logger(self, log_stream):  # noqa: ARG002
        """Test that root logger is configured."""
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG

    def test_console_output(self, log_stream):
        setup_logging(level="INFO")

        get_logger("richedit.test").info("Selection captured", text_length=4)

        output = log_stream.getvalue()
        assert "Selection captured" in output
        assert "text_length" in output

    def test_level_filters(self, log_stream):
        setup_logging(level="WARNING")

        get_logger("richedit.test").info("hidden message")

        assert "hidden message" not in log_stream.getvalue()

    def test_json_format(self, log_stream):
        setup_logging(level="INFO", json_format=True)

        get_logger("richedit.test").warning("Could not decode image", name="broken.png")

        line = log_stream.getvalue().strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "Could not decode image"
        assert payload["name"] == "broken.png"
        assert payload["level"] == "warning"

    def test_supports_file_logging(self, log_stream, tmp_path):  # noqa: ARG002
        """Test file logging configuration."""
        log_file = tmp_path / "logs" / "richedit.log"

        setup_logging(level="INFO", log_file=str(log_file))
        logging.getLogger("test").info("Test message")

        assert log_file.exists()
        assert "Test message" in log_file.read_text(encoding="utf-8")

    def test_suppresses_noisy_loggers(self, log_stream):  # noqa: ARG002
        setup_logging(level="DEBUG")

        assert logging.getLogger("PIL").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_logger_with_methods(self):
        logger = get_logger("richedit.test")

        assert hasattr(logger, "debug")
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
        assert hasattr(logger, "error")
