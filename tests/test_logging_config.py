"""Tests for logging configuration module."""

from __future__ import annotations

import json
import logging
import os
from io import StringIO
from unittest.mock import patch

import pytest

from evoroulette.logging_config import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_log_format,
    get_log_level,
    get_logger,
)


def _record(
    name: str = "evoroulette.game.controller",
    level: int = logging.INFO,
    msg: str = "Message",
    args: tuple[object, ...] = (),
    **extra: object,
) -> logging.LogRecord:
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="/src/evoroulette/game/controller.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )
    record.filename = "controller.py"
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestGetLogLevel:
    """Tests for get_log_level function."""

    def test_default_is_info(self) -> None:
        """Default log level should be INFO."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_level() == logging.INFO

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("WARN", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("nonsense", logging.INFO),
        ],
    )
    def test_reads_environment(self, value: str, expected: int) -> None:
        """LOG_LEVEL is case insensitive and falls back to INFO."""
        with patch.dict(os.environ, {"LOG_LEVEL": value}):
            assert get_log_level() == expected


class TestGetLogFormat:
    """Tests for get_log_format function."""

    def test_default_is_text(self) -> None:
        """Default log format should be text."""
        with patch.dict(os.environ, {}, clear=True):
            assert get_log_format() == "text"

    def test_json_case_insensitive(self) -> None:
        """LOG_FORMAT=JSON should return json."""
        with patch.dict(os.environ, {"LOG_FORMAT": "JSON"}):
            assert get_log_format() == "json"

    def test_invalid_format_defaults_to_text(self) -> None:
        """Invalid log format should default to text."""
        with patch.dict(os.environ, {"LOG_FORMAT": "yaml"}):
            assert get_log_format() == "text"


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_formats_as_valid_json(self) -> None:
        """Output should be valid JSON with the core fields."""
        data = json.loads(JSONFormatter().format(_record(msg="Spun %d times", args=(3,))))

        assert data["message"] == "Spun 3 times"
        assert data["level"] == "INFO"
        assert data["logger"] == "evoroulette.game.controller"
        assert "timestamp" in data
        assert "source" not in data

    def test_promotes_session_id(self) -> None:
        """session_id passed via extra becomes a top level key."""
        data = json.loads(JSONFormatter().format(_record(session_id="abc-123")))

        assert data["session_id"] == "abc-123"
        assert "extra" not in data

    def test_other_extras_are_nested(self) -> None:
        """Extras other than session_id are kept under 'extra'."""
        data = json.loads(JSONFormatter().format(_record(branch="image")))

        assert data["extra"] == {"branch": "image"}

    def test_includes_source_for_error(self) -> None:
        """Error logs should include source location."""
        data = json.loads(JSONFormatter().format(_record(level=logging.ERROR)))

        assert data["source"]["line"] == 42
        assert data["source"]["file"] == "/src/evoroulette/game/controller.py"


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_shortens_logger_name(self) -> None:
        """Logger names under evoroulette should be shortened."""
        output = TextFormatter(use_colors=False).format(_record(name="evoroulette.server.app"))

        assert "[server.app]" in output
        assert "evoroulette.server.app" not in output

    def test_shows_short_session_id(self) -> None:
        """The session id is shown truncated to eight characters."""
        output = TextFormatter(use_colors=False).format(
            _record(msg="Session restarted", session_id="0123456789abcdef")
        )

        assert "(01234567) Session restarted" in output
        assert "89abcdef" not in output

    def test_includes_source_for_debug(self) -> None:
        """Debug logs should include file:line."""
        output = TextFormatter(use_colors=False).format(_record(level=logging.DEBUG))

        assert "controller.py:42" in output


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configures_package_logger(self) -> None:
        """Should configure the evoroulette logger with a single handler."""
        configure_logging(level=logging.DEBUG, format_type="text")
        logger = logging.getLogger("evoroulette")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_reads_from_environment(self) -> None:
        """Should read level and format from environment."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING", "LOG_FORMAT": "json"}):
            configure_logging()

        logger = logging.getLogger("evoroulette")
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_access_log_shares_handler(self) -> None:
        """uvicorn access logs go through the same handler."""
        configure_logging(level=logging.INFO, format_type="json")

        package_handler = logging.getLogger("evoroulette").handlers[0]
        assert logging.getLogger("uvicorn.access").handlers == [package_handler]

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        """Calling twice leaves one handler."""
        configure_logging(level=logging.INFO, format_type="text")
        configure_logging(level=logging.INFO, format_type="text")

        assert len(logging.getLogger("evoroulette").handlers) == 1


class TestGetLogger:
    """Tests for get_logger convenience function."""

    def test_prefixes_namespace(self) -> None:
        """Should prefix other names with evoroulette."""
        assert get_logger("my_module").name == "evoroulette.my_module"

    def test_preserves_namespace_prefix(self) -> None:
        """Should not double-prefix evoroulette names."""
        assert get_logger("evoroulette.server").name == "evoroulette.server"


class TestIntegration:
    """Integration tests for logging."""

    def test_session_adapter_to_stream(self) -> None:
        """A LoggerAdapter carrying session_id reaches the JSON output."""
        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(JSONFormatter())

        logger = logging.getLogger("evoroulette.test_integration")
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        logging.LoggerAdapter(logger, {"session_id": "s-1"}).warning("Refused %s", "spin")

        data = json.loads(buffer.getvalue().strip())
        assert data["message"] == "Refused spin"
        assert data["session_id"] == "s-1"
        logger.handlers.clear()
