"""Tests for the logging service."""

import json
import logging
import os
import tempfile
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import structlog
from hypothesis import given, settings, strategies as st

from steamcodle.services.logging import ENVIRONMENT_VAR, LoggingService, setup_logging

RESERVED_KEYS = {"self", "event", "level", "logger", "timestamp", "exc_info", "stack_info", "positional_args"}


def _close_root_handlers() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


class TestLoggingService:
    def test_development_console_is_human_readable(self) -> None:
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "development"}):
            with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
                service = LoggingService(log_level="INFO")
                service.configure()
                service.get_logger("test").info("round started", app_id=620)
                output = mock_stderr.getvalue()

        assert "round started" in output
        assert not output.strip().startswith("{")
        _close_root_handlers()

    def test_production_console_is_json(self) -> None:
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "production"}):
            with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
                service = LoggingService(log_level="INFO")
                service.configure()
                service.get_logger("test").info("round started", app_id=620)
                output = mock_stderr.getvalue()

        parsed = json.loads(output.strip().splitlines()[0])
        assert parsed["event"] == "round started"
        assert parsed["app_id"] == 620
        assert "timestamp" in parsed
        assert parsed["level"] == "info"
        _close_root_handlers()

    def test_file_logging_writes_json(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            log_dir = Path(temp_dir)
            service = LoggingService(log_level="INFO", log_dir=log_dir, tui_mode=True)
            service.configure()

            logger = service.get_logger("test")
            logger.info("catalog refreshed", source="featured")
            logger.error("round fetch failed", error_code=502)

            game_lines = (log_dir / "steamcodle.log").read_text().strip().splitlines()
            error_lines = (log_dir / "errors.log").read_text().strip().splitlines()
            _close_root_handlers()

        assert json.loads(game_lines[0])["source"] == "featured"
        assert len(error_lines) == 1
        parsed = json.loads(error_lines[0])
        assert parsed["event"] == "round fetch failed"
        assert parsed["error_code"] == 502

    def test_tui_mode_has_no_console_handler(self) -> None:
        LoggingService(log_level="INFO", tui_mode=True).configure()

        stream_handlers = [
            h for h in logging.getLogger().handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert stream_handlers == []
        _close_root_handlers()

    def test_httpx_request_logs_are_quieted(self) -> None:
        LoggingService(log_level="DEBUG", tui_mode=True).configure()

        assert logging.getLogger("httpx").level == logging.WARNING
        _close_root_handlers()

    def test_set_level_relevels_handlers_but_not_error_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            service = LoggingService(log_level="INFO", log_dir=Path(temp_dir))
            service.configure()

            service.set_level("debug")

            root = logging.getLogger()
            levels = {getattr(h, "baseFilename", "console").rsplit("/", 1)[-1]: h.level for h in root.handlers}
            _close_root_handlers()

        assert service.log_level == "DEBUG"
        assert root.level == logging.DEBUG
        assert levels["console"] == logging.DEBUG
        assert levels["steamcodle.log"] == logging.DEBUG
        assert levels["errors.log"] == logging.ERROR

    def test_setup_logging_sets_environment(self) -> None:
        with patch.dict(os.environ, {}, clear=False):
            service = setup_logging(log_level="warning", environment="production", tui_mode=True)

            assert os.environ[ENVIRONMENT_VAR] == "production"
            assert not service.is_development
            assert service.log_level == "WARNING"
        _close_root_handlers()


class TestStructuredLoggingProperties:
    @given(
        log_level=st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
        message=st.text(min_size=1, max_size=200),
        context_data=st.dictionaries(
            keys=st.text(min_size=1, max_size=20).filter(
                lambda x: x.isidentifier() and not x.startswith("_") and x not in RESERVED_KEYS
            ),
            values=st.one_of(st.text(max_size=100), st.integers(), st.booleans()),
            max_size=5,
        ),
    )
    @settings(deadline=None)
    def test_events_keep_their_context(
        self,
        log_level: str,
        message: str,
        context_data: dict[str, str | int | bool],
    ) -> None:
        """Every logged event carries its message, level and key/value context."""
        with patch.dict(os.environ, {ENVIRONMENT_VAR: "production"}):
            with patch("sys.stderr", new_callable=StringIO) as mock_stderr:
                service = LoggingService(log_level="DEBUG")
                service.configure()
                logger = service.get_logger("steamcodle")
                getattr(logger, log_level.lower())(message, **context_data)
                output = mock_stderr.getvalue()
        _close_root_handlers()
        structlog.reset_defaults()

        parsed = json.loads(output.strip().splitlines()[-1])
        assert parsed["event"] == message
        assert parsed["level"] == log_level.lower()
        for key, value in context_data.items():
            assert parsed[key] == value
