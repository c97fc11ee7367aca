"""Logging configuration for the Steamcodle application."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

ENVIRONMENT_VAR = "STEAMCODLE_ENV"


class LoggingService:
    """Configures structlog on top of the standard library logging module."""

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for rotating log files (None for console only)
            tui_mode: Suppress console output so the terminal UI stays intact
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = os.getenv(ENVIRONMENT_VAR, "development") == "development"
        self._leveled_handlers: list[logging.Handler] = []

    def configure(self) -> None:
        """Configure stdlib handlers and the structlog processor chain."""
        self._configure_stdlib_logging()

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _configure_stdlib_logging(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        self._leveled_handlers = []

        numeric_level = getattr(logging, self.log_level, logging.INFO)
        root_logger.setLevel(numeric_level)

        # httpx logs every request at INFO; our client already does.
        logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

        if not self.tui_mode:
            # stdout is reserved for --no-tui JSON output.
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(logging.Formatter("%(message)s"))
            root_logger.addHandler(console_handler)
            self._leveled_handlers.append(console_handler)

        if self.log_dir:
            self._setup_file_logging(root_logger, self.log_dir, numeric_level)

    def _setup_file_logging(self, root_logger: logging.Logger, log_dir: Path, level: int) -> None:
        """Rotating game log plus a separate errors-only log."""
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = logging.Formatter("%(message)s")

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "steamcodle.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        self._leveled_handlers.append(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / "errors.log",
            maxBytes=1024 * 1024,
            backupCount=2,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    def _get_processors(self) -> list[Any]:
        processors: list[Any] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        # Files always get JSON; a development console gets colours.
        if self.is_development and not self.log_dir and not self.tui_mode:
            return processors + [structlog.dev.ConsoleRenderer(colors=True)]
        return processors + [structlog.processors.JSONRenderer()]

    def set_level(self, log_level: str) -> None:
        """Change the minimum level of an already configured service.

        The errors-only file keeps its ERROR threshold.
        """
        self.log_level = log_level.upper()
        numeric_level = getattr(logging, self.log_level, logging.INFO)
        logging.getLogger().setLevel(numeric_level)
        logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
        for handler in self._leveled_handlers:
            handler.setLevel(numeric_level)

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Set up application logging and return the configured service."""
    if environment:
        os.environ[ENVIRONMENT_VAR] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service
