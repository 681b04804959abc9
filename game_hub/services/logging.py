"""Logging configuration for the Game Hub application."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LOG_FILE_NAME = "game-hub.log"
ERROR_LOG_FILE_NAME = "game-hub-error.log"

# Processors applied to structlog events and to plain stdlib records alike.
_SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


class LoggingService:
    """Routes structlog and stdlib logging through one set of handlers.

    Files always receive JSON lines. The console gets a readable rendering in
    development and JSON in production (``ENVIRONMENT`` variable), and is
    switched off entirely while the Textual UI owns the terminal.
    """

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
            tui_mode: If True, disable console logging so the UI is not corrupted
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = os.getenv("ENVIRONMENT", "development") == "development"

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    def configure(self) -> None:
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)

        if not self.tui_mode:
            root_logger.addHandler(self._console_handler())
        if self.log_dir:
            for handler in self._file_handlers(self.log_dir):
                root_logger.addHandler(handler)

        # httpx logs every request at INFO.
        logging.getLogger("httpx").setLevel(max(self.numeric_level, logging.WARNING))

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                *_SHARED_PROCESSORS,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def _formatter(renderer: Any) -> logging.Formatter:
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.numeric_level)
        if self.is_development:
            handler.setFormatter(self._formatter(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())))
        else:
            handler.setFormatter(self._formatter(structlog.processors.JSONRenderer()))
        return handler

    def _file_handlers(self, log_dir: Path) -> list[logging.Handler]:
        """Rotating application log plus an ERROR-only log, both JSON."""
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = self._formatter(structlog.processors.JSONRenderer())

        app_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / LOG_FILE_NAME,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        app_handler.setLevel(self.numeric_level)
        app_handler.setFormatter(formatter)

        error_handler = logging.handlers.RotatingFileHandler(
            filename=log_dir / ERROR_LOG_FILE_NAME,
            maxBytes=1024 * 1024,
            backupCount=2,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        return [app_handler, error_handler]

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Configure application logging.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Environment name (development/production)
        tui_mode: If True, disable console logging

    Returns:
        Configured LoggingService instance
    """
    if environment:
        os.environ["ENVIRONMENT"] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service
