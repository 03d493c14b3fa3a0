"""
Logging configuration for pyscout.

A thin layer over the standard ``logging`` module: one named logger
(``pyscout``), console output on stderr, optional rotating log file, and four
output formats. Keyword arguments passed to the SearchLogger helpers travel as
``extra`` fields, which the json and structured formats print alongside the
message. Warnings about skipped files and directories are emitted through
this logger.

Example:
    >>> from pyscout.utils.logging_config import LogFormat, LogLevel, configure_logging
    >>> log = configure_logging(level=LogLevel.INFO, format_type=LogFormat.STRUCTURED)
    >>> log.log_file_error("src/locked.rs", "Permission denied")
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import orjson

# Keys present on a bare LogRecord; anything else arrived through ``extra``.
_RECORD_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


class LogLevel(str, Enum):
    """Available log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def levelno(self) -> int:
        return logging.getLevelName(self.value)


class LogFormat(str, Enum):
    """Available log formats."""

    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"
    STRUCTURED = "structured"


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_KEYS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line: level, logger, message, source and extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": record.created,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
            **_extra_fields(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str).decode()


class StructuredFormatter(logging.Formatter):
    """``time [LEVEL] logger: message | key=value ...`` for people reading logs."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{self.formatTime(record)} [{record.levelname}] {record.name}: {record.getMessage()}"
        extras = _extra_fields(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


_FORMATTERS: dict[LogFormat, Any] = {
    LogFormat.SIMPLE: lambda: logging.Formatter("%(levelname)s: %(message)s"),
    LogFormat.DETAILED: lambda: logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
    ),
    LogFormat.JSON: JsonFormatter,
    LogFormat.STRUCTURED: StructuredFormatter,
}


class SearchLogger:
    """
    The ``pyscout`` logger plus the handlers one configuration asks for.

    Creating a SearchLogger for a name that already has handlers closes and
    replaces them, so reconfiguring never duplicates output.
    """

    def __init__(
        self,
        name: str = "pyscout",
        level: LogLevel = LogLevel.WARNING,
        format_type: LogFormat = LogFormat.SIMPLE,
        log_file: Path | None = None,
        max_file_size: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        enable_console: bool = True,
        enable_file: bool = False,
    ):
        self.name = name
        self.level = level
        self.format_type = format_type
        self.log_file = log_file

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.levelno)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if enable_console:
            self._attach(logging.StreamHandler(sys.stderr))
        if enable_file and log_file is not None:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            self._attach(
                logging.handlers.RotatingFileHandler(
                    log_file, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
                )
            )

    def _attach(self, handler: logging.Handler) -> None:
        handler.setLevel(self.level.levelno)
        handler.setFormatter(_FORMATTERS[self.format_type]())
        self.logger.addHandler(handler)

    def debug(self, message: str, **fields: Any) -> None:
        self.logger.debug(message, extra=fields)

    def info(self, message: str, **fields: Any) -> None:
        self.logger.info(message, extra=fields)

    def warning(self, message: str, **fields: Any) -> None:
        self.logger.warning(message, extra=fields)

    def log_search_start(self, pattern: str, root: str, **fields: Any) -> None:
        self.info(
            f"Starting search for pattern: '{pattern}' under: {root}",
            operation="search_start",
            pattern=pattern,
            root=root,
            **fields,
        )

    def log_search_complete(
        self, pattern: str, results_count: int, elapsed_ms: float, **fields: Any
    ) -> None:
        self.info(
            f"Search for '{pattern}' finished: {results_count} matches in {elapsed_ms:.2f}ms",
            operation="search_complete",
            pattern=pattern,
            results_count=results_count,
            elapsed_ms=elapsed_ms,
            **fields,
        )

    def log_file_error(
        self, file_path: str, error: str, operation: str = "file_error", **fields: Any
    ) -> None:
        """Warn about a file that was skipped because it could not be read."""
        self.warning(
            f"Skipping {file_path}: {error}",
            operation=operation,
            file_path=file_path,
            error=error,
            **fields,
        )

    def log_dir_error(self, dir_path: str, error: str, **fields: Any) -> None:
        """Warn about a directory whose entries could not be listed."""
        self.warning(
            f"Skipping directory {dir_path}: {error}",
            operation="dir_error",
            dir_path=dir_path,
            error=error,
            **fields,
        )


_global_logger: SearchLogger | None = None


def get_logger() -> SearchLogger:
    """Return the process-wide SearchLogger, creating a default one on first use."""
    global _global_logger
    if _global_logger is None:
        _global_logger = SearchLogger()
    return _global_logger


def configure_logging(
    level: LogLevel = LogLevel.WARNING,
    format_type: LogFormat = LogFormat.SIMPLE,
    log_file: Path | None = None,
    enable_console: bool = True,
    enable_file: bool = False,
    **kwargs: Any,
) -> SearchLogger:
    """Replace the process-wide SearchLogger with a freshly configured one."""
    global _global_logger
    _global_logger = SearchLogger(
        level=level,
        format_type=format_type,
        log_file=log_file,
        enable_console=enable_console,
        enable_file=enable_file,
        **kwargs,
    )
    return _global_logger


def disable_logging() -> None:
    get_logger().logger.setLevel(logging.CRITICAL + 1)


def enable_debug_logging() -> None:
    log = get_logger()
    log.level = LogLevel.DEBUG
    log.logger.setLevel(logging.DEBUG)
    for handler in log.logger.handlers:
        handler.setLevel(logging.DEBUG)
