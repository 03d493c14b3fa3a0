"""
Utility modules shared across pyscout.

- Error types and the recoverable-error collector
- Logging configuration
- Text, byte and span helpers

Output rendering lives in ``pyscout.utils.formatter``; it depends on the core
result types and is imported from there directly.
"""

from .error_handling import (
    ConfigurationError,
    ErrorCollector,
    FileAccessError,
    FileTooLargeError,
    PatternError,
    PermissionError,
    RootNotFoundError,
    SearchCancelledError,
    SearchError,
    create_error_report,
    handle_file_error,
)
from .helpers import decode_text, highlight_spans, looks_binary, split_lines
from .logging_config import configure_logging, disable_logging, enable_debug_logging, get_logger

__all__ = [
    # Error handling
    "ConfigurationError",
    "ErrorCollector",
    "FileAccessError",
    "FileTooLargeError",
    "PatternError",
    "PermissionError",
    "RootNotFoundError",
    "SearchCancelledError",
    "SearchError",
    "create_error_report",
    "handle_file_error",
    # Helpers
    "decode_text",
    "highlight_spans",
    "looks_binary",
    "split_lines",
    # Logging
    "configure_logging",
    "disable_logging",
    "enable_debug_logging",
    "get_logger",
]
