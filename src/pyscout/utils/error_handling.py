"""
Error handling and reporting for pyscout.

This module defines the exception hierarchy raised by the search engine and a
collector used to record recoverable problems (unreadable files, unopenable
directories) without aborting a search.

Error taxonomy:
    Fatal (raised to the caller before any output):
        - PatternError: the search pattern does not compile
        - RootNotFoundError: the search root is missing or not a directory
        - ConfigurationError: the configuration is invalid
    Recoverable (collected, counted as skipped, logged as warnings):
        - FileAccessError: a file vanished or could not be opened
        - PermissionError: access to a file or directory was denied
        - FileTooLargeError: a file exceeds the configured size limit
    Control flow:
        - SearchCancelledError: the search was cancelled by the caller

Example:
    >>> from pyscout.utils.error_handling import ErrorCollector, handle_file_error
    >>> from pathlib import Path
    >>>
    >>> collector = ErrorCollector()
    >>> try:
    ...     Path("missing.txt").read_bytes()
    ... except OSError as e:
    ...     handle_file_error(Path("missing.txt"), "read", e, collector)
    >>> collector.get_summary()["total_errors"]
    1
"""

from __future__ import annotations

# The builtin is shadowed by this module's PermissionError below
import builtins
import threading
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

OSPermissionError = builtins.PermissionError


class ErrorSeverity(str, Enum):
    """How badly an error affects the search."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """What kind of problem an error reports."""

    FILE_ACCESS = "file_access"
    PERMISSION = "permission"
    ENCODING = "encoding"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


class SearchError(Exception):
    """
    Base class for every error pyscout raises.

    Subclasses pick their category, severity and default hints as class
    attributes; callers only supply the message and whatever path or context
    the error is about.
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    hints: tuple[str, ...] = ()

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        context: dict[str, Any] | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.file_path = file_path
        self.context: dict[str, Any] = dict(context or {})
        self.suggestions: list[str] = list(suggestions if suggestions is not None else self.hints)


class FileAccessError(SearchError):
    """A file or directory vanished or could not be opened."""

    category = ErrorCategory.FILE_ACCESS

    def __init__(
        self, message: str, file_path: Path, context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, file_path, context)


class PermissionError(SearchError):
    """The operating system refused access to a path."""

    category = ErrorCategory.PERMISSION
    severity = ErrorSeverity.HIGH
    hints = (
        "Check file permissions",
        "Run with appropriate user privileges",
        "Add the path to an ignore file",
    )

    def __init__(
        self, message: str, file_path: Path, context: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, file_path, context)


class FileTooLargeError(SearchError):
    """A file exceeds the configured size limit and was not read."""

    category = ErrorCategory.FILE_ACCESS
    severity = ErrorSeverity.LOW
    hints = ("Raise max_file_bytes", "Exclude large files via an ignore file")

    def __init__(self, file_path: Path, size: int, limit: int) -> None:
        super().__init__(
            f"File is {size} bytes, over the {limit} byte limit",
            file_path,
            {"size": size, "limit": limit},
        )


class PatternError(SearchError):
    """The search pattern could not be compiled."""

    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.CRITICAL
    hints = (
        "Check the regular expression syntax",
        "Drop --regex to search for the literal text",
    )

    def __init__(self, message: str, pattern: str, position: int | None = None) -> None:
        super().__init__(message, context={"pattern": pattern, "position": position})
        self.pattern = pattern
        self.position = position


class RootNotFoundError(SearchError):
    """The search root does not exist or is not a directory."""

    category = ErrorCategory.FILE_ACCESS
    severity = ErrorSeverity.CRITICAL
    hints = ("Check the --directory argument",)

    def __init__(self, root: Path) -> None:
        super().__init__(f"Search root not found or not a directory: {root}", root)


class ConfigurationError(SearchError):
    """A SearchConfig field holds an unusable value."""

    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.HIGH
    hints = ("Run pyscout --help for the accepted values",)

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, context=context)


class SearchCancelledError(SearchError):
    """The search was cancelled before it completed."""

    category = ErrorCategory.CANCELLED
    severity = ErrorSeverity.LOW

    def __init__(self, message: str = "Search cancelled") -> None:
        super().__init__(message)


def classify_exception(exception: BaseException) -> ErrorCategory:
    """Map a foreign exception onto an ErrorCategory."""
    if isinstance(exception, SearchError):
        return exception.category
    if isinstance(exception, OSPermissionError):
        return ErrorCategory.PERMISSION
    if isinstance(exception, UnicodeError):
        return ErrorCategory.ENCODING
    if isinstance(exception, OSError):
        return ErrorCategory.FILE_ACCESS
    return ErrorCategory.UNKNOWN


@dataclass
class ErrorInfo:
    """One recorded error, detached from the exception that caused it."""

    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    file_path: Path | None = None
    exception_type: str | None = None
    suggestions: list[str] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exception: BaseException, file_path: Path | None = None) -> ErrorInfo:
        if isinstance(exception, SearchError):
            return cls(
                category=exception.category,
                severity=exception.severity,
                message=exception.message,
                file_path=exception.file_path or file_path,
                exception_type=type(exception).__name__,
                suggestions=list(exception.suggestions),
            )
        return cls(
            category=classify_exception(exception),
            severity=ErrorSeverity.MEDIUM,
            message=str(exception),
            file_path=file_path,
            exception_type=type(exception).__name__,
        )


class ErrorCollector:
    """
    Thread-safe record of the recoverable errors met during one search.

    Only the first ``max_errors`` errors are kept in ``errors``; every error is
    still counted, so the summary totals stay exact on very noisy trees.
    """

    def __init__(self, max_errors: int = 100) -> None:
        self.max_errors = max_errors
        self.errors: list[ErrorInfo] = []
        self.suppressed_categories: set[ErrorCategory] = set()
        self._counts: Counter[ErrorCategory] = Counter()
        self._lock = threading.Lock()

    def add_error(self, exception: BaseException, file_path: Path | None = None) -> None:
        """Record ``exception`` unless its category is suppressed."""
        info = ErrorInfo.from_exception(exception, file_path)
        if info.category in self.suppressed_categories:
            return
        with self._lock:
            self._counts[info.category] += 1
            if len(self.errors) < self.max_errors:
                self.errors.append(info)

    def suppress_category(self, category: ErrorCategory) -> None:
        self.suppressed_categories.add(category)

    def unsuppress_category(self, category: ErrorCategory) -> None:
        self.suppressed_categories.discard(category)

    def get_errors_by_category(self, category: ErrorCategory) -> list[ErrorInfo]:
        with self._lock:
            return [e for e in self.errors if e.category == category]

    def has_critical_errors(self) -> bool:
        with self._lock:
            return any(e.severity == ErrorSeverity.CRITICAL for e in self.errors)

    def get_summary(self) -> dict[str, Any]:
        """Totals by category and severity, plus the suppression state."""
        with self._lock:
            severities = Counter(e.severity for e in self.errors)
            return {
                "total_errors": sum(self._counts.values()),
                "by_category": {c.value: n for c, n in self._counts.items()},
                "by_severity": {s.value: severities[s] for s in ErrorSeverity},
                "suppressed_categories": sorted(c.value for c in self.suppressed_categories),
                "has_critical": severities[ErrorSeverity.CRITICAL] > 0,
            }

    def clear(self) -> None:
        with self._lock:
            self.errors.clear()
            self._counts.clear()


def handle_file_error(
    file_path: Path,
    operation: str,
    exception: Exception,
    error_collector: ErrorCollector | None = None,
    logger: Any | None = None,
) -> SearchError:
    """
    Turn an exception met while touching ``file_path`` into a SearchError.

    The error is recorded in ``error_collector`` and reported through
    ``logger.log_file_error`` when those are given.

    Args:
        file_path: Path that caused the error
        operation: What was being done, e.g. "read" or "list"
        exception: The exception that was raised
        error_collector: Optional collector to record the error in
        logger: Optional SearchLogger to warn through

    Returns:
        The classified error; ``exception`` itself if it already is one
    """
    if isinstance(exception, SearchError):
        error = exception
    elif isinstance(exception, OSPermissionError):
        error = PermissionError(f"Permission denied during {operation}: {exception}", file_path)
    elif isinstance(exception, OSError):
        error = FileAccessError(f"Cannot {operation} {file_path}: {exception}", file_path)
    else:
        error = SearchError(f"Unexpected error during {operation}: {exception}", file_path)

    if error_collector is not None:
        error_collector.add_error(error)
    if logger is not None:
        logger.log_file_error(str(file_path), error.message, operation=operation)
    return error


def create_error_report(error_collector: ErrorCollector) -> str:
    """Render the collected errors as plain text for ``--show-errors``."""
    if not error_collector.errors:
        return "No errors occurred during the search operation."

    summary = error_collector.get_summary()
    kept = error_collector.errors
    lines = [f"Total errors: {summary['total_errors']}", "", "By category:"]
    lines += [f"  {category}: {count}" for category, count in summary["by_category"].items()]

    lines += ["", "Skipped paths:"]
    for info in kept:
        where = f"{info.file_path}: " if info.file_path else ""
        lines.append(f"  - {where}{info.message}")
    hidden = summary["total_errors"] - len(kept)
    if hidden > 0:
        lines.append(f"  ... {hidden} more")

    hints = list(dict.fromkeys(hint for info in kept for hint in info.suggestions))
    hints.append("Use --debug for more detailed error information")
    lines += ["", "Suggestions:"]
    lines += [f"  - {hint}" for hint in hints]
    return "\n".join(lines)
