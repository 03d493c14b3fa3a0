"""
pyscout - fast parallel text search in directory trees.

pyscout walks a directory tree, honours ``.gitignore``/``.ignore`` rules,
filters files by extension and scans the remaining text files on a thread
pool, reporting every matching line with the exact spans that matched.

Basic Usage:
    >>> from pyscout import SearchConfig, SearchEngine
    >>>
    >>> engine = SearchEngine()
    >>> result = engine.run(SearchConfig(root="src", pattern="TODO", extensions="py,rs"))
    >>> for rec in result.matches:
    ...     print(f"{rec.file_path}:{rec.line_number}: {rec.matched_text()}")

Regex, case-insensitive:
    >>> result = engine.search(".", r"err(or)?", regex=True, ignore_case=True)
    >>> print(f"{result.stats.matches} matches, {result.files_skipped} files skipped")

Command line:
    $ pyscout TODO -d src -e py,rs
"""

__version__ = "0.1.0"
__description__ = "Fast parallel text search in directory trees"

from .core.api import SearchEngine  # noqa: E402
from .core.config import SearchConfig, parse_extensions  # noqa: E402
from .core.types import MatchRecord, OutputFormat, SearchResult, SearchStats  # noqa: E402
from .utils.error_handling import (  # noqa: E402
    ConfigurationError,
    FileAccessError,
    FileTooLargeError,
    PatternError,
    PermissionError,
    RootNotFoundError,
    SearchCancelledError,
    SearchError,
)
from .utils.logging_config import (  # noqa: E402
    configure_logging,
    disable_logging,
    enable_debug_logging,
    get_logger,
)

# Public API
__all__ = [
    # Main classes
    "SearchEngine",
    "SearchConfig",
    "parse_extensions",
    # Data types
    "MatchRecord",
    "OutputFormat",
    "SearchResult",
    "SearchStats",
    # Logging and configuration
    "configure_logging",
    "get_logger",
    "enable_debug_logging",
    "disable_logging",
    # Exception classes
    "SearchError",
    "ConfigurationError",
    "FileAccessError",
    "FileTooLargeError",
    "PatternError",
    "PermissionError",
    "RootNotFoundError",
    "SearchCancelledError",
    # Package metadata
    "__version__",
    "__description__",
]
