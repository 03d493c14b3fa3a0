"""
Core functionality for the pyscout package.

- Result and statistics types
- Search configuration
- The search engine
"""

from .types import MatchRecord, OutputFormat, SearchResult, SearchStats  # isort: skip
from .config import SearchConfig, parse_extensions  # isort: skip
from .api import SearchEngine

__all__ = [
    "SearchEngine",
    "SearchConfig",
    "parse_extensions",
    "MatchRecord",
    "OutputFormat",
    "SearchResult",
    "SearchStats",
]
