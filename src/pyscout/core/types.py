"""
Core data types for pyscout.

Key Types:
    OutputFormat: Enumeration of supported output formats
    MatchRecord: One matching line with the spans that matched
    SearchStats: Counters and timing for one search
    SearchResult: Aggregated matches plus statistics

Example:
    Working with results:
        >>> for rec in result.matches:
        ...     print(f"{rec.file_path}:{rec.line_number}: {rec.line_text}")
        >>> print(f"{result.files_scanned} files scanned, {result.files_skipped} skipped")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..utils.helpers import byte_spans_to_char_spans

# (start, end) byte offsets into the encoded MatchRecord.line_text, end exclusive
Span = tuple[int, int]


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    HIGHLIGHT = "highlight"


@dataclass(frozen=True, slots=True)
class MatchRecord:
    """
    A single matching line.

    Attributes:
        file_path: Path of the file containing the line
        line_number: 1-based line number within the file
        line_text: The line without its terminator
        match_spans: Ordered, non-overlapping ``(start, end)`` byte offsets
            into ``line_text`` as encoded in the file; ``end`` is exclusive
        encoding: Encoding the file was read with; it gives the byte offsets
            their meaning

    Example:
        >>> rec = MatchRecord(Path("a.txt"), 1, "héllo TODO", ((7, 11),))
        >>> rec.char_spans()
        [(6, 10)]
        >>> rec.matched_text()
        ['TODO']
    """

    file_path: Path
    line_number: int
    line_text: str
    match_spans: tuple[Span, ...]
    encoding: str = "utf-8"

    def char_spans(self) -> list[Span]:
        """Spans as code-point offsets, for slicing or styling ``line_text``."""
        return byte_spans_to_char_spans(self.line_text, self.match_spans, self.encoding)

    def matched_text(self) -> list[str]:
        return [self.line_text[a:b] for a, b in self.char_spans()]


@dataclass(slots=True)
class SearchStats:
    """
    Counters and timing for a search operation.

    Attributes:
        files_scanned: Files read as text and matched against the pattern
        files_skipped: Files that could not be read (I/O errors, size limit)
        files_binary: Files skipped silently because they look binary
        files_matched: Files with at least one matching line
        dirs_skipped: Directories that could not be listed
        matches: Total number of matching lines
        elapsed_ms: Wall-clock time of the search in milliseconds
    """

    files_scanned: int = 0
    files_skipped: int = 0
    files_binary: int = 0
    files_matched: int = 0
    dirs_skipped: int = 0
    matches: int = 0
    elapsed_ms: float = 0.0


@dataclass(slots=True)
class SearchResult:
    """
    Complete search results: every MatchRecord plus statistics.

    Records from one file are in line order; files are ordered by path.
    """

    matches: list[MatchRecord] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def files_scanned(self) -> int:
        return self.stats.files_scanned

    @property
    def files_skipped(self) -> int:
        return self.stats.files_skipped

    @property
    def duration(self) -> float:
        """Elapsed time in seconds."""
        return self.stats.elapsed_ms / 1000.0

    @property
    def is_partial(self) -> bool:
        """True if some files or directories could not be read."""
        return self.stats.files_skipped > 0 or self.stats.dirs_skipped > 0

    def files(self) -> list[Path]:
        """Distinct files with matches, in result order."""
        return list(dict.fromkeys(rec.file_path for rec in self.matches))
