"""
Per-file scanning for pyscout.

FileScanner reads one file, decides whether it is text, splits it into lines
and asks the CompiledPattern about each line. It is the unit of work handed to
the engine's worker pool, and it shares nothing mutable with other scans.

Outcomes of ``FileScanner.scan``:
    - list of MatchRecord (possibly empty): the file was scanned
    - None: the file looks binary and was skipped silently
    - FileAccessError / PermissionError / FileTooLargeError: the file could
      not be read; the engine counts it as skipped

Example:
    >>> from pyscout.search.matchers import compile_pattern
    >>> scanner = FileScanner(compile_pattern("TODO"))
    >>> for rec in scanner.scan(Path("notes.txt")) or []:
    ...     print(rec.line_number, rec.match_spans)
"""

from __future__ import annotations

from pathlib import Path

from ..core.types import MatchRecord
from ..utils.error_handling import FileTooLargeError, SearchError, handle_file_error
from ..utils.helpers import char_spans_to_byte_spans, decode_text, looks_binary, split_lines
from .matchers import CompiledPattern


class FileScanner:
    """Scans single files for a compiled pattern."""

    def __init__(
        self,
        pattern: CompiledPattern,
        encoding: str = "utf-8",
        max_file_bytes: int | None = None,
        binary_sniff_bytes: int = 8192,
    ) -> None:
        self.pattern = pattern
        self.encoding = encoding
        self.max_file_bytes = max_file_bytes
        self.binary_sniff_bytes = binary_sniff_bytes

    def _read_bytes(self, path: Path) -> bytes:
        with path.open("rb") as f:
            if self.max_file_bytes is not None:
                size = f.seek(0, 2)
                if size > self.max_file_bytes:
                    raise FileTooLargeError(path, size, self.max_file_bytes)
                f.seek(0)
            return f.read()

    def read_text(self, path: Path) -> str | None:
        """
        Read ``path`` as text.

        Returns None if the file looks binary: a NUL byte among the first
        ``binary_sniff_bytes`` bytes, or content that does not decode under
        ``encoding``.

        Raises:
            SearchError: If the file cannot be read.
        """
        try:
            raw = self._read_bytes(path)
        except SearchError:
            raise
        except OSError as e:
            raise handle_file_error(path, "read", e) from e

        if looks_binary(raw[: self.binary_sniff_bytes]):
            return None
        return decode_text(raw, self.encoding)

    def scan_text(self, path: Path, text: str) -> list[MatchRecord]:
        """
        Match every line of ``text``; ``path`` is only used to label records.

        Spans are stored as byte offsets into each line encoded with ``encoding``.
        """
        records: list[MatchRecord] = []
        for line_number, line in enumerate(split_lines(text), start=1):
            spans = self.pattern.match(line)
            if spans:
                records.append(
                    MatchRecord(
                        file_path=path,
                        line_number=line_number,
                        line_text=line,
                        match_spans=tuple(char_spans_to_byte_spans(line, spans, self.encoding)),
                        encoding=self.encoding,
                    )
                )
        return records

    def scan(self, path: Path) -> list[MatchRecord] | None:
        """
        Scan one file.

        Returns:
            MatchRecords in line order, or None if the file is binary

        Raises:
            SearchError: If the file cannot be read (vanished, permission
                denied, over the size limit).
        """
        text = self.read_text(path)
        if text is None:
            return None
        return self.scan_text(path, text)
