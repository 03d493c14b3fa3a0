"""
Main API module for pyscout.

This module provides SearchEngine, which runs one search end to end:

    1. validate the configuration and compile the pattern (fatal on error,
       before any file is touched)
    2. confirm the root is still an existing directory
    3. walk the tree on the calling thread, applying ignore rules and the
       extension filter
    4. fan each candidate file out to a bounded thread pool for scanning
    5. aggregate MatchRecords and counters into a SearchResult

Unreadable files and directories never abort a search; they are counted,
logged as warnings and kept in ``error_collector``.

Example:
    Basic search operation:
        >>> from pyscout import SearchConfig, SearchEngine
        >>>
        >>> engine = SearchEngine()
        >>> result = engine.run(SearchConfig(root=".", pattern="TODO"))
        >>> for rec in result.matches:
        ...     print(f"{rec.file_path}:{rec.line_number}: {rec.line_text}")

    Convenience wrapper:
        >>> result = engine.search("src", r"fn \\w+", regex=True, extensions="rs")
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from pathlib import Path
from typing import Any

from ..search.matchers import compile_pattern
from ..search.scanner import FileScanner
from ..traversal.ignore import IgnoreFilter
from ..traversal.walker import FileWalker
from ..utils.error_handling import (
    ErrorCollector,
    RootNotFoundError,
    SearchCancelledError,
    SearchError,
    handle_file_error,
)
from ..utils.logging_config import SearchLogger, get_logger
from .config import SearchConfig
from .types import MatchRecord, SearchResult, SearchStats

# (path, records or None for binary, error)
ScanOutcome = tuple[Path, "list[MatchRecord] | None", "SearchError | None"]


class SearchEngine:
    """
    Orchestrates traversal, parallel scanning and aggregation.

    Attributes:
        workers: Worker pool capacity; None defers to ``SearchConfig.workers``
            (and then to the CPU count). A capacity of 1 scans on the calling
            thread in traversal order.
        logger: Logging interface
        error_collector: Recoverable errors from the most recent search
        progress: Optional callback receiving the number of files processed
            so far; called from the thread that runs ``run``

    Example:
        >>> engine = SearchEngine(workers=1)
        >>> result = engine.search("tests", "assert")
        >>> print(result.files_scanned, len(result.matches))
    """

    def __init__(
        self,
        workers: int | None = None,
        logger: SearchLogger | None = None,
        progress: Callable[[int], None] | None = None,
    ) -> None:
        self.workers = workers
        self.logger = logger or get_logger()
        self.progress = progress
        self.error_collector = ErrorCollector()
        self._cancel = threading.Event()
        self._lock = threading.Lock()

    def cancel(self) -> None:
        """
        Ask the running search, or the next one if none is running, to stop.

        Traversal stops, queued scans are dropped, scans already reading a file
        finish, and ``run`` raises SearchCancelledError. The request is cleared
        when that ``run`` returns.
        """
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def resolve_workers(self, config: SearchConfig) -> int:
        return max(1, self.workers or config.resolve_workers())

    def run(self, config: SearchConfig) -> SearchResult:
        """
        Execute a search and return its aggregated result.

        Args:
            config: What to search for and where

        Returns:
            SearchResult whose records are ordered by file path, then line

        Raises:
            ConfigurationError: If the configuration is invalid
            PatternError: If the pattern does not compile
            RootNotFoundError: If the root is missing or not a directory
            SearchCancelledError: If ``cancel`` was called before or during the
                search
        """
        try:
            return self._execute(config)
        finally:
            # Each cancel request covers one run
            self._cancel.clear()

    def _execute(self, config: SearchConfig) -> SearchResult:
        config.validate()
        pattern = compile_pattern(config.pattern, config.use_regex, config.ignore_case)

        root = config.root
        if not root.is_dir():
            raise RootNotFoundError(root)

        self.error_collector.clear()

        workers = self.resolve_workers(config)
        self.logger.log_search_start(
            pattern=config.pattern,
            root=str(root),
            use_regex=config.use_regex,
            ignore_case=config.ignore_case,
            workers=workers,
        )

        t0 = time.perf_counter()

        ignore_filter = IgnoreFilter(
            root,
            ignore_files=config.ignore_files,
            use_ignore_files=config.use_ignore_files,
            include_hidden=config.include_hidden,
            logger=self.logger,
        )
        walker = FileWalker(
            root,
            extensions=config.extensions,
            ignore_filter=ignore_filter,
            logger=self.logger,
            error_collector=self.error_collector,
            stop=self._cancel.is_set,
        )
        scanner = FileScanner(
            pattern,
            encoding=config.encoding,
            max_file_bytes=config.max_file_bytes,
            binary_sniff_bytes=config.binary_sniff_bytes,
        )

        stats = SearchStats()
        per_file: dict[Path, list[MatchRecord]] = {}
        done = 0

        def collect(path: Path, records: list[MatchRecord] | None, error: SearchError | None) -> None:
            nonlocal done
            with self._lock:
                done += 1
                if error is not None:
                    stats.files_skipped += 1
                elif records is None:
                    stats.files_binary += 1
                else:
                    stats.files_scanned += 1
                    if records:
                        per_file[path] = records
                        stats.files_matched += 1
                        stats.matches += len(records)
            if error is not None:
                self.error_collector.add_error(error)
                self.logger.log_file_error(str(path), error.message)
            elif records is None:
                self.logger.debug(f"Skipping binary file: {path}")
            if self.progress is not None:
                self.progress(done)

        if workers == 1:
            self._scan_sequential(walker.walk(), scanner, collect)
        else:
            self._scan_with_thread_pool(walker.walk(), scanner, workers, collect)

        stats.dirs_skipped = walker.dirs_skipped

        if self._cancel.is_set():
            self.logger.info(f"Search cancelled after {done} files")
            raise SearchCancelledError()

        matches = [rec for path in sorted(per_file) for rec in per_file[path]]
        stats.elapsed_ms = (time.perf_counter() - t0) * 1000.0

        self.logger.log_search_complete(
            pattern=config.pattern,
            results_count=len(matches),
            elapsed_ms=stats.elapsed_ms,
            files_scanned=stats.files_scanned,
            files_skipped=stats.files_skipped,
        )
        if stats.files_skipped or stats.dirs_skipped:
            self.logger.warning(
                f"Results are partial: {stats.files_skipped} files and "
                f"{stats.dirs_skipped} directories could not be read"
            )

        return SearchResult(matches=matches, stats=stats)

    @staticmethod
    def _scan_one(scanner: FileScanner, path: Path) -> ScanOutcome:
        try:
            return path, scanner.scan(path), None
        except SearchError as e:
            return path, None, e
        except Exception as e:
            # Isolate the failure to this file
            return path, None, handle_file_error(path, "scan", e)

    def _scan_sequential(
        self,
        paths: Iterable[Path],
        scanner: FileScanner,
        collect: Callable[[Path, list[MatchRecord] | None, SearchError | None], None],
    ) -> None:
        for path in paths:
            if self._cancel.is_set():
                break
            collect(*self._scan_one(scanner, path))

    def _scan_with_thread_pool(
        self,
        paths: Iterable[Path],
        scanner: FileScanner,
        workers: int,
        collect: Callable[[Path, list[MatchRecord] | None, SearchError | None], None],
    ) -> None:
        """Feed paths to a bounded pool as the walk produces them."""
        max_pending = workers * 4
        pending: set[Future[ScanOutcome]] = set()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pyscout") as executor:
            for path in paths:
                if self._cancel.is_set():
                    break
                pending.add(executor.submit(self._scan_one, scanner, path))
                if len(pending) >= max_pending:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        collect(*future.result())

            if self._cancel.is_set():
                for future in pending:
                    future.cancel()

            for future in as_completed(pending):
                if future.cancelled():
                    continue
                collect(*future.result())

    def search(
        self,
        root: Path | str,
        pattern: str,
        regex: bool = False,
        ignore_case: bool = False,
        extensions: str | Iterable[str] | None = None,
        **kwargs: Any,
    ) -> SearchResult:
        r"""
        Convenience method for simple searches without building a SearchConfig.

        Args:
            root: Directory to search
            pattern: Literal text or regular expression
            regex: Whether to treat pattern as regex (default: False)
            ignore_case: Whether to ignore case (default: False)
            extensions: ``"rs,py"``, an iterable of extensions, or None for all
            **kwargs: Any other SearchConfig field

        Example:
            >>> results = engine.search(".", r"def \w+_handler", regex=True, extensions="py")
        """
        config = SearchConfig(
            root=Path(root),
            pattern=pattern,
            use_regex=regex,
            ignore_case=ignore_case,
            extensions=extensions,
            **kwargs,
        )
        return self.run(config)

    def get_error_summary(self) -> dict[str, Any]:
        return self.error_collector.get_summary()

    def has_critical_errors(self) -> bool:
        return self.error_collector.has_critical_errors()
