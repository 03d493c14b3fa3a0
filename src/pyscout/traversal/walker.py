"""
Directory traversal for pyscout.

FileWalker lazily yields the files under a search root that pass the ignore
rules and the extension filter. Excluded directories are pruned in place so
``os.walk`` never descends into them.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path, PurePosixPath

from ..utils.error_handling import ErrorCollector, handle_file_error
from ..utils.logging_config import SearchLogger, get_logger
from .ignore import IgnoreFilter


def extension_matches(path: Path, extensions: frozenset[str] | None) -> bool:
    """Case-insensitive check of the suffix after the last dot."""
    if extensions is None:
        return True
    return path.suffix[1:].lower() in extensions


class FileWalker:
    """
    Depth-first walk over a search root.

    Attributes:
        dirs_skipped: Directories that could not be listed during the last walk
        dirs_visited: Directories listed during the last walk

    Example:
        >>> walker = FileWalker(Path("."), frozenset({"py"}), IgnoreFilter(Path(".")))
        >>> for path in walker.walk():
        ...     print(path)
    """

    def __init__(
        self,
        root: Path | str,
        extensions: frozenset[str] | None = None,
        ignore_filter: IgnoreFilter | None = None,
        logger: SearchLogger | None = None,
        error_collector: ErrorCollector | None = None,
        stop: Callable[[], bool] | None = None,
    ) -> None:
        self.root = Path(root)
        self.extensions = extensions
        self.ignore_filter = ignore_filter
        self.logger = logger or get_logger()
        self.error_collector = error_collector
        self.stop = stop
        self.dirs_skipped = 0
        self.dirs_visited = 0

    def _on_walk_error(self, err: OSError) -> None:
        path = Path(err.filename) if err.filename else self.root
        self.dirs_skipped += 1
        error = handle_file_error(path, "list", err, self.error_collector)
        self.logger.log_dir_error(str(path), error.message)

    def _skip(self, rel: PurePosixPath, is_dir: bool) -> bool:
        return self.ignore_filter is not None and self.ignore_filter.should_skip(rel, is_dir)

    def walk(self) -> Iterator[Path]:
        """
        Yield candidate files, lazily.

        Symbolic links to directories are never followed; symbolic links to
        regular files are yielded like regular files. Each call starts a new
        walk.
        """
        self.dirs_skipped = 0
        self.dirs_visited = 0

        for dirpath, dirnames, filenames in os.walk(
            self.root, topdown=True, onerror=self._on_walk_error, followlinks=False
        ):
            if self.stop is not None and self.stop():
                return
            self.dirs_visited += 1
            current = Path(dirpath)
            rel_dir = PurePosixPath(current.relative_to(self.root).as_posix())

            # Prune in place so os.walk does not descend into excluded subtrees
            dirnames[:] = [
                d
                for d in dirnames
                if not os.path.islink(current / d) and not self._skip(rel_dir / d, True)
            ]

            for name in filenames:
                if self._skip(rel_dir / name, False):
                    continue
                path = current / name
                if not extension_matches(path, self.extensions):
                    continue
                # Regular files only (follows file symlinks; drops fifos and dangling links)
                if not os.path.isfile(path):
                    continue
                yield path


def iter_files(
    root: Path | str,
    extensions: frozenset[str] | None = None,
    ignore_filter: IgnoreFilter | None = None,
) -> Iterator[Path]:
    """Convenience wrapper: ``FileWalker(...).walk()``."""
    return FileWalker(root, extensions, ignore_filter).walk()
