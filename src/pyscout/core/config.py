"""
Configuration module for pyscout.

This module defines SearchConfig, the immutable description of one search:
where to look, what to look for, which files qualify, and how much
parallelism to use.

Example:
    Basic configuration:
        >>> from pyscout.core.config import SearchConfig, parse_extensions
        >>>
        >>> config = SearchConfig(
        ...     root=".",
        ...     pattern="TODO",
        ...     extensions=parse_extensions("py,rs"),
        ... )

    Regex, case-insensitive, single worker for deterministic runs:
        >>> config = SearchConfig(
        ...     root="src",
        ...     pattern=r"err(or)?",
        ...     use_regex=True,
        ...     ignore_case=True,
        ...     workers=1,
        ... )
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from ..utils.error_handling import ConfigurationError

ALL_EXTENSIONS = "*"
DEFAULT_IGNORE_FILES: tuple[str, ...] = (".gitignore", ".ignore")


def parse_extensions(value: str | Iterable[str] | None) -> frozenset[str] | None:
    """
    Normalize an extension filter.

    Accepts a comma-separated string (``"rs, .PY"``) or an iterable of
    extensions. Returns a frozenset of lowercase extensions without the
    leading dot, or None (search all files) for ``"*"``, empty input or None.
    """
    if value is None:
        return None
    parts = value.split(",") if isinstance(value, str) else list(value)
    exts: set[str] = set()
    for part in parts:
        ext = part.strip().lstrip(".").lower()
        if ext == ALL_EXTENSIONS:
            return None
        if ext:
            exts.add(ext)
    return frozenset(exts) or None


@dataclass(frozen=True, slots=True)
class SearchConfig:
    # What
    root: Path = field(default_factory=lambda: Path("."))
    pattern: str = ""
    use_regex: bool = False
    ignore_case: bool = False
    extensions: frozenset[str] | None = None  # None = all files

    # Filtering
    ignore_files: tuple[str, ...] = DEFAULT_IGNORE_FILES
    use_ignore_files: bool = True
    include_hidden: bool = False

    # Reading
    encoding: str = "utf-8"
    max_file_bytes: int | None = None  # None = no limit
    binary_sniff_bytes: int = 8192

    # Performance
    workers: int = 0  # 0 = auto(cpu_count)

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(self, "extensions", parse_extensions(self.extensions))
        object.__setattr__(self, "ignore_files", tuple(self.ignore_files))

    def with_changes(self, **changes: Any) -> SearchConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def resolve_workers(self) -> int:
        return self.workers or os.cpu_count() or 4

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError on issues.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        if not self.pattern:
            raise ConfigurationError(
                "Search pattern must not be empty",
                context={"field": "pattern"},
            )

        if self.workers < 0:
            raise ConfigurationError(
                "Worker count must be non-negative (0 = auto-detect CPU count)",
                context={"field": "workers", "value": self.workers},
            )

        if self.max_file_bytes is not None and self.max_file_bytes <= 0:
            raise ConfigurationError(
                "File size limit must be positive",
                context={"field": "max_file_bytes", "value": self.max_file_bytes},
            )

        if self.binary_sniff_bytes <= 0:
            raise ConfigurationError(
                "Binary sniff size must be positive",
                context={"field": "binary_sniff_bytes", "value": self.binary_sniff_bytes},
            )

        try:
            "".encode(self.encoding)
        except LookupError:
            raise ConfigurationError(
                f"Unknown encoding: {self.encoding}",
                context={"field": "encoding", "value": self.encoding},
            ) from None
