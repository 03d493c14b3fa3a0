"""
Ignore rules for pyscout.

Rules come from ignore files (``.gitignore`` and ``.ignore`` by default)
found in the search root and in every directory below it. Each file is parsed
with pathspec's gitwildmatch patterns and applies to the subtree of the
directory that contains it.

Matching semantics:
    - ``*``, ``?``, ``[...]`` and ``**`` wildcards
    - ``!pattern`` re-includes a path excluded by an earlier rule
    - ``dir/`` matches directories only
    - ``/pattern`` is anchored to the directory holding the ignore file
    - Rule files are evaluated from the root downwards and rules within a
      file top to bottom; the last rule that matches decides

Independently of any rule file, version-control metadata directories are
always skipped, and so are hidden entries unless ``include_hidden`` is set.

Example:
    >>> f = IgnoreFilter(Path("project"))
    >>> f.should_skip("build/output.log")
    True
    >>> f.should_skip("src", is_dir=True)
    False
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath

import pathspec
from pathspec.patterns.gitwildmatch import GitWildMatchPattern, GitWildMatchPatternError

from ..core.config import DEFAULT_IGNORE_FILES
from ..utils.logging_config import SearchLogger, get_logger

VCS_DIRS = frozenset({".git", ".hg", ".svn", ".bzr", "_darcs", "CVS"})

_ROOT = PurePosixPath(".")


@dataclass(frozen=True, slots=True)
class IgnoreRuleSet:
    """
    Patterns defined by the ignore file(s) of one directory.

    Attributes:
        base: Directory holding the rules, relative to the search root
        patterns: gitwildmatch patterns in declaration order
    """

    base: PurePosixPath
    patterns: tuple[pathspec.Pattern, ...]

    @classmethod
    def from_lines(
        cls,
        base: PurePosixPath | str,
        lines: Iterable[str],
        logger: SearchLogger | None = None,
    ) -> IgnoreRuleSet:
        """Parse ignore-file lines; comments and blank lines are dropped, invalid lines skipped."""
        active: list[pathspec.Pattern] = []
        for line in lines:
            try:
                pattern = GitWildMatchPattern(line)
            except GitWildMatchPatternError as e:
                if logger is not None:
                    logger.warning(f"Skipping invalid ignore pattern {line!r} in {base}: {e}")
                continue
            if pattern.include is not None:
                active.append(pattern)
        return cls(base=PurePosixPath(base), patterns=tuple(active))

    def __len__(self) -> int:
        return len(self.patterns)

    def decide(self, rel_path: PurePosixPath, is_dir: bool = False) -> bool | None:
        """
        Evaluate the rules against ``rel_path`` (relative to the search root).

        Returns True if the last matching rule excludes the path, False if it
        re-includes it, None if no rule matches.
        """
        if self.base != _ROOT:
            try:
                rel_path = rel_path.relative_to(self.base)
            except ValueError:
                return None
        candidate = rel_path.as_posix() + ("/" if is_dir else "")
        decision: bool | None = None
        for pattern in self.patterns:
            if pattern.match_file(candidate) is not None:
                decision = bool(pattern.include)
        return decision


class IgnoreFilter:
    """
    Decides whether paths under a search root should be skipped.

    Rule files are loaded lazily, the first time a directory's contents are
    checked, and cached for the rest of the search. Loaded rule sets are never
    modified afterwards.
    """

    def __init__(
        self,
        root: Path | str,
        ignore_files: Iterable[str] = DEFAULT_IGNORE_FILES,
        use_ignore_files: bool = True,
        include_hidden: bool = False,
        logger: SearchLogger | None = None,
    ) -> None:
        self.root = Path(root)
        self.ignore_files = tuple(ignore_files)
        self.use_ignore_files = use_ignore_files
        self.include_hidden = include_hidden
        self.logger = logger or get_logger()
        self._rules: dict[PurePosixPath, IgnoreRuleSet | None] = {}

    def _read_rule_lines(self, rel_dir: PurePosixPath) -> list[str]:
        lines: list[str] = []
        directory = self.root / rel_dir
        for name in self.ignore_files:
            path = directory / name
            try:
                lines.extend(path.read_text(encoding="utf-8", errors="replace").splitlines())
            except FileNotFoundError:
                continue
            except OSError as e:
                self.logger.debug(f"Ignoring unreadable ignore file {path}: {e}")
        return lines

    def rules_for_dir(self, rel_dir: PurePosixPath) -> IgnoreRuleSet | None:
        """Rules defined directly in ``rel_dir``, or None if it defines none."""
        if rel_dir not in self._rules:
            lines = self._read_rule_lines(rel_dir)
            rules = IgnoreRuleSet.from_lines(rel_dir, lines, self.logger) if lines else None
            self._rules[rel_dir] = rules if rules else None
            if rules:
                self.logger.debug(f"Loaded {len(rules)} ignore rules for {self.root / rel_dir}")
        return self._rules[rel_dir]

    def applicable_rules(self, rel_dir: PurePosixPath) -> list[IgnoreRuleSet]:
        """Rule sets that apply inside ``rel_dir``, shallowest first."""
        chain = [_ROOT]
        for i in range(len(rel_dir.parts)):
            chain.append(PurePosixPath(*rel_dir.parts[: i + 1]))
        return [rs for rs in (self.rules_for_dir(d) for d in chain) if rs is not None]

    def should_skip(self, rel_path: PurePath | str, is_dir: bool = False) -> bool:
        """
        Return True if ``rel_path`` (relative to the root) is excluded.

        Args:
            rel_path: Path of a file or directory relative to the search root
            is_dir: Whether the path is a directory (enables ``dir/`` rules)
        """
        rel = PurePosixPath(PurePath(rel_path).as_posix())
        name = rel.name
        if name in VCS_DIRS:
            return True
        if not self.include_hidden and name.startswith("."):
            return True
        if not self.use_ignore_files:
            return False

        excluded: bool | None = None
        for rules in self.applicable_rules(rel.parent):
            decision = rules.decide(rel, is_dir)
            if decision is not None:
                excluded = decision
        return bool(excluded)
