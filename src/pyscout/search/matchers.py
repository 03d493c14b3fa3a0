"""
Pattern matching module for pyscout.

A pattern is compiled once per search into a CompiledPattern, which answers a
single question for each line: where does the pattern match?

Modes:
    - Literal, case-sensitive: plain substring search
    - Literal, case-insensitive: the escaped literal compiled with full case
      folding, so spans always index the original line
    - Regex: compiled with the ``regex`` engine; case-insensitivity is a
      compile flag

Example:
    >>> from pyscout.search.matchers import compile_pattern
    >>> pat = compile_pattern("ab", use_regex=False, ignore_case=False)
    >>> pat.match("ab-ab")
    [(0, 2), (3, 5)]
    >>> compile_pattern("error", use_regex=True, ignore_case=True).match("eRRoR here")
    [(0, 5)]
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import regex as regex_mod  # better regex engine

from ..core.types import Span
from ..utils.error_handling import PatternError


@lru_cache(maxsize=64)
def _get_compiled_regex(pattern: str, flags: int) -> regex_mod.Pattern:
    return regex_mod.compile(pattern, flags=flags)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """
    A pattern ready to be matched against decoded lines.

    Instances are immutable and safe to share between worker threads.

    Attributes:
        pattern: The pattern as given by the user
        use_regex: Whether ``pattern`` is a regular expression
        ignore_case: Whether matching ignores case
        rx: Compiled expression; None for case-sensitive literals
    """

    pattern: str
    use_regex: bool
    ignore_case: bool
    rx: regex_mod.Pattern | None = None

    def match(self, line: str) -> list[Span]:
        """
        Return every ``(start, end)`` span of the pattern in ``line``.

        Offsets index the ``str``; FileScanner turns them into byte offsets.
        """
        if self.rx is not None:
            return [m.span() for m in self.rx.finditer(line)]
        return _find_literal(line, self.pattern)

    def search(self, line: str) -> bool:
        """Return True if the pattern occurs anywhere in ``line``."""
        if self.rx is not None:
            return self.rx.search(line) is not None
        return self.pattern in line


def _find_literal(line: str, pattern: str) -> list[Span]:
    spans: list[Span] = []
    start = 0
    while True:
        j = line.find(pattern, start)
        if j == -1:
            break
        spans.append((j, j + len(pattern)))
        start = j + len(pattern)
    return spans


def compile_pattern(
    pattern: str, use_regex: bool = False, ignore_case: bool = False
) -> CompiledPattern:
    """
    Compile a search pattern.

    Args:
        pattern: Literal text or regular expression
        use_regex: Interpret ``pattern`` as a regular expression
        ignore_case: Match regardless of case

    Returns:
        CompiledPattern shared read-only by every scan task

    Raises:
        PatternError: If the pattern is empty or is not a valid expression
    """
    if not pattern:
        raise PatternError("Search pattern must not be empty", pattern)

    if not use_regex and not ignore_case:
        return CompiledPattern(pattern, use_regex, ignore_case)

    flags = regex_mod.VERSION0
    if ignore_case:
        flags |= regex_mod.IGNORECASE | regex_mod.FULLCASE
    source = pattern if use_regex else regex_mod.escape(pattern)

    try:
        rx = _get_compiled_regex(source, flags)
    except regex_mod.error as e:
        raise PatternError(
            f"Invalid regular expression: {e}", pattern, getattr(e, "pos", None)
        ) from e

    return CompiledPattern(pattern, use_regex, ignore_case, rx)
