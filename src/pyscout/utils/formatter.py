"""
Output formatting module for pyscout.

This module renders a SearchResult as plain text, JSON, or rich console
output. Formatting is kept separate from searching: the engine only returns
structured data.

Key Functions:
    format_result: Main entry point for formatting results in any supported format
    to_json_bytes: Fast JSON serialization using orjson
    format_text: Plain text, one ``path:line:`` header per match
    render_highlight_console: Rich console output with colored paths and spans

Example:
    Basic formatting:
        >>> from pyscout.utils.formatter import format_result
        >>> from pyscout.core.types import OutputFormat
        >>>
        >>> print(format_result(result, OutputFormat.TEXT, stats=True))
        notes.txt:1:
            TODO fix
        # matches=1 files_matched=1 files_scanned=3 files_skipped=0 elapsed_ms=0.41

    Rich console output:
        >>> from rich.console import Console
        >>> render_highlight_console(result, Console())
"""

from __future__ import annotations

import sys
from dataclasses import asdict

import orjson
from rich.console import Console
from rich.text import Text

from ..core.types import OutputFormat, SearchResult
from .helpers import highlight_spans

ANSI_RED = "\x1b[31m"
ANSI_RESET = "\x1b[0m"


def stats_line(result: SearchResult) -> str:
    s = result.stats
    return (
        f"# matches={s.matches} files_matched={s.files_matched} "
        f"files_scanned={s.files_scanned} files_skipped={s.files_skipped} "
        f"elapsed_ms={s.elapsed_ms:.2f}"
    )


def to_json_bytes(result: SearchResult) -> bytes:
    """
    Convert search results to JSON bytes using orjson.

    ``spans`` are byte offsets into ``line`` as encoded in the file;
    ``char_spans`` are the same spans as offsets into the JSON string.

    Returns:
        JSON-encoded bytes, indented
    """
    payload = {
        "matches": [
            {
                "file": str(rec.file_path),
                "line_number": rec.line_number,
                "line": rec.line_text,
                "spans": [[a, b] for a, b in rec.match_spans],
                "char_spans": [[a, b] for a, b in rec.char_spans()],
            }
            for rec in result.matches
        ],
        "stats": asdict(result.stats),
    }
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2)


def format_text(result: SearchResult, highlight: bool = False, stats: bool = False) -> str:
    """
    Format search results as plain text.

    Each match is a ``path:line:`` header followed by the line indented by four
    spaces. With ``highlight`` the matched spans are wrapped in ANSI red; with
    ``stats`` a summary line follows the matches.

    Example:
        >>> print(format_text(result, stats=True))
        src/main.rs:12:
            // TODO handle errors
        # matches=1 files_matched=1 files_scanned=4 files_skipped=0 elapsed_ms=1.20
    """
    out: list[str] = []
    if not result.matches:
        out.append("No matches found.")
    for rec in result.matches:
        out.append(f"{rec.file_path}:{rec.line_number}:")
        content = rec.line_text
        if highlight:
            content = highlight_spans(
                content, rec.char_spans(), marker_left=ANSI_RED, marker_right=ANSI_RESET
            )
        out.append(f"    {content}")
    if stats:
        out.append(stats_line(result))
    return "\n".join(out)


def render_highlight_console(
    result: SearchResult, console: Console | None = None, stats: bool = False
) -> None:
    """Render search results to a rich console: blue paths, yellow line numbers, red spans."""
    if console is None:
        console = Console()

    if not result.matches:
        console.print("No matches found.", style="yellow")
    else:
        console.print()
        console.print(
            Text.assemble(("✓ ", "green"), (str(len(result.matches)), "green"), " matches found:")
        )
        console.print()
        for rec in result.matches:
            console.print(
                Text.assemble((str(rec.file_path), "blue"), ":", (str(rec.line_number), "yellow"), ":")
            )
            line = Text("    " + rec.line_text)
            for a, b in rec.char_spans():
                line.stylize("bold red", a + 4, b + 4)
            console.print(line)

    if result.stats.files_skipped:
        console.print(
            f"{result.stats.files_skipped} files could not be read and were skipped",
            style="dim",
        )
    if stats:
        console.print(stats_line(result), style="dim", markup=False)


def format_result(result: SearchResult, fmt: OutputFormat, stats: bool = False) -> str:
    """
    Format search results according to the specified output format.

    ``stats`` adds the summary line to text and highlight output; JSON always
    carries the statistics.
    """
    if fmt == OutputFormat.JSON:
        return to_json_bytes(result).decode("utf-8")
    if fmt == OutputFormat.HIGHLIGHT:
        # Use rich console rendering when stdout is a real terminal
        if sys.stdout.isatty():
            render_highlight_console(result, stats=stats)
            return ""
        return format_text(result, highlight=True, stats=stats)
    return format_text(result, highlight=False, stats=stats)
