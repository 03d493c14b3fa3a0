"""
Command-line interface for pyscout.

Example Usage:
    Literal search in the current directory:
        $ pyscout TODO

    Regex search, case-insensitive, Rust files only:
        $ pyscout --pattern "fn \\w+_handler" --regex --ignore-case -e rs -d src

    JSON output with statistics on stderr:
        $ pyscout TODO --format json --stats

Exit codes:
    0  the search completed (whether or not anything matched)
    1  the search could not start (bad pattern, missing directory, bad options)
    2  usage error

For more information, run: pyscout --help
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .. import __version__
from ..core.api import SearchEngine
from ..core.config import SearchConfig
from ..core.types import OutputFormat
from ..utils.error_handling import SearchCancelledError, SearchError, create_error_report
from ..utils.formatter import format_result, stats_line
from ..utils.logging_config import LogFormat, LogLevel, configure_logging


@contextmanager
def _spinner(enabled: bool) -> Iterator[Callable[[int], None] | None]:
    """Transient spinner on stderr; yields the engine's progress callback."""
    if not enabled:
        yield None
        return
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Searching...", total=None)

        def update(done: int) -> None:
            progress.update(task, description=f"[cyan]Searched {done} files...")

        yield update


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("pattern_arg", metavar="[PATTERN]", required=False)
@click.option("-p", "--pattern", help="Pattern to search for (alternative to PATTERN)")
@click.option(
    "-d",
    "--directory",
    type=click.Path(path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory to search",
)
@click.option(
    "-e",
    "--extensions",
    default="*",
    show_default=True,
    help="Comma-separated file extensions to search, e.g. 'rs,py'",
)
@click.option("-r", "--regex", is_flag=True, default=False, help="Treat the pattern as a regular expression")
@click.option("-i", "--ignore-case", is_flag=True, default=False, help="Match regardless of case")
@click.option(
    "-j",
    "--workers",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Number of scanning threads (0 = number of CPUs)",
)
@click.option("--hidden", is_flag=True, default=False, help="Search hidden files and directories")
@click.option("--no-ignore", is_flag=True, default=False, help="Do not read .gitignore/.ignore files")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([e.value for e in OutputFormat]),
    default=OutputFormat.TEXT.value,
    show_default=True,
    help="Output format",
)
@click.option(
    "--stats",
    is_flag=True,
    default=False,
    help="Print a statistics line (after text output, on stderr for JSON)",
)
# Logging and debugging options
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
@click.option(
    "--log-level",
    type=click.Choice([lvl.value for lvl in LogLevel]),
    default=LogLevel.WARNING.value,
    show_default=True,
    help="Log level",
)
@click.option("--log-file", type=click.Path(path_type=Path), help="Also write logs to this file")
@click.option(
    "--log-format",
    type=click.Choice([f.value for f in LogFormat]),
    default=LogFormat.SIMPLE.value,
    show_default=True,
    help="Log format",
)
@click.option("--show-errors", is_flag=True, default=False, help="Print a report of skipped files")
@click.version_option(__version__, "-V", "--version", prog_name="pyscout")
def cli(
    pattern_arg: str | None,
    pattern: str | None,
    directory: Path,
    extensions: str,
    regex: bool,
    ignore_case: bool,
    workers: int,
    hidden: bool,
    no_ignore: bool,
    fmt: str,
    stats: bool,
    debug: bool,
    log_level: str,
    log_file: Path | None,
    log_format: str,
    show_errors: bool,
) -> None:
    """pyscout - fast parallel text search in directory trees."""
    if pattern_arg and pattern and pattern_arg != pattern:
        raise click.UsageError("Give the pattern either as PATTERN or with --pattern, not both")
    search_pattern = pattern or pattern_arg
    if not search_pattern:
        raise click.UsageError("Missing search pattern")

    # Configure logging
    if debug:
        log_level = LogLevel.DEBUG.value

    try:
        logger = configure_logging(
            level=LogLevel(log_level),
            format_type=LogFormat(log_format),
            log_file=log_file,
            enable_file=log_file is not None,
            enable_console=True,
        )
    except (ValueError, OSError) as e:
        click.echo(f"Error configuring logging: {e}", err=True)
        sys.exit(1)

    cfg = SearchConfig(
        root=directory,
        pattern=search_pattern,
        use_regex=regex,
        ignore_case=ignore_case,
        extensions=extensions,
        use_ignore_files=not no_ignore,
        include_hidden=hidden,
        workers=workers,
    )
    output = OutputFormat(fmt)
    engine = SearchEngine(logger=logger)

    try:
        with _spinner(sys.stderr.isatty()) as on_progress:
            engine.progress = on_progress
            result = engine.run(cfg)
    except SearchCancelledError:
        click.echo("Search cancelled", err=True)
        sys.exit(1)
    except SearchError as e:
        click.echo(f"Error: {e.message}", err=True)
        for suggestion in e.suggestions:
            click.echo(f"  - {suggestion}", err=True)
        sys.exit(1)

    rendered = format_result(result, output, stats=stats)
    if rendered:
        # click.echo would strip the ANSI highlighting when stdout is not a tty
        sys.stdout.write(rendered)
        sys.stdout.write("\n")

    if stats and output == OutputFormat.JSON:
        # Text and highlight output end with the statistics line instead
        click.echo(stats_line(result), err=True)

    if show_errors and engine.get_error_summary()["total_errors"] > 0:
        click.echo("\n" + "=" * 50, err=True)
        click.echo("ERROR REPORT", err=True)
        click.echo("=" * 50, err=True)
        click.echo(create_error_report(engine.error_collector), err=True)


def main() -> None:
    cli(prog_name="pyscout")


if __name__ == "__main__":
    main()
