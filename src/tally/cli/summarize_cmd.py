"""tally summarize -- summarize an already-captured runner stream.

Reads captured runner output from a file or stdin and produces the
same report as ``tally run`` without spawning anything.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from tally.cli.output import output_json, render_details, render_headline
from tally.cli.run_cmd import ERROR_EXIT_CODE, EXIT_CODES
from tally.errors import TallyError
from tally.models.config import CountMode, StreamFormat
from tally.scoring.aggregator import summarize as summarize_stream
from tally.storage.results import RESULTS_FILENAME, ResultStore

console = Console(stderr=True)


def summarize(
    source: str = typer.Argument(..., help="Captured runner output file, or '-' for stdin"),
    max_score: Optional[int] = typer.Option(
        None, "--max-score", min=0, help="Max amount of points the test suite is worth"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Also write results.json into this directory"
    ),
    stream_format: StreamFormat = typer.Option(
        StreamFormat.auto, "--format", case_sensitive=False, help="Runner output shape"
    ),
    count_mode: CountMode = typer.Option(
        CountMode.observed, "--count-mode", case_sensitive=False, help="Source of the total test count"
    ),
    empty_suite_passes: bool = typer.Option(
        False, "--empty-suite-passes/--empty-suite-fails", help="Status of a run with no tests"
    ),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="List every test, not only failures"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 when the report status is fail"),
) -> None:
    """Summarize captured test-runner output into a report."""
    if source == "-":
        payload = typer.get_binary_stream("stdin").read()
    else:
        path = Path(source)
        if not path.is_file():
            console.print(
                f"[bold red]Error:[/bold red] File not found: {escape(source)}",
                highlight=False,
                soft_wrap=True,
            )
            raise typer.Exit(code=ERROR_EXIT_CODE)
        payload = path.read_bytes()

    results_path: Path | None = None
    try:
        report = summarize_stream(
            payload,
            max_score,
            stream_format=stream_format,
            count_mode=count_mode,
            empty_suite_passes=empty_suite_passes,
        )
        if output_dir is not None:
            results_path = ResultStore(output_dir, RESULTS_FILENAME).save(report)
    except TallyError as exc:
        console.print(
            f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True
        )
        raise typer.Exit(code=ERROR_EXIT_CODE)

    if format_json:
        output_json(report)
    else:
        output_console = Console()
        render_headline(report, output_console, results_path=results_path)
        render_details(report, output_console, failures_only=not verbose)

    if strict:
        exit_code = EXIT_CODES.get(report.overall_status.value, 1)
        if exit_code != 0:
            raise typer.Exit(code=exit_code)
