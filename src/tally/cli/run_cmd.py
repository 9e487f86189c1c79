"""tally run -- execute the test runner and write results.json.

Validates the input and output directories, loads tally.yaml, runs
the configured test runner in the input directory, summarizes its
event stream, writes the report, and renders a Rich summary.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from tally.cli.output import output_json, render_details, render_headline
from tally.errors import TallyError
from tally.execution.runner import run_tests
from tally.models.config import CountMode, StreamFormat, load_config
from tally.scoring.aggregator import summarize as summarize_stream
from tally.storage.results import ResultStore, validate_directory

logger = logging.getLogger(__name__)

console = Console(stderr=True)

# Exit code mapping: report status -> exit code (only applied with --strict)
EXIT_CODES: dict[str, int] = {
    "pass": 0,
    "fail": 1,
}

# Exit code for environment problems: bad directories, config, runner.
ERROR_EXIT_CODE = 2

# Lines of runner stderr shown when a run yields no test events.
_STDERR_TAIL_LINES = 20

_MAX_SCORE_RE = re.compile(r"[0-9]+")


def split_trailing_args(
    trailing: list[str], max_score_option: int | None = None
) -> tuple[int | None, list[str]]:
    """Split trailing positionals into (max_score, runner_args).

    A leading non-negative integer is the max score unless --max-score
    was given; everything else goes to the runner. A runner whose first
    argument is itself a number needs --max-score to disambiguate.
    """
    if max_score_option is not None:
        return max_score_option, list(trailing)
    if trailing and _MAX_SCORE_RE.fullmatch(trailing[0]):
        return int(trailing[0]), list(trailing[1:])
    return None, list(trailing)


def run(
    input_dir: Path = typer.Argument(..., help="Directory where the exercise project is located"),
    output_dir: Path = typer.Argument(..., help="Directory where results.json will be written"),
    trailing: Optional[list[str]] = typer.Argument(
        None,
        metavar="[MAX_SCORE] [-- RUNNER_ARGS...]",
        help="Max amount of points the test suite is worth, then runner arguments after --",
        show_default=False,
    ),
    max_score_option: Optional[int] = typer.Option(
        None, "--max-score", min=0, help="Max amount of points (instead of the positional MAX_SCORE)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to a tally.yaml (default: INPUT_DIR/tally.yaml)"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0.001, help="Kill the runner after this many seconds"
    ),
    stream_format: Optional[StreamFormat] = typer.Option(
        None, "--format", case_sensitive=False, help="Runner output shape"
    ),
    count_mode: Optional[CountMode] = typer.Option(
        None, "--count-mode", case_sensitive=False, help="Source of the total test count"
    ),
    empty_suite_passes: Optional[bool] = typer.Option(
        None, "--empty-suite-passes/--empty-suite-fails", help="Status of a run with no tests"
    ),
    raw: bool = typer.Option(False, "--raw", help="Echo the runner's raw output to stderr"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="List every test, not only failures"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 when the report status is fail"),
) -> None:
    """Run the tests of an exercise and write results.json."""
    max_score, runner_args = split_trailing_args(trailing or [], max_score_option)
    try:
        validate_directory(input_dir, "input")
        validate_directory(output_dir, "output")

        config = load_config(config_path, search_dir=input_dir).with_overrides(
            timeout_seconds=timeout,
            stream_format=stream_format,
            count_mode=count_mode,
            empty_suite_passes=empty_suite_passes,
        )

        logger.info("Output will be written to: %s", output_dir)
        logger.info("Max score: %s", max_score)

        output = asyncio.run(
            run_tests(
                input_dir,
                command=config.runner.command,
                extra_args=runner_args,
                timeout=config.runner.timeout_seconds,
                env=config.runner.env,
            )
        )

        if raw:
            console.rule("Raw runner output")
            console.print(output.stdout_text, markup=False, highlight=False)

        report = summarize_stream(
            output.stdout,
            max_score,
            stream_format=config.stream_format,
            count_mode=config.count_mode,
            empty_suite_passes=config.empty_suite_passes,
        )
        results_path = ResultStore(output_dir, config.results_filename).save(report)
    except TallyError as exc:
        console.print(
            f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False, soft_wrap=True
        )
        raise typer.Exit(code=ERROR_EXIT_CODE)

    if not report.tests and output.returncode != 0:
        console.print(
            f"[yellow]Warning:[/yellow] runner exited with code {output.returncode} "
            "and reported no tests",
            highlight=False,
            soft_wrap=True,
        )
        tail = output.stderr_text.strip().splitlines()[-_STDERR_TAIL_LINES:]
        if tail:
            console.print("\n".join(tail), markup=False, highlight=False)

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
