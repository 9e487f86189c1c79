"""Tally CLI entry point."""

import typer

from tally import __version__
from tally.cli.run_cmd import run
from tally.cli.summarize_cmd import summarize
from tally.logging_utils import LOG_LEVELS, configure_logging

app = typer.Typer(
    name="tally",
    help="Run a test suite and write a scored results.json report",
    no_args_is_help=True,
)

# Register subcommands
app.command()(run)
app.command()(summarize)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"tally {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        help=f"Diagnostic log level ({', '.join(LOG_LEVELS)}).",
    ),
) -> None:
    """Run a test suite and write a scored results.json report."""
    if log_level.lower() not in LOG_LEVELS:
        raise typer.BadParameter(
            f"must be one of {', '.join(LOG_LEVELS)}", param_hint="--log-level"
        )
    configure_logging(log_level)
