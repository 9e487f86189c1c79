"""Rich terminal output layer for results reports.

Provides the headline status table, the per-test detail table, and
pure JSON output for a Report in terminal and CI.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from tally.models.report import Report


# Status styling map: status value -> (symbol, Rich markup style)
_STATUS_STYLES: dict[str, tuple[str, str]] = {
    "pass": ("✓ PASS", "bold green"),
    "fail": ("✗ FAIL", "bold red"),
}


def _status_display(value: str) -> tuple[str, str]:
    return _STATUS_STYLES.get(value, ("✗ UNKNOWN", "bold red"))


def render_headline(
    report: Report,
    console: Console,
    *,
    results_path: Path | None = None,
) -> None:
    """Render a compact key-value table summarizing the report.

    Args:
        report: The Report to display.
        console: Rich Console for output.
        results_path: Where the report was written, if anywhere.
    """
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    symbol, style = _status_display(report.overall_status.value)
    table.add_row("Status", f"[{style}]{symbol}[/{style}]")

    total = len(report.tests)
    table.add_row("Tests", f"{report.passed_count}/{total} passed")

    if report.max_score is not None:
        table.add_row("Score", f"{report.computed_score}/{report.max_score}")

    if results_path is not None:
        table.add_row("Results", str(results_path))

    console.print(table)


def render_details(
    report: Report,
    console: Console,
    *,
    failures_only: bool = False,
) -> None:
    """Render one row per test outcome, in arrival order.

    Args:
        report: The Report to display.
        console: Rich Console for output.
        failures_only: If True, only failed tests are listed.
    """
    rows = [
        (idx, outcome)
        for idx, outcome in enumerate(report.tests, start=1)
        if not (failures_only and outcome.passed)
    ]
    if not rows:
        return

    table = Table(box=box.SIMPLE, title="Tests", title_justify="left")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Test")
    table.add_column("Status")
    table.add_column("Time", justify="right")

    for idx, outcome in rows:
        symbol, style = _status_display(outcome.status.value)
        table.add_row(
            str(idx),
            escape(outcome.name) or "[dim]<unnamed>[/dim]",
            f"[{style}]{symbol}[/{style}]",
            outcome.execution_time,
        )

    console.print(table)


def output_json(report: Report) -> None:
    """Write the report as pure JSON to stdout.

    No Rich markup, no color, no extra text. The document is the same
    one written to results.json.
    """
    sys.stdout.write(report.to_json(indent=2))
    sys.stdout.write("\n")
