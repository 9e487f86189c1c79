"""Tests for Rich terminal output rendering."""

from __future__ import annotations

import json
from io import StringIO
from pathlib import Path

from rich.console import Console

from tally.cli.output import output_json, render_details, render_headline
from tally.models.report import OutcomeStatus, Report, TestOutcome


def _console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, width=120, force_terminal=False, no_color=True), buf


def _report(max_score: int | None = 4) -> Report:
    tests = [
        TestOutcome(name="tests::adds", status=OutcomeStatus.passed, execution_time="1ms"),
        TestOutcome(name="tests::subtracts", status=OutcomeStatus.failed, execution_time="2ms"),
        TestOutcome(name="", status=OutcomeStatus.failed),
    ]
    return Report(
        overall_status=OutcomeStatus.failed,
        tests=tests,
        max_score=max_score,
        computed_score=1 if max_score == 4 else None,
    )


class TestRenderHeadline:
    """Tests for render_headline."""

    def test_shows_status_counts_and_score(self) -> None:
        console, buf = _console()
        render_headline(_report(), console)
        text = buf.getvalue()
        assert "FAIL" in text
        assert "1/3 passed" in text
        assert "1/4" in text

    def test_no_score_row_without_max(self) -> None:
        console, buf = _console()
        render_headline(_report(max_score=None), console)
        assert "Score" not in buf.getvalue()

    def test_results_path_row(self) -> None:
        console, buf = _console()
        render_headline(_report(), console, results_path=Path("out/results.json"))
        assert "results.json" in buf.getvalue()

    def test_passing_report(self) -> None:
        console, buf = _console()
        report = Report(
            overall_status=OutcomeStatus.passed,
            tests=[TestOutcome(name="a", status=OutcomeStatus.passed)],
        )
        render_headline(report, console)
        assert "PASS" in buf.getvalue()


class TestRenderDetails:
    """Tests for render_details."""

    def test_lists_all_tests(self) -> None:
        console, buf = _console()
        render_details(_report(), console)
        text = buf.getvalue()
        assert "tests::adds" in text
        assert "tests::subtracts" in text
        assert "<unnamed>" in text

    def test_failures_only(self) -> None:
        console, buf = _console()
        render_details(_report(), console, failures_only=True)
        text = buf.getvalue()
        assert "tests::adds" not in text
        assert "tests::subtracts" in text

    def test_nothing_rendered_when_all_pass_and_failures_only(self) -> None:
        console, buf = _console()
        report = Report(
            overall_status=OutcomeStatus.passed,
            tests=[TestOutcome(name="a", status=OutcomeStatus.passed)],
        )
        render_details(report, console, failures_only=True)
        assert buf.getvalue() == ""


class TestOutputJson:
    """Tests for output_json."""

    def test_writes_results_document(self, capsys) -> None:
        output_json(_report())
        captured = capsys.readouterr()
        assert json.loads(captured.out) == _report().to_dict()
