"""Tests for tally.parsing.events - record classification."""

from __future__ import annotations

import pytest

from tally.models.report import OutcomeStatus
from tally.parsing.events import (
    SuiteEvent,
    TestEvent,
    UnrecognizedEvent,
    classify_event,
)


class TestClassifyTestEvents:
    """Records with "type": "test"."""

    def test_ok_event_is_terminal_and_passed(self) -> None:
        event = classify_event(
            {"type": "test", "name": "tests::adds", "event": "ok", "exec_time": "0.001s"}
        )
        assert event == TestEvent(name="tests::adds", state="ok", exec_time="0.001s")
        assert event.is_terminal is True
        assert event.passed is True

    def test_started_event_is_not_terminal(self) -> None:
        event = classify_event({"type": "test", "event": "started", "name": "tests::adds"})
        assert isinstance(event, TestEvent)
        assert event.is_terminal is False

    def test_failed_event(self) -> None:
        event = classify_event({"type": "test", "name": "t", "event": "failed"})
        assert event.is_terminal is True
        assert event.passed is False

    def test_pass_spelling_counts_as_passed(self) -> None:
        event = classify_event({"type": "test", "name": "t", "event": "pass"})
        assert event.passed is True

    @pytest.mark.parametrize("state", ["ignored", "timeout", "OK", ""])
    def test_other_states_are_failures(self, state: str) -> None:
        event = classify_event({"type": "test", "name": "t", "event": state})
        assert event.is_terminal is True
        assert event.passed is False

    def test_missing_fields_default_conservatively(self) -> None:
        event = classify_event({"type": "test"})
        assert event == TestEvent(name="", state="fail", exec_time="0ms")
        assert event.is_terminal is True
        assert event.passed is False

    def test_mistyped_fields_use_defaults(self) -> None:
        event = classify_event({"type": "test", "name": 42, "event": ["ok"], "exec_time": None})
        assert event == TestEvent(name="", state="fail", exec_time="0ms")

    def test_numeric_exec_time_passes_through_as_text(self) -> None:
        event = classify_event({"type": "test", "name": "t", "event": "ok", "exec_time": 0.25})
        assert event.exec_time == "0.25"

    def test_to_outcome_maps_fields(self) -> None:
        outcome = TestEvent(name="tests::adds", state="ok", exec_time="3ms").to_outcome()
        assert outcome.name == "tests::adds"
        assert outcome.status is OutcomeStatus.passed
        assert outcome.execution_time == "3ms"
        assert outcome.unit_score == 1
        assert outcome.message is None
        assert outcome.line_number is None

    def test_to_outcome_failed_scores_zero(self) -> None:
        outcome = TestEvent(name="t", state="failed").to_outcome()
        assert outcome.status is OutcomeStatus.failed
        assert outcome.unit_score == 0

    def test_to_outcome_rejects_started_event(self) -> None:
        with pytest.raises(ValueError, match="not finished"):
            TestEvent(name="t", state="started").to_outcome()


class TestClassifySuiteEvents:
    """Records with "type": "suite"."""

    def test_started_suite_declares_total(self) -> None:
        event = classify_event({"type": "suite", "event": "started", "test_count": 4})
        assert event == SuiteEvent(state="started", test_count=4)
        assert event.declared_total == 4

    def test_finished_suite_keeps_runner_counts_but_declares_nothing(self) -> None:
        event = classify_event(
            {"type": "suite", "event": "failed", "passed": 2, "failed": 1, "ignored": 0}
        )
        assert isinstance(event, SuiteEvent)
        assert (event.passed, event.failed, event.ignored) == (2, 1, 0)
        assert event.declared_total is None

    @pytest.mark.parametrize("count", ["4", -1, True, 2.5, None])
    def test_invalid_test_count_is_ignored(self, count: object) -> None:
        event = classify_event({"type": "suite", "event": "started", "test_count": count})
        assert event.declared_total is None


class TestClassifyUnrecognized:
    """Records that are neither test nor suite events."""

    def test_unknown_type(self) -> None:
        event = classify_event({"type": "bench", "name": "b"})
        assert isinstance(event, UnrecognizedEvent)
        assert event.kind == "bench"

    def test_missing_discriminant(self) -> None:
        event = classify_event({"name": "t", "event": "ok"})
        assert isinstance(event, UnrecognizedEvent)
        assert event.kind is None

    @pytest.mark.parametrize("raw", [None, 3, "test", ["type", "test"], 1.5])
    def test_non_object_records(self, raw: object) -> None:
        event = classify_event(raw)
        assert isinstance(event, UnrecognizedEvent)
        assert event.raw == raw
