"""Classified event types for test-runner JSON records.

A decoded record is mapped onto exactly one of TestEvent, SuiteEvent
or UnrecognizedEvent. Field access is total: an absent or mistyped
field yields its default, never an exception. These are plain frozen
dataclasses (not Pydantic) since records are classified one per line
of runner output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from tally.models.report import OutcomeStatus, TestOutcome

# Sub-states that count as a passing terminal test event.
PASSING_STATES: frozenset[str] = frozenset({"ok", "pass"})

STARTED = "started"

DEFAULT_EXECUTION_TIME = "0ms"


@dataclass(frozen=True)
class TestEvent:
    """Lifecycle transition of a single test (``"type": "test"``)."""

    __test__ = False

    name: str = ""
    state: str = "fail"
    exec_time: str = DEFAULT_EXECUTION_TIME

    @property
    def is_terminal(self) -> bool:
        return self.state != STARTED

    @property
    def passed(self) -> bool:
        return self.state in PASSING_STATES

    def to_outcome(self) -> TestOutcome:
        """Build the TestOutcome for a terminal event.

        Raises:
            ValueError: If the event is a "started" event.
        """
        if not self.is_terminal:
            raise ValueError(f"Test '{self.name}' has not finished; no outcome available")
        return TestOutcome(
            name=self.name,
            status=OutcomeStatus.passed if self.passed else OutcomeStatus.failed,
            execution_time=self.exec_time,
        )


@dataclass(frozen=True)
class SuiteEvent:
    """Lifecycle transition of a whole suite (``"type": "suite"``).

    Only the "started" state carries ``test_count``. Terminal suite
    events carry the runner's own tallies, kept for display only.
    """

    state: str = ""
    test_count: int | None = None
    passed: int | None = None
    failed: int | None = None
    ignored: int | None = None

    @property
    def declared_total(self) -> int | None:
        return self.test_count if self.state == STARTED else None


@dataclass(frozen=True, eq=False)
class UnrecognizedEvent:
    """Any record with a missing or unknown discriminant."""

    raw: Any = None
    kind: str | None = None


Event = Union[TestEvent, SuiteEvent, UnrecognizedEvent]


def _field(raw: Any, key: str) -> Any:
    return raw.get(key) if isinstance(raw, dict) else None


def _str_field(raw: Any, key: str, default: str) -> str:
    value = _field(raw, key)
    return value if isinstance(value, str) else default


def _count_field(raw: Any, key: str) -> int | None:
    value = _field(raw, key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _duration_field(raw: Any, key: str) -> str:
    """Pass the runner's duration through as text.

    Strings are kept verbatim; libtest's numeric seconds are rendered
    with ``str`` and nothing else.
    """
    value = _field(raw, key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return DEFAULT_EXECUTION_TIME


def classify_event(raw: Any) -> Event:
    """Map one decoded JSON record onto its event variant.

    The discriminant is the ``type`` field and the sub-state the
    ``event`` field. A test record without a sub-state is treated as
    a failed terminal event.
    """
    kind = _field(raw, "type")

    if kind == "test":
        return TestEvent(
            name=_str_field(raw, "name", ""),
            state=_str_field(raw, "event", "fail"),
            exec_time=_duration_field(raw, "exec_time"),
        )

    if kind == "suite":
        return SuiteEvent(
            state=_str_field(raw, "event", ""),
            test_count=_count_field(raw, "test_count"),
            passed=_count_field(raw, "passed"),
            failed=_count_field(raw, "failed"),
            ignored=_count_field(raw, "ignored"),
        )

    return UnrecognizedEvent(raw=raw, kind=kind if isinstance(kind, str) else None)
