"""Fold classified events into a scored Report.

The fold threads one explicit Tally accumulator through the event
sequence in arrival order. Scoring uses exact integer arithmetic with
round-half-away-from-zero.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from functools import reduce

from tally.models.config import CountMode, StreamFormat
from tally.models.report import SCHEMA_VERSION, OutcomeStatus, Report, TestOutcome
from tally.parsing.events import Event, SuiteEvent, TestEvent
from tally.parsing.stream import Payload, parse_stream


@dataclass
class Tally:
    """Running aggregation state for one run."""

    outcomes: list[TestOutcome] = field(default_factory=list)
    passed: int = 0
    declared: int | None = None

    @property
    def observed(self) -> int:
        return len(self.outcomes)


def _step(tally: Tally, event: Event) -> Tally:
    if isinstance(event, TestEvent):
        if not event.is_terminal:
            return tally
        outcome = event.to_outcome()
        tally.outcomes.append(outcome)
        if outcome.passed:
            tally.passed += 1
    elif isinstance(event, SuiteEvent) and event.declared_total is not None:
        tally.declared = (tally.declared or 0) + event.declared_total
    return tally


def fold_events(events: Iterable[Event]) -> Tally:
    """Consume events once, in order, and return the final Tally."""
    return reduce(_step, events, Tally())


def resolve_total(tally: Tally, count_mode: CountMode | str = CountMode.observed) -> int:
    """Return the total the pass count is measured against.

    In declared mode the suite-declared count is used, raised to the
    observed count if the runner reported more outcomes than it
    declared, and replaced by the observed count if no suite declared
    anything.
    """
    if CountMode(count_mode) is CountMode.declared and tally.declared is not None:
        return max(tally.declared, tally.observed)
    return tally.observed


def determine_status(
    passed: int,
    total: int,
    empty_suite_passes: bool = False,
) -> OutcomeStatus:
    """Return pass iff every counted test passed.

    A run with no tests fails unless ``empty_suite_passes`` is set.
    """
    if total == 0:
        return OutcomeStatus.passed if empty_suite_passes else OutcomeStatus.failed
    return OutcomeStatus.passed if passed == total else OutcomeStatus.failed


def compute_score(passed: int, total: int, max_score: int) -> int:
    """Scale the pass ratio onto max_score, rounding half away from zero.

    ``round(passed / total * max_score)`` computed on integers, so
    1/3 of 10 is 3 and 1/2 of 5 is 3. A zero total scores 0.

    Raises:
        ValueError: If max_score is negative.
    """
    if max_score < 0:
        raise ValueError(f"max_score must be non-negative, got {max_score}")
    if total <= 0:
        return 0
    passed = max(0, min(passed, total))
    score = (2 * passed * max_score + total) // (2 * total)
    return min(score, max_score)


def summarize_events(
    events: Iterable[Event],
    max_score: int | None = None,
    *,
    count_mode: CountMode | str = CountMode.observed,
    empty_suite_passes: bool = False,
) -> Report:
    """Aggregate already-classified events into a Report.

    Args:
        events: Classified events in arrival order; consumed once.
        max_score: Optional score ceiling. When given, the report
            carries a computed_score in ``[0, max_score]``.
        count_mode: Whether the total comes from observed outcomes
            or from suite-declared counts.
        empty_suite_passes: Status of a run with zero counted tests.

    Returns:
        The assembled Report.
    """
    tally = fold_events(events)
    total = resolve_total(tally, count_mode)

    computed_score = None
    if max_score is not None:
        computed_score = compute_score(tally.passed, total, max_score)

    return Report(
        schema_version=SCHEMA_VERSION,
        overall_status=determine_status(tally.passed, total, empty_suite_passes),
        tests=tally.outcomes,
        max_score=max_score,
        computed_score=computed_score,
    )


def summarize(
    event_stream: Payload,
    max_score: int | None = None,
    *,
    stream_format: StreamFormat | str = StreamFormat.auto,
    count_mode: CountMode | str = CountMode.observed,
    empty_suite_passes: bool = False,
) -> Report:
    """Parse captured runner output and summarize it into a Report.

    Pure: no I/O beyond reading ``event_stream`` when it is an open
    stream.

    Raises:
        MalformedDocumentError: In document mode (explicit or sniffed),
            if the payload does not decode.
    """
    events = parse_stream(event_stream, stream_format)
    return summarize_events(
        events,
        max_score,
        count_mode=count_mode,
        empty_suite_passes=empty_suite_passes,
    )
