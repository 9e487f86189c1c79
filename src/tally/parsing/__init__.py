"""Event parsing: decode runner output and classify each record."""

from __future__ import annotations

from tally.parsing.events import (
    Event,
    SuiteEvent,
    TestEvent,
    UnrecognizedEvent,
    classify_event,
)
from tally.parsing.stream import (
    parse_document,
    parse_line_delimited,
    parse_stream,
    sniff_format,
)

__all__ = [
    "Event",
    "SuiteEvent",
    "TestEvent",
    "UnrecognizedEvent",
    "classify_event",
    "parse_document",
    "parse_line_delimited",
    "parse_stream",
    "sniff_format",
]
