"""Tally: normalize test-runner event streams into scored results reports."""

__version__ = "0.1.0"

from tally.errors import MalformedDocumentError, TallyError  # noqa: E402
from tally.models.report import Report, TestOutcome  # noqa: E402
from tally.scoring.aggregator import summarize  # noqa: E402

__all__ = [
    "MalformedDocumentError",
    "Report",
    "TallyError",
    "TestOutcome",
    "__version__",
    "summarize",
]
