"""Tally data models - re-exports all public model classes."""

from tally.models.config import (
    CountMode,
    RunnerConfig,
    StreamFormat,
    TallyConfig,
    load_config,
)
from tally.models.report import SCHEMA_VERSION, OutcomeStatus, Report, TestOutcome

__all__ = [
    "SCHEMA_VERSION",
    "CountMode",
    "OutcomeStatus",
    "Report",
    "RunnerConfig",
    "StreamFormat",
    "TallyConfig",
    "TestOutcome",
    "load_config",
]
