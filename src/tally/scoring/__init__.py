"""Aggregation and scoring of classified runner events."""

from __future__ import annotations

from tally.scoring.aggregator import (
    Tally,
    compute_score,
    determine_status,
    fold_events,
    resolve_total,
    summarize,
    summarize_events,
)

__all__ = [
    "Tally",
    "compute_score",
    "determine_status",
    "fold_events",
    "resolve_total",
    "summarize",
    "summarize_events",
]
