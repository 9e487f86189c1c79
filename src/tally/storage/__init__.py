"""Tally storage - results.json persistence and directory checks."""

from tally.storage.results import RESULTS_FILENAME, ResultStore, validate_directory

__all__ = [
    "RESULTS_FILENAME",
    "ResultStore",
    "validate_directory",
]
