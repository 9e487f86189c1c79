"""Exception taxonomy for tally.

Per-record problems in an event stream never surface as exceptions;
only whole-stream and environment failures do. The CLI maps every
TallyError to a message on stderr and a non-zero exit code.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class TallyError(Exception):
    """Base class for errors surfaced to tally callers."""


class MalformedDocumentError(TallyError, ValueError):
    """Raised when a single-document stream cannot be decoded.

    Attributes:
        reason: The decoder's description of the problem.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Runner output is not a valid JSON event document: {reason}")


class InvalidDirectoryError(TallyError):
    """Raised when an input or output directory is missing or not a directory."""

    def __init__(self, path: Path, reason: str, role: str = "") -> None:
        self.path = path
        self.reason = reason
        self.role = role
        label = f"{role.capitalize()} directory" if role else "Directory"
        super().__init__(f"{label} '{path}' {reason}")


class ConfigError(TallyError):
    """Raised when a tally.yaml file cannot be read or validated."""


class RunnerNotFoundError(TallyError):
    """Raised when the test runner executable cannot be found."""

    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(
            f"Test runner '{executable}' was not found. "
            "Check that it is installed and on PATH."
        )


class RunnerTimeoutError(TallyError):
    """Raised when the test runner does not finish within its timeout."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        self.command = list(command)
        self.timeout = timeout
        super().__init__(
            f"Test runner '{' '.join(self.command)}' did not finish "
            f"within {timeout:g}s and was killed"
        )


class RunnerStartError(TallyError):
    """Raised when the test runner exists but cannot be started."""

    def __init__(self, executable: str, reason: str) -> None:
        self.executable = executable
        self.reason = reason
        super().__init__(f"Test runner '{executable}' could not be started: {reason}")


class ResultWriteError(TallyError):
    """Raised when the results file cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write results to '{path}': {reason}")
