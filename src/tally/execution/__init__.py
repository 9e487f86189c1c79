"""Tally execution utilities - test-runner invocation."""

from tally.execution.runner import RunnerOutput, build_command, run_tests

__all__ = [
    "RunnerOutput",
    "build_command",
    "run_tests",
]
