"""Test-runner invocation: spawn the runner and capture its output.

The runner is started in the exercise directory with stdout and
stderr captured as bytes. A non-zero exit code is expected when tests
fail and is returned, not raised.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from tally.errors import RunnerNotFoundError, RunnerStartError, RunnerTimeoutError
from tally.models.config import DEFAULT_RUNNER_COMMAND

logger = logging.getLogger(__name__)


@dataclass
class RunnerOutput:
    """Captured result of one test-runner process."""

    command: list[str]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""
    duration_seconds: float = 0.0
    cwd: Path | None = None

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


def build_command(
    command: Sequence[str] = DEFAULT_RUNNER_COMMAND,
    extra_args: Sequence[str] = (),
) -> list[str]:
    """Append caller-supplied runner arguments to the base command."""
    if not command:
        raise ValueError("Runner command must not be empty")
    return [*command, *extra_args]


async def run_tests(
    input_dir: Path,
    command: Sequence[str] = DEFAULT_RUNNER_COMMAND,
    extra_args: Sequence[str] = (),
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> RunnerOutput:
    """Run the test runner in input_dir and capture its output.

    Args:
        input_dir: Working directory for the runner process.
        command: Base runner command line.
        extra_args: Extra arguments appended after the base command.
        timeout: Seconds to wait before killing the runner, or None
            to wait indefinitely.
        env: Extra environment variables layered over os.environ.

    Returns:
        RunnerOutput with the exit code and captured streams.

    Raises:
        RunnerNotFoundError: If the runner executable does not exist.
        RunnerStartError: If the runner cannot be spawned (e.g. it is not
            executable).
        RunnerTimeoutError: If the runner exceeds ``timeout``.
    """
    argv = build_command(command, extra_args)
    process_env = {**os.environ, **env} if env else None

    logger.info("Running tests in directory: %s", input_dir)
    logger.debug("Runner command: %s", argv)

    start = time.perf_counter()
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=input_dir,
            env=process_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise RunnerNotFoundError(argv[0]) from exc
    except OSError as exc:
        raise RunnerStartError(argv[0], exc.strerror or str(exc)) from exc

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise RunnerTimeoutError(argv, timeout) from None

    elapsed = time.perf_counter() - start
    returncode = process.returncode if process.returncode is not None else -1
    logger.info("Runner exited with code %d after %.2fs", returncode, elapsed)

    return RunnerOutput(
        command=argv,
        returncode=returncode,
        stdout=stdout or b"",
        stderr=stderr or b"",
        duration_seconds=elapsed,
        cwd=input_dir,
    )
