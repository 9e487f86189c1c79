"""JSON file storage for results reports.

Writes a Report as results.json under a caller-chosen output
directory. Writes are atomic (write to .tmp, then rename) so graders
never observe a partial file.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tally.errors import InvalidDirectoryError, ResultWriteError
from tally.models.report import Report

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "results.json"


def validate_directory(path: Path, role: str = "") -> Path:
    """Check that path exists and is a directory.

    Args:
        path: Directory to check.
        role: Label used in the error message (e.g. "input").

    Returns:
        The same path, for chaining.

    Raises:
        InvalidDirectoryError: If path is missing or not a directory.
    """
    if not path.exists():
        raise InvalidDirectoryError(path, "does not exist", role)
    if not path.is_dir():
        raise InvalidDirectoryError(path, "is not a directory", role)
    return path


class ResultStore:
    """Persist and load a Report as a JSON file in an output directory.

    File layout:
        {output_dir}/
            results.json    # The most recent report
    """

    def __init__(self, output_dir: Path, filename: str = RESULTS_FILENAME) -> None:
        self.output_dir = output_dir
        self.path = output_dir / filename

    def save(self, report: Report) -> Path:
        """Write the report as pretty-printed JSON.

        Returns:
            Path of the written results file.

        Raises:
            InvalidDirectoryError: If the output directory is missing.
            ResultWriteError: If the file cannot be written or renamed; no
                temporary file is left behind.
        """
        validate_directory(self.output_dir, "output")

        content = report.to_json(indent=2)
        tmp_file = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_file.write_text(content + "\n", encoding="utf-8")
            tmp_file.replace(self.path)
        except OSError as exc:
            tmp_file.unlink(missing_ok=True)
            raise ResultWriteError(self.path, exc.strerror or str(exc)) from exc

        logger.info("Test results written to: %s", self.path)
        return self.path

    def load(self) -> Report:
        """Load the report from its JSON file.

        Raises:
            FileNotFoundError: If no results file exists.
        """
        return Report.from_json(self.path.read_text(encoding="utf-8"))

    def exists(self) -> bool:
        return self.path.exists()
