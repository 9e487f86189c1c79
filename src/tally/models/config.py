"""Configuration models for tally.

Captures tally.yaml fields with defaults matching the cargo libtest
JSON runner. CLI options override individual fields.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tally.errors import ConfigError

CONFIG_FILENAME = "tally.yaml"

DEFAULT_RUNNER_COMMAND: list[str] = [
    "cargo",
    "+nightly",
    "test",
    "--",
    "-Z",
    "unstable-options",
    "--format",
    "json",
    "--report-time",
]


class StreamFormat(str, Enum):
    """Shape of the runner's captured stdout."""

    auto = "auto"
    lines = "lines"
    document = "document"


class CountMode(str, Enum):
    """Where the run's total test count comes from."""

    observed = "observed"
    declared = "declared"


class RunnerConfig(BaseModel):
    """How the external test runner is invoked."""

    model_config = {"extra": "forbid"}

    command: list[str] = Field(default_factory=lambda: list(DEFAULT_RUNNER_COMMAND), min_length=1)
    timeout_seconds: float | None = Field(default=None, gt=0)
    env: dict[str, str] = Field(default_factory=dict)


class TallyConfig(BaseModel):
    """Project-level configuration loaded from tally.yaml."""

    model_config = {"extra": "forbid"}

    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    stream_format: StreamFormat = StreamFormat.auto
    count_mode: CountMode = CountMode.observed
    empty_suite_passes: bool = False
    results_filename: str = Field(default="results.json", min_length=1)

    @field_validator("results_filename")
    @classmethod
    def _check_results_filename(cls, value: str) -> str:
        if value in (".", "..") or Path(value).name != value or "\\" in value:
            raise ValueError(f"results_filename must be a bare file name, got '{value}'")
        return value

    def with_overrides(self, **overrides: Any) -> TallyConfig:
        """Return a copy with every non-None override applied.

        ``timeout_seconds`` is routed to the nested runner section.
        """
        updates = {k: v for k, v in overrides.items() if v is not None}
        data = self.model_dump()
        timeout = updates.pop("timeout_seconds", None)
        if timeout is not None:
            data["runner"]["timeout_seconds"] = timeout
        data.update(updates)
        return TallyConfig.model_validate(data)


def load_config(
    config_path: Path | None = None,
    search_dir: Path | None = None,
) -> TallyConfig:
    """Load TallyConfig from an explicit path or from search_dir/tally.yaml.

    Returns defaults when no explicit path is given and search_dir has
    no tally.yaml.

    Raises:
        ConfigError: If the explicit file is missing, the YAML is
            invalid, or the contents fail validation.
    """
    if config_path is None:
        if search_dir is None:
            return TallyConfig()
        config_path = search_dir / CONFIG_FILENAME
        if not config_path.exists():
            return TallyConfig()
    elif not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if raw is None:
        return TallyConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")

    try:
        return TallyConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{exc}") from exc
