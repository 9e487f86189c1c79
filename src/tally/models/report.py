"""Report data models for normalized test-run results.

These models encode the results.json output contract: one TestOutcome
per terminal test event plus a whole-run Report with an overall
status and an optional proportional score.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

# Current schema version for results.json documents.
SCHEMA_VERSION = 1


class OutcomeStatus(str, Enum):
    """Pass/fail status of a single test or of a whole run."""

    passed = "pass"
    failed = "fail"


class TestOutcome(BaseModel):
    """Normalized result of one observed test.

    Field aliases match the results.json keys (``line_no``, ``score``).
    ``unit_score`` is derived from ``status`` when not given.
    """

    __test__ = False

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    name: str = ""
    status: OutcomeStatus = OutcomeStatus.failed
    message: str | None = None
    line_number: int | None = Field(default=None, alias="line_no")
    execution_time: str = "0ms"
    unit_score: int = Field(default=0, alias="score", ge=0, le=1)

    @model_validator(mode="before")
    @classmethod
    def _derive_unit_score(cls, data: Any) -> Any:
        if isinstance(data, dict) and "score" not in data and "unit_score" not in data:
            status = OutcomeStatus(data.get("status", OutcomeStatus.failed))
            data = {**data, "unit_score": 1 if status is OutcomeStatus.passed else 0}
        return data

    @model_validator(mode="after")
    def _check_unit_score(self) -> TestOutcome:
        expected = 1 if self.status is OutcomeStatus.passed else 0
        if self.unit_score != expected:
            raise ValueError(
                f"score {self.unit_score} does not match status '{self.status.value}'"
            )
        return self

    @property
    def passed(self) -> bool:
        return self.status is OutcomeStatus.passed


class Report(BaseModel):
    """Whole-run summary written to results.json.

    ``computed_score`` is never part of the serialized document; it is
    derived from the outcomes when a report is built or decoded.
    Designed for JSON serialization and lossless round-trip of the
    documented field set.
    """

    model_config = {"frozen": True, "populate_by_name": True, "extra": "forbid"}

    schema_version: int = Field(default=SCHEMA_VERSION, alias="version")
    overall_status: OutcomeStatus = Field(alias="status")
    tests: list[TestOutcome] = Field(default_factory=list)
    max_score: int | None = Field(default=None, ge=0)
    computed_score: int | None = Field(default=None, ge=0, exclude=True)

    @field_validator("schema_version")
    @classmethod
    def _check_version(cls, value: int) -> int:
        if value > SCHEMA_VERSION:
            raise ValueError(
                f"Report schema version {value} is newer than supported "
                f"version {SCHEMA_VERSION}"
            )
        return value

    @model_validator(mode="after")
    def _check_score(self) -> Report:
        if self.computed_score is None:
            return self
        if self.max_score is None:
            raise ValueError("computed_score requires max_score")
        if self.computed_score > self.max_score:
            raise ValueError(
                f"computed_score {self.computed_score} exceeds max_score {self.max_score}"
            )
        return self

    @property
    def passed(self) -> bool:
        return self.overall_status is OutcomeStatus.passed

    @property
    def passed_count(self) -> int:
        return sum(1 for t in self.tests if t.passed)

    def to_dict(self) -> dict[str, Any]:
        """Return the results.json document as plain JSON types.

        ``max_score`` is omitted when it was not supplied; ``message``
        and ``line_no`` are always present, possibly null.
        """
        data = self.model_dump(mode="json", by_alias=True)
        if self.max_score is None:
            data.pop("max_score", None)
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Report:
        """Decode a results.json document, re-deriving ``computed_score``.

        The documented fields round-trip exactly. The score is always
        recomputed from the decoded outcomes on the observed-count basis,
        since results.json does not record a declared total: a report
        built in declared mode with fewer outcomes than declared decodes
        with the observed-basis score. A ``computed_score`` key in the
        input is rejected.
        """
        from tally.scoring.aggregator import compute_score

        if "computed_score" in data:
            raise ValueError("computed_score is derived and cannot be supplied")
        report = cls.model_validate(data)
        if report.max_score is None:
            return report
        score = compute_score(report.passed_count, len(report.tests), report.max_score)
        return report.model_copy(update={"computed_score": score})

    @classmethod
    def from_json(cls, content: str | bytes) -> Report:
        return cls.from_dict(json.loads(content))
