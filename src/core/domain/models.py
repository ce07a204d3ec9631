"""Domain models (Pydantic v2).

These models describe *what* a run produces, not *how* it is produced:
- `UnitResult`: disposition of one input line.
- `StoredArtifact`: a body persisted under its content-derived name.
- `RunSummary`: the tally computed once every unit has completed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field, model_validator
from pydantic.config import ConfigDict


class Outcome(str, Enum):
    """Disposition of a unit of work."""

    SAVED = "saved"
    PRINTED = "printed"
    IGNORED = "ignored"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self is not Outcome.FAILED


class StoredArtifact(BaseModel):
    """A response body stored as `<host>_<sha256>.sha256`."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(
        ...,
        description="Host parsed from the source URL (empty when unparsable).",
    )
    digest: str = Field(
        ...,
        min_length=64,
        max_length=64,
        description="Lowercase hex SHA-256 of the stored bytes.",
    )
    filename: str = Field(..., min_length=1)
    path: Path


class UnitResult(BaseModel):
    """Result of processing one URL."""

    url: str
    outcome: Outcome
    status_code: int | None = Field(
        default=None,
        description="HTTP status, when a response was received.",
    )
    artifact: StoredArtifact | None = None
    error: str | None = Field(
        default=None,
        description="Cause of the failure for FAILED results.",
    )


class RunSummary(BaseModel):
    """Aggregate tally of a run. Immutable once computed."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    ignored: int = Field(default=0, ge=0)
    saved: int = Field(default=0, ge=0)
    printed: int = Field(default=0, ge=0)
    directory: Path | None = Field(
        default=None,
        description="Output directory, None in stdout mode.",
    )

    @model_validator(mode="after")
    def _check_counts(self) -> "RunSummary":
        if self.failed > self.total:
            raise ValueError("failed count exceeds dispatched units")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> int:
        return self.total - self.failed
