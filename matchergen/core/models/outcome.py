"""
Outcome models — the per-candidate result contract.

Every candidate that enters the generate phase ends in exactly one
GenerationOutcome: either an artifact or a failure record. The engine
collects outcomes into a report instead of raising for the batch.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from matchergen.core.errors import MatcherGenerationError
from matchergen.core.models.template import GeneratedArtifact


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class GenerationFailure(BaseModel):
    """Why a candidate (or an input name) was dropped.

    Attributes:
        candidate: Candidate identity, or the unresolved input name.
        kind:      Error kind (see ``matchergen.core.errors``).
        stage:     Pipeline stage the failure happened in.
        cause:     Human-readable cause.
    """

    candidate: str
    kind: str
    stage: Literal["find", "generate", "compile_load"]
    cause: str = ""

    @classmethod
    def from_error(
        cls,
        error: Exception,
        stage: Literal["find", "generate", "compile_load"],
        candidate: str | None = None,
    ) -> GenerationFailure:
        """Build a failure record from a raised exception."""
        if isinstance(error, MatcherGenerationError):
            kind = error.kind
            candidate = candidate or error.candidate
        else:
            kind = "internal"
        cause = str(error)
        if error.__cause__ is not None:
            cause = f"{cause}: {error.__cause__}"
        return cls(candidate=candidate or "", kind=kind, stage=stage, cause=cause)

    def __str__(self) -> str:
        return f"{self.candidate} [{self.kind}] {self.cause}"


class GenerationOutcome(BaseModel):
    """Result of running one candidate through the pipeline."""

    candidate: str
    status: Literal["ok", "failed"] = "ok"
    finished_at: str = Field(default_factory=_now_iso)

    artifact: GeneratedArtifact | None = None
    failure: GenerationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, artifact: GeneratedArtifact, **kwargs: Any) -> GenerationOutcome:
        """Create a success outcome."""
        return cls(candidate=artifact.candidate, status="ok", artifact=artifact, **kwargs)

    @classmethod
    def failure_of(cls, failure: GenerationFailure, **kwargs: Any) -> GenerationOutcome:
        """Create a failure outcome."""
        return cls(candidate=failure.candidate, status="failed", failure=failure, **kwargs)
