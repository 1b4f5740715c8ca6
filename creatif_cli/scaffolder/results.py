"""Stage and run results.

Every scaffolding stage reports back through a ``StageResult`` instead of
exiting the process or invoking a rollback callback.  The orchestrator
aggregates them into a ``ScaffoldResult`` and decides once, centrally,
whether the run has to be rolled back.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, computed_field


# ---------------------------------------------------------------------------
# Per-stage result
# ---------------------------------------------------------------------------

class StageResult(BaseModel):
    """Outcome of a single pipeline stage."""

    stage: str = Field(..., description="Stage name such as 'download' or 'extract'")
    success: bool = Field(default=True)
    error: str | None = Field(default=None, description="Why the stage failed")
    written: list[Path] = Field(default_factory=list, description="Files created by the stage")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal problems")

    @classmethod
    def failed(cls, stage: str, error: str, **kwargs) -> "StageResult":
        """Shorthand for a failed stage."""
        return cls(stage=stage, success=False, error=error, **kwargs)


# ---------------------------------------------------------------------------
# Whole-run result
# ---------------------------------------------------------------------------

class ScaffoldResult(BaseModel):
    """Aggregated outcome of one ``ProjectGenerator.create`` run."""

    working_directory: Path
    stages: list[StageResult] = Field(default_factory=list)
    rolled_back: bool = Field(default=False)

    @computed_field  # type: ignore[misc]
    @property
    def success(self) -> bool:
        """True when at least one stage ran and none failed."""
        return bool(self.stages) and all(s.success for s in self.stages)

    @property
    def failed_stage(self) -> StageResult | None:
        """The stage that stopped the pipeline, if any."""
        return next((s for s in self.stages if not s.success), None)

    @property
    def warnings(self) -> list[str]:
        return [w for s in self.stages for w in s.warnings]

    @property
    def written(self) -> list[Path]:
        return [p for s in self.stages for p in s.written]
