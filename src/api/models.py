# src/api/models.py — v1
"""API-level models: StartRunRequest, StepView, RunView, RunExport."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from contentflow.core.models import STAGE_SEQUENCE, Run, RunStatus, StepRecord, StepStatus

NonEmpty = Annotated[str, Field(min_length=1)]

DEFAULT_RUN_NAME = "Untitled run"


class InitialInput(BaseModel):
    """Seed for the first stage. Accepts camelCase keys from JSON clients."""

    model_config = ConfigDict(populate_by_name=True)

    target_genre: NonEmpty | None = Field(default=None, alias="targetGenre")
    keywords: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Initial payload stored on the Run (camelCase keys)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StartRunRequest(BaseModel):
    """Request to create and start a pipeline run."""

    model_config = ConfigDict(populate_by_name=True)

    name: NonEmpty | None = None
    initial_input: InitialInput = Field(default_factory=InitialInput, alias="initialInput")

    @property
    def run_name(self) -> str:
        return self.name or DEFAULT_RUN_NAME


class StepView(BaseModel):
    """Externally visible state of one stage."""

    stage: str
    position: int
    status: StepStatus
    error: str | None = None
    has_output: bool = False
    updated_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_record(cls, step: StepRecord) -> StepView:
        return cls(
            stage=step.stage.value,
            position=step.stage.position,
            status=step.status,
            error=step.error,
            has_output=step.output is not None,
            updated_at=step.updated_at,
            completed_at=step.completed_at,
        )


class RunView(BaseModel):
    """Run plus its ordered steps, as polled by callers."""

    id: str
    name: str
    status: RunStatus
    created_at: datetime
    completed_at: datetime | None = None
    steps: list[StepView] = Field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.steps if s.status == StepStatus.COMPLETED)

    @property
    def progress(self) -> float:
        """Fraction of stages completed (0.0 - 1.0)."""
        return self.completed_count / len(STAGE_SEQUENCE)

    @property
    def current_stage(self) -> str | None:
        for step in self.steps:
            if step.status in (StepStatus.RUNNING, StepStatus.FAILED):
                return step.stage
        return None

    @classmethod
    def build(cls, run: Run, steps: list[StepRecord]) -> RunView:
        return cls(
            id=run.id,
            name=run.name,
            status=run.status,
            created_at=run.created_at,
            completed_at=run.completed_at,
            steps=[StepView.from_record(s) for s in steps],
        )


class RunExport(BaseModel):
    """Portable document with a run's inputs and every stage output."""

    run_id: str
    name: str
    status: RunStatus
    initial_payload: dict[str, Any]
    created_at: datetime
    completed_at: datetime | None = None
    outputs: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
