# src/core/models.py — v1
"""Core domain models: StageType, RunStatus, StepStatus, Run, StepRecord.

A Run owns exactly one StepRecord per StageType, created up front in
STAGE_SEQUENCE order. Status values follow a one-way state machine.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Timezone-aware current timestamp."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class StageType(str, Enum):
    """The eight pipeline stages. Declaration order is execution order."""

    MARKET_RESEARCH = "market_research"
    CONTENT_SCRAPING = "content_scraping"
    NLP_CLASSIFICATION = "nlp_classification"
    TEMPLATE_OPTIMIZATION = "template_optimization"
    BUSINESS_STRATEGY = "business_strategy"
    CONTENT_CREATION = "content_creation"
    COPY_GENERATION = "copy_generation"
    OPTIMIZATION_ARCHIVE = "optimization_archive"

    @property
    def position(self) -> int:
        """Zero-based index of this stage in STAGE_SEQUENCE."""
        return STAGE_SEQUENCE.index(self)


STAGE_SEQUENCE: tuple[StageType, ...] = tuple(StageType)


class _LifecycleMixin:
    """Shared lifecycle: pending -> running -> completed | failed."""

    value: str

    @property
    def is_terminal(self) -> bool:
        return self.value in ("completed", "failed")

    def can_transition_to(self, target: _LifecycleMixin) -> bool:
        return target.value in _ALLOWED_TRANSITIONS[self.value]


_ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"running"}),
    "running": frozenset({"completed", "failed"}),
    "completed": frozenset(),
    "failed": frozenset(),
}


class RunStatus(_LifecycleMixin, str, Enum):
    """Status of a whole pipeline run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepStatus(_LifecycleMixin, str, Enum):
    """Status of a single stage within a run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Run(BaseModel):
    """One end-to-end pipeline execution."""

    id: str = Field(default_factory=new_id)
    name: str
    status: RunStatus = RunStatus.PENDING
    initial_payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None


class StepRecord(BaseModel):
    """Persisted execution state of one stage within a run."""

    id: str = Field(default_factory=new_id)
    run_id: str
    stage: StageType
    status: StepStatus = StepStatus.PENDING
    input: dict[str, Any] | None = None
    output: Any = None
    error: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None


def build_step_records(run: Run) -> list[StepRecord]:
    """Create the Pending step records for a freshly created run.

    The first stage receives the run's initial payload as its input.
    """
    records: list[StepRecord] = []
    for index, stage in enumerate(STAGE_SEQUENCE):
        records.append(
            StepRecord(
                run_id=run.id,
                stage=stage,
                input=dict(run.initial_payload) if index == 0 else None,
                created_at=run.created_at,
                updated_at=run.created_at,
            )
        )
    return records
