# src/storage/base_run_store.py — v1
"""Abstract run store interface.

Persists Runs and their StepRecords. Implementations enforce the
status state machine: a write that would move a run or step backwards,
or out of a terminal state, raises StatusTransitionError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from contentflow.core.errors import StatusTransitionError
from contentflow.core.models import Run, RunStatus, StepRecord, StepStatus


class BaseRunStore(ABC):
    """Unified interface for run persistence backends."""

    @abstractmethod
    async def create_run(self, name: str, initial_payload: dict[str, Any]) -> Run:
        """Create a Pending run plus one Pending step record per stage."""

    @abstractmethod
    async def get_run(self, run_id: str) -> Run | None:
        """Retrieve a run by id, or None."""

    @abstractmethod
    async def list_runs(self) -> list[Run]:
        """All runs, newest first."""

    @abstractmethod
    async def update_run(
        self,
        run_id: str,
        status: RunStatus,
        completed_at: datetime | None = None,
    ) -> Run:
        """Set run status.

        Raises:
            RunNotFound: Unknown run id.
            StatusTransitionError: Illegal status change.
        """

    @abstractmethod
    async def update_step(
        self,
        step_id: str,
        status: StepStatus,
        output: Any = None,
        error: str | None = None,
        completed_at: datetime | None = None,
        input: dict[str, Any] | None = None,
    ) -> StepRecord:
        """Set step status and, when given, output/error/completed_at/input.

        Raises:
            StepNotFound: Unknown step id.
            StatusTransitionError: Illegal status change.
        """

    @abstractmethod
    async def get_steps_by_run(self, run_id: str) -> list[StepRecord]:
        """Step records of a run, ordered by stage position."""

    def close(self) -> None:
        """Release backend resources (no-op by default)."""


def check_transition(
    kind: str,
    ident: str,
    current: RunStatus | StepStatus,
    target: RunStatus | StepStatus,
    allow_refresh: bool = False,
) -> None:
    """Reject a status write that is not a forward move.

    With allow_refresh, re-writing the same non-terminal status is accepted
    so a running step can have its input recorded.
    """
    if allow_refresh and current == target and not current.is_terminal:
        return
    if not current.can_transition_to(target):
        raise StatusTransitionError(
            f"Illegal {kind} transition for '{ident}': {current.value} -> {target.value}"
        )
