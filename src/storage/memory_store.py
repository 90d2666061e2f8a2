# src/storage/memory_store.py — v1
"""In-process run store (STORE_BACKEND=memory).

Nothing survives the process. Returned models are copies, so callers
cannot mutate stored state behind the store's back.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from contentflow.core.errors import RunNotFound, StepNotFound
from contentflow.core.models import (
    Run,
    RunStatus,
    StepRecord,
    StepStatus,
    build_step_records,
    utc_now,
)
from contentflow.storage.base_run_store import BaseRunStore, check_transition


class MemoryRunStore(BaseRunStore):
    """Dict-backed run store for tests and one-shot CLI runs."""

    def __init__(self) -> None:
        self._runs: dict[str, Run] = {}
        self._steps: dict[str, StepRecord] = {}

    async def create_run(self, name: str, initial_payload: dict[str, Any]) -> Run:
        run = Run(name=name, initial_payload=dict(initial_payload))
        self._runs[run.id] = run
        for step in build_step_records(run):
            self._steps[step.id] = step
        return run.model_copy(deep=True)

    async def get_run(self, run_id: str) -> Run | None:
        run = self._runs.get(run_id)
        return run.model_copy(deep=True) if run else None

    async def list_runs(self) -> list[Run]:
        runs = sorted(self._runs.values(), key=lambda r: r.created_at, reverse=True)
        return [r.model_copy(deep=True) for r in runs]

    async def update_run(
        self,
        run_id: str,
        status: RunStatus,
        completed_at: datetime | None = None,
    ) -> Run:
        run = self._runs.get(run_id)
        if run is None:
            raise RunNotFound(run_id)
        check_transition("run", run_id, run.status, status)

        updates: dict[str, Any] = {"status": status, "updated_at": utc_now()}
        if completed_at is not None:
            updates["completed_at"] = completed_at
        run = run.model_copy(update=updates)
        self._runs[run_id] = run
        return run.model_copy(deep=True)

    async def update_step(
        self,
        step_id: str,
        status: StepStatus,
        output: Any = None,
        error: str | None = None,
        completed_at: datetime | None = None,
        input: dict[str, Any] | None = None,
    ) -> StepRecord:
        step = self._steps.get(step_id)
        if step is None:
            raise StepNotFound(step_id)
        check_transition("step", step_id, step.status, status, allow_refresh=True)

        updates: dict[str, Any] = {"status": status, "updated_at": utc_now()}
        if output is not None:
            updates["output"] = output
        if error is not None:
            updates["error"] = error
        if completed_at is not None:
            updates["completed_at"] = completed_at
        if input is not None:
            updates["input"] = dict(input)
        step = step.model_copy(update=updates)
        self._steps[step_id] = step
        return step.model_copy(deep=True)

    async def get_steps_by_run(self, run_id: str) -> list[StepRecord]:
        steps = [s for s in self._steps.values() if s.run_id == run_id]
        steps.sort(key=lambda s: s.stage.position)
        return [s.model_copy(deep=True) for s in steps]
