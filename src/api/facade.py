# src/api/facade.py — v1
"""Public API facade — start runs and observe their progress.

Usage:
    from contentflow.api.facade import ContentFlow
    flow = ContentFlow.from_settings(settings)
    run = await flow.start_run({"name": "spring", "initialInput": {"targetGenre": "fitness"}})
    view = await flow.get_run_view(run.id)
"""

from __future__ import annotations

import logging
from typing import Any

from contentflow.api.models import RunExport, RunView, StartRunRequest
from contentflow.config.settings import Settings
from contentflow.core.errors import RunNotFound
from contentflow.core.models import Run, StepStatus
from contentflow.pipeline.executor import PipelineExecutor
from contentflow.pipeline.launcher import PipelineLauncher
from contentflow.storage.base_run_store import BaseRunStore
from contentflow.storage.store_factory import create_run_store

logger = logging.getLogger(__name__)


class ContentFlow:
    """Entry point wiring a run store, an executor and a launcher.

    Args:
        store: Run store shared by the executor and the read side.
        executor: Configured PipelineExecutor.
    """

    def __init__(self, store: BaseRunStore, executor: PipelineExecutor) -> None:
        self._store = store
        self._executor = executor
        self._launcher = PipelineLauncher(executor)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **executor_kwargs: Any) -> ContentFlow:
        """Build the facade from settings (.env loaded if None)."""
        settings = settings or Settings()
        store = create_run_store(settings)
        executor = PipelineExecutor(store, settings=settings, **executor_kwargs)
        return cls(store, executor)

    @property
    def store(self) -> BaseRunStore:
        return self._store

    @property
    def launcher(self) -> PipelineLauncher:
        return self._launcher

    async def start_run(self, request: StartRunRequest | dict[str, Any]) -> Run:
        """Validate the request, create the run and schedule its pipeline.

        Returns immediately with the Pending run; poll get_run_view().

        Raises:
            pydantic.ValidationError: If the request is malformed.
        """
        if not isinstance(request, StartRunRequest):
            request = StartRunRequest.model_validate(request)

        run = await self._store.create_run(request.run_name, request.initial_input.to_payload())
        logger.info("Created run %s (%s)", run.id, run.name)
        self._launcher.start_pipeline(run.id)
        return run

    async def get_run_view(self, run_id: str) -> RunView:
        """Current run status with its ordered steps.

        Raises:
            RunNotFound: Unknown run id.
        """
        run = await self._require_run(run_id)
        steps = await self._store.get_steps_by_run(run_id)
        return RunView.build(run, steps)

    async def list_runs(self) -> list[Run]:
        return await self._store.list_runs()

    async def export_run(self, run_id: str) -> dict[str, Any]:
        """JSON-serialisable export of a run's completed outputs and errors.

        Raises:
            RunNotFound: Unknown run id.
        """
        run = await self._require_run(run_id)
        steps = await self._store.get_steps_by_run(run_id)
        export = RunExport(
            run_id=run.id,
            name=run.name,
            status=run.status,
            initial_payload=run.initial_payload,
            created_at=run.created_at,
            completed_at=run.completed_at,
            outputs={s.stage.value: s.output for s in steps if s.status == StepStatus.COMPLETED},
            errors={s.stage.value: s.error for s in steps if s.error},
        )
        return export.model_dump(mode="json")

    async def wait_idle(self) -> None:
        """Block until every scheduled run has finished."""
        await self._launcher.wait_idle()

    def close(self) -> None:
        self._store.close()

    async def _require_run(self, run_id: str) -> Run:
        run = await self._store.get_run(run_id)
        if run is None:
            raise RunNotFound(run_id)
        return run
