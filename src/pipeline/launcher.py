# src/pipeline/launcher.py — v1
"""Fire-and-forget scheduling of pipeline runs.

start_pipeline() returns immediately; callers observe progress by polling
the run store. Every in-flight task is referenced until it finishes so the
event loop cannot garbage-collect it mid-run.
"""

from __future__ import annotations

import asyncio
import logging

from contentflow.pipeline.executor import PipelineExecutor, RunResult

logger = logging.getLogger(__name__)


class PipelineLauncher:
    """Schedule run_pipeline calls as background asyncio tasks."""

    def __init__(self, executor: PipelineExecutor) -> None:
        self._executor = executor
        self._tasks: dict[str, asyncio.Task[RunResult]] = {}

    @property
    def in_flight(self) -> list[str]:
        return list(self._tasks)

    def start_pipeline(self, run_id: str) -> None:
        """Schedule the run; must be called from inside a running event loop."""
        if run_id in self._tasks:
            logger.warning("Run %s is already executing", run_id)
            return
        task = asyncio.create_task(self._executor.run_pipeline(run_id), name=f"run-{run_id}")
        self._tasks[run_id] = task
        task.add_done_callback(lambda t: self._on_done(run_id, t))
        logger.debug("Scheduled run %s", run_id)

    async def wait_idle(self) -> list[RunResult]:
        """Await every in-flight run and return their results."""
        results: list[RunResult] = []
        while self._tasks:
            snapshot = dict(self._tasks)
            outcomes = await asyncio.gather(*snapshot.values(), return_exceptions=True)
            for run_id, outcome in zip(snapshot, outcomes):
                self._tasks.pop(run_id, None)
                if isinstance(outcome, RunResult):
                    results.append(outcome)
        return results

    def _on_done(self, run_id: str, task: asyncio.Task[RunResult]) -> None:
        self._tasks.pop(run_id, None)
        if task.cancelled():
            logger.warning("Run %s was cancelled", run_id)
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Run %s aborted: %s", run_id, exc)
