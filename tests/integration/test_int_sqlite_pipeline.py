# tests/integration/test_int_sqlite_pipeline.py — v1
"""Pipeline runs persisted in SQLite and read back from a new connection."""

from __future__ import annotations

import pytest

from contentflow.api.facade import ContentFlow
from contentflow.config.settings import Settings
from contentflow.core.models import RunStatus, StepStatus
from contentflow.storage.sqlite_store import SqliteRunStore


class TestSqlitePipeline:
    @pytest.mark.asyncio
    async def test_completed_run_survives_restart(self, tmp_path, make_llm, success_script, no_sleep):
        settings = Settings(
            _env_file=None,
            store_backend="sqlite",
            database_path=tmp_path / "contentflow.db",
        )
        flow = ContentFlow.from_settings(settings, llm_factory=make_llm(success_script), sleep=no_sleep)
        run = await flow.start_run({"initialInput": {"targetGenre": "health and fitness"}})
        await flow.wait_idle()
        flow.close()

        store = SqliteRunStore(settings.database_path)
        try:
            stored = await store.get_run(run.id)
            assert stored.status == RunStatus.COMPLETED
            steps = await store.get_steps_by_run(run.id)
            assert [s.status for s in steps] == [StepStatus.COMPLETED] * 8
            assert steps[0].input["targetGenre"] == "health and fitness"
            assert "prompt" in steps[0].input
            assert steps[4].output["product_lineup"]["frontend"]["price"] == 1980
        finally:
            store.close()

    @pytest.mark.asyncio
    async def test_failed_run_persisted(self, tmp_path, make_llm, no_sleep):
        settings = Settings(_env_file=None, database_path=tmp_path / "c.db")
        flow = ContentFlow.from_settings(settings, llm_factory=make_llm(["nope"]), sleep=no_sleep)
        run = await flow.start_run({})
        await flow.wait_idle()

        view = await flow.get_run_view(run.id)
        flow.close()
        assert view.status == RunStatus.FAILED
        assert view.steps[0].error == "Invalid output format"
