# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from contentflow.logging.context import (
    clear_context,
    get_context,
    set_run_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.run_id is None
        assert ctx.stage is None
        assert ctx.attempt is None

    def test_set_run_context_resets_stage(self):
        set_stage_context("market_research", 1)
        set_run_context("run1")
        ctx = get_context()
        assert ctx.run_id == "run1"
        assert ctx.stage is None
        assert ctx.attempt is None

    def test_set_stage_context(self):
        set_stage_context("content_scraping", 2)
        ctx = get_context()
        assert ctx.stage == "content_scraping"
        assert ctx.attempt == 2

    def test_as_dict_filters_none(self):
        set_run_context("run1")
        d = get_context().as_dict()
        assert d == {"run_id": "run1"}

    def test_clear(self):
        set_run_context("run1")
        set_stage_context("test", 1)
        clear_context()
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_tasks_do_not_share_context(self):
        async def worker(run_id: str) -> str | None:
            set_run_context(run_id)
            await asyncio.sleep(0)
            return get_context().run_id

        results = await asyncio.gather(
            asyncio.create_task(worker("a")), asyncio.create_task(worker("b")),
        )
        assert results == ["a", "b"]
