# src/logging/context.py — v1
"""Contextual logging support: attach run_id, stage, attempt to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables are task-local, so concurrent runs never share them.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)
_attempt: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "attempt", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    stage: str | None = None
    attempt: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        stage=_stage.get(),
        attempt=_attempt.get(),
    )


def set_run_context(run_id: str) -> None:
    """Set run-level context (called once per pipeline execution)."""
    _run_id.set(run_id)
    _stage.set(None)
    _attempt.set(None)


def set_stage_context(stage: str | None, attempt: int | None = None) -> None:
    """Set stage-level context (called per stage and per attempt)."""
    _stage.set(stage)
    _attempt.set(attempt)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _stage.set(None)
    _attempt.set(None)
