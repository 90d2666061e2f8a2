# src/storage/sqlite_store.py — v1
"""SQLite-based run store (STORE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency. Payloads, inputs and outputs
are stored as JSON text; timestamps as ISO-8601 strings.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from contentflow.core.errors import RunNotFound, StepNotFound
from contentflow.core.models import (
    Run,
    RunStatus,
    StepRecord,
    StepStatus,
    StageType,
    build_step_records,
    utc_now,
)
from contentflow.storage.base_run_store import BaseRunStore, check_transition

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS runs (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    status TEXT NOT NULL,
    initial_payload TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    completed_at TEXT
);
CREATE TABLE IF NOT EXISTS step_records (
    id TEXT PRIMARY KEY,
    run_id TEXT NOT NULL REFERENCES runs(id) ON DELETE CASCADE,
    stage TEXT NOT NULL,
    position INTEGER NOT NULL,
    status TEXT NOT NULL,
    input TEXT,
    output TEXT,
    error TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    completed_at TEXT,
    UNIQUE (run_id, stage)
);
CREATE INDEX IF NOT EXISTS idx_step_records_run ON step_records(run_id);
"""

_RUN_COLUMNS = "id, name, status, initial_payload, created_at, updated_at, completed_at"
_STEP_COLUMNS = (
    "id, run_id, stage, status, input, output, error, created_at, updated_at, completed_at"
)


class SqliteRunStore(BaseRunStore):
    """SQLite-backed run store; survives process restarts."""

    def __init__(self, db_path: Path | str) -> None:
        if str(db_path) == ":memory:":
            target = ":memory:"
        else:
            path = Path(db_path).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.executescript(_SCHEMA)

    async def create_run(self, name: str, initial_payload: dict[str, Any]) -> Run:
        run = Run(name=name, initial_payload=dict(initial_payload))
        steps = build_step_records(run)
        with self._conn:
            self._conn.execute(
                f"INSERT INTO runs ({_RUN_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    run.id,
                    run.name,
                    run.status.value,
                    json.dumps(run.initial_payload),
                    run.created_at.isoformat(),
                    run.updated_at.isoformat(),
                    None,
                ),
            )
            self._conn.executemany(
                """INSERT INTO step_records
                   (id, run_id, stage, position, status, input, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        s.id,
                        s.run_id,
                        s.stage.value,
                        s.stage.position,
                        s.status.value,
                        _dump(s.input),
                        s.created_at.isoformat(),
                        s.updated_at.isoformat(),
                    )
                    for s in steps
                ],
            )
        logger.debug("Created run %s with %d step records", run.id, len(steps))
        return run

    async def get_run(self, run_id: str) -> Run | None:
        row = self._conn.execute(
            f"SELECT {_RUN_COLUMNS} FROM runs WHERE id = ?", (run_id,)
        ).fetchone()
        return _row_to_run(row) if row else None

    async def list_runs(self) -> list[Run]:
        rows = self._conn.execute(
            f"SELECT {_RUN_COLUMNS} FROM runs ORDER BY created_at DESC"
        ).fetchall()
        return [_row_to_run(r) for r in rows]

    async def update_run(
        self,
        run_id: str,
        status: RunStatus,
        completed_at: datetime | None = None,
    ) -> Run:
        run = await self.get_run(run_id)
        if run is None:
            raise RunNotFound(run_id)
        check_transition("run", run_id, run.status, status)

        with self._conn:
            self._conn.execute(
                """UPDATE runs SET status = ?, updated_at = ?,
                   completed_at = COALESCE(?, completed_at) WHERE id = ?""",
                (
                    status.value,
                    utc_now().isoformat(),
                    completed_at.isoformat() if completed_at else None,
                    run_id,
                ),
            )
        updated = await self.get_run(run_id)
        if updated is None:
            raise RunNotFound(run_id)
        return updated

    async def update_step(
        self,
        step_id: str,
        status: StepStatus,
        output: Any = None,
        error: str | None = None,
        completed_at: datetime | None = None,
        input: dict[str, Any] | None = None,
    ) -> StepRecord:
        step = self._get_step(step_id)
        if step is None:
            raise StepNotFound(step_id)
        check_transition("step", step_id, step.status, status, allow_refresh=True)

        with self._conn:
            self._conn.execute(
                """UPDATE step_records SET status = ?, updated_at = ?,
                   output = COALESCE(?, output),
                   error = COALESCE(?, error),
                   completed_at = COALESCE(?, completed_at),
                   input = COALESCE(?, input)
                   WHERE id = ?""",
                (
                    status.value,
                    utc_now().isoformat(),
                    _dump(output),
                    error,
                    completed_at.isoformat() if completed_at else None,
                    _dump(input),
                    step_id,
                ),
            )
        updated = self._get_step(step_id)
        if updated is None:
            raise StepNotFound(step_id)
        return updated

    async def get_steps_by_run(self, run_id: str) -> list[StepRecord]:
        rows = self._conn.execute(
            f"SELECT {_STEP_COLUMNS} FROM step_records WHERE run_id = ? ORDER BY position",
            (run_id,),
        ).fetchall()
        return [_row_to_step(r) for r in rows]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _get_step(self, step_id: str) -> StepRecord | None:
        row = self._conn.execute(
            f"SELECT {_STEP_COLUMNS} FROM step_records WHERE id = ?", (step_id,)
        ).fetchone()
        return _row_to_step(row) if row else None


def _dump(value: Any) -> str | None:
    return None if value is None else json.dumps(value, ensure_ascii=False)


def _load(value: str | None) -> Any:
    return None if value is None else json.loads(value)


def _ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _row_to_run(row: sqlite3.Row) -> Run:
    return Run(
        id=row["id"],
        name=row["name"],
        status=RunStatus(row["status"]),
        initial_payload=json.loads(row["initial_payload"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        completed_at=_ts(row["completed_at"]),
    )


def _row_to_step(row: sqlite3.Row) -> StepRecord:
    return StepRecord(
        id=row["id"],
        run_id=row["run_id"],
        stage=StageType(row["stage"]),
        status=StepStatus(row["status"]),
        input=_load(row["input"]),
        output=_load(row["output"]),
        error=row["error"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
        completed_at=_ts(row["completed_at"]),
    )
