# src/storage/store_factory.py — v1
"""Factory for run store instantiation."""

from __future__ import annotations

from contentflow.config.settings import Settings
from contentflow.storage.base_run_store import BaseRunStore


def create_run_store(settings: Settings | None = None) -> BaseRunStore:
    """Instantiate the configured run store backend.

    Args:
        settings: Application settings. Defaults to the in-memory backend.
    """
    backend = "memory" if settings is None else settings.store_backend

    if backend == "memory" or settings is None:
        from contentflow.storage.memory_store import MemoryRunStore
        return MemoryRunStore()

    if backend == "sqlite":
        from contentflow.storage.sqlite_store import SqliteRunStore
        return SqliteRunStore(db_path=settings.database_path)

    raise ValueError(f"Unsupported store backend: {backend!r}")
