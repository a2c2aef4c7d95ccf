"""
Storage backend selection.

`STORAGE_BACKEND=auto` probes PostgreSQL once at startup and falls back to the
in-memory backend when it does not answer; `postgres` and `memory` force a choice.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from as_tracker.config import Settings, get_settings
from as_tracker.infrastructure.db_factory import build_dsn, probe_database
from as_tracker.storage.abstract import RecordStore
from as_tracker.storage.memory import MemoryRecordStore
from as_tracker.storage.postgres import PostgresRecordStore
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)


def _backend_factories(
    settings: Optional[Settings] = None,
) -> Dict[str, Callable[[], RecordStore]]:
    """Registry of available backends, bound to the given settings."""
    return {
        "postgres": lambda: PostgresRecordStore(settings=settings),
        "memory": lambda: MemoryRecordStore(),
    }


def available_backends() -> List[str]:
    return sorted(_backend_factories().keys())


def resolve_backend_name(settings: Settings) -> str:
    if settings.storage_backend != "auto":
        return settings.storage_backend
    if probe_database(build_dsn(settings), timeout=settings.db_connect_timeout):
        return "postgres"
    log.warning(
        "PostgreSQL unreachable, falling back to in-memory storage",
        extra={"host": settings.db_host, "port": settings.db_port},
    )
    return "memory"


def create_store(settings: Optional[Settings] = None) -> RecordStore:
    """
    Build the configured backend and make sure its schema exists.
    """
    settings = settings or get_settings()
    name = resolve_backend_name(settings)
    factories = _backend_factories(settings)
    if name not in factories:
        raise ValueError(f"Unknown storage backend '{name}'. Available: {', '.join(factories)}")
    store = factories[name]()
    store.init_schema()
    log.info(f"[STORAGE] using {store.name} backend", extra={"backend": store.name})
    return store


__all__ = ["available_backends", "create_store", "resolve_backend_name"]
