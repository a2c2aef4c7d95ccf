"""
Database connection factory utilities for the AS claim tracker.

Provides centralized management of the PostgreSQL connection pool with proper
lifecycle management, the availability probe used to pick a storage backend at
startup, and the DDL for the category and activity tables.

Connection failures are never retried: the probe either succeeds within the
configured timeout or the service falls back to the in-memory backend.
"""

from __future__ import annotations

import atexit
import threading
from typing import List, Optional

import psycopg
from psycopg_pool import ConnectionPool

from as_tracker.config import Settings, get_settings
from as_tracker.domain.categories import CATEGORIES, Category
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)

ACTIVITY_TABLE = "recent_activities"


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def probe_database(dsn: str, timeout: int) -> bool:
    """
    Check whether PostgreSQL answers a trivial query within `timeout` seconds.
    """
    try:
        with psycopg.connect(dsn, connect_timeout=timeout) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error as exc:
        log.info("Database probe failed", extra={"error": str(exc)})
        return False


class PoolManager:
    """
    Thread-safe singleton for managing the database connection pool.

    Handles lifecycle management with automatic cleanup via atexit hook.
    """

    _instance: Optional["PoolManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "PoolManager":
        """Create or return the singleton instance."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._pool: Optional[ConnectionPool] = None
                # Register cleanup on exit
                atexit.register(cls._instance.close_all)
            return cls._instance

    def get_pool(
        self,
        settings: Optional[Settings] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
    ) -> ConnectionPool:
        """
        Get or create the connection pool.

        Parameters
        ----------
        settings : Settings, optional
            Connection and pool sizing settings (defaults to the cached environment
            settings). A pool opened for a different DSN is closed and reopened.
        min_size : int, optional
            Minimum number of idle connections to keep (defaults to settings).
        max_size : int, optional
            Maximum total connections in the pool (defaults to settings).

        Returns
        -------
        ConnectionPool
            The managed pool instance.
        """
        settings = settings or get_settings()
        dsn = build_dsn(settings)
        with self._lock:
            if self._pool is not None and self._pool.conninfo != dsn:
                self._pool.close()
                log.info("Connection pool closed for reconfiguration")
                self._pool = None
            if self._pool is None:
                self._pool = ConnectionPool(
                    conninfo=dsn,
                    min_size=min_size or settings.db_pool_min_size,
                    max_size=max_size or settings.db_pool_max_size,
                    open=True,
                )
                log.info(
                    "Connection pool opened",
                    extra={"host": settings.db_host, "db": settings.db_name},
                )
            return self._pool

    def close_all(self) -> None:
        """
        Close the managed pool and release resources.

        This is called automatically on exit via atexit hook.
        """
        with self._lock:
            if self._pool is not None:
                try:
                    self._pool.close()
                    log.info("Connection pool closed")
                finally:
                    self._pool = None


def get_pool(
    settings: Optional[Settings] = None,
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> ConnectionPool:
    """
    Get or create the connection pool via PoolManager.
    """
    return PoolManager().get_pool(settings, min_size=min_size, max_size=max_size)


def category_table_ddl(category: Category) -> str:
    columns = ["id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY"]
    for field in category.fields:
        if field.kind == "integer":
            columns.append(f"{field.key} INTEGER")
        else:
            columns.append(f"{field.key} TEXT")
    columns.append("status TEXT DEFAULT 'incomplete'")
    body = ",\n    ".join(columns)
    return f"CREATE TABLE IF NOT EXISTS {category.table} (\n    {body}\n);"


def activity_table_ddl() -> str:
    return (
        f"CREATE TABLE IF NOT EXISTS {ACTIVITY_TABLE} (\n"
        "    id BIGINT PRIMARY KEY,\n"
        "    type TEXT,\n"
        "    message TEXT,\n"
        "    item_name TEXT,\n"
        '    "timestamp" TEXT,\n'
        "    icon TEXT\n"
        ");"
    )


def schema_statements() -> List[str]:
    """DDL for every category table plus the activity table, in creation order."""
    statements = [category_table_ddl(category) for category in CATEGORIES.values()]
    statements.append(activity_table_ddl())
    return statements


__all__ = [
    "ACTIVITY_TABLE",
    "PoolManager",
    "activity_table_ddl",
    "build_dsn",
    "category_table_ddl",
    "get_pool",
    "probe_database",
    "schema_statements",
]
