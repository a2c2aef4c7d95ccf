"""
Infrastructure package for the AS claim tracker.

Centralizes database connectivity concerns (DSN, pooling, availability probe, DDL).
Keep this layer focused on I/O and resource management, decoupled from the
storage semantics and the HTTP layer.
"""

from as_tracker.infrastructure.db_factory import (
    PoolManager,
    build_dsn,
    get_pool,
    probe_database,
    schema_statements,
)

__all__ = [
    "PoolManager",
    "build_dsn",
    "get_pool",
    "probe_database",
    "schema_statements",
]
