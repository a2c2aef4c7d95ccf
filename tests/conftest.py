"""
Pytest configuration for the AS claim tracker.

Provides fixtures for:
- Settings override for unit and integration tests
- In-memory store and HTTP test client
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import psycopg
import pytest
from fastapi.testclient import TestClient

from as_tracker.api.app import create_app
from as_tracker.config import Settings
from as_tracker.infrastructure.db_factory import schema_statements
from as_tracker.storage.memory import MemoryRecordStore


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "as_management"),
        storage_backend="memory",
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except Exception:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        with conn.cursor() as cur:
            for statement in schema_statements():
                cur.execute(statement)
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def clean_tables(db_connection: psycopg.Connection):
    """
    Empty every category table and the activity table around each test.
    """
    tables = "as_general, as_converter, as_floodlight, recent_activities"
    with db_connection.cursor() as cur:
        cur.execute(f"TRUNCATE TABLE {tables} RESTART IDENTITY;")
    yield
    with db_connection.cursor() as cur:
        cur.execute(f"TRUNCATE TABLE {tables} RESTART IDENTITY;")


@pytest.fixture
def memory_store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    path = tmp_path / "public"
    path.mkdir()
    return path


@pytest.fixture
def client(
    memory_store: MemoryRecordStore, test_settings: Settings, static_dir: Path
) -> Generator[TestClient, None, None]:
    """
    HTTP client bound to an app serving from a fresh in-memory store.
    """
    settings = test_settings.model_copy(update={"static_dir": str(static_dir)})
    app = create_app(store=memory_store, settings=settings)
    with TestClient(app) as test_client:
        yield test_client
