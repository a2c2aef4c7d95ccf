"""
Configuration settings for the AS claim tracker.

Uses Pydantic Settings to load environment variables for the database connection,
storage backend selection, HTTP serving, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("as_management", alias="DB_NAME")
    db_connect_timeout: int = Field(3, alias="DB_CONNECT_TIMEOUT")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(10, alias="DB_POOL_MAX_SIZE")

    # Storage
    storage_backend: Literal["auto", "postgres", "memory"] = Field(
        "auto", alias="STORAGE_BACKEND"
    )

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # HTTP
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")
    static_dir: str = Field("public", alias="STATIC_DIR")
    max_body_bytes: int = Field(50 * 1024 * 1024, alias="MAX_BODY_BYTES")

    # Dashboard
    dashboard_workers: int = Field(3, alias="DASHBOARD_WORKERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
