"""
AS Claim Tracker - record-management backend for after-service claims.

This package tracks AS claims across three product categories (general items,
converters, floodlights) and provides:

- A category registry with bilingual column labels
- Interchangeable storage backends (PostgreSQL, in-memory fallback)
- Bulk upsert and renumbering of the display sequence
- Dashboard aggregation and a recent-activity log
- A FastAPI HTTP API and a Typer command line
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from as_tracker.config import Settings, get_settings
from as_tracker.domain.categories import CATEGORIES, Category, lookup
from as_tracker.domain.errors import (
    BackendError,
    InvalidCategoryError,
    InvalidValueError,
    NotFoundError,
    TrackerError,
)
from as_tracker.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Categories
    "CATEGORIES",
    "Category",
    "lookup",
    # Errors
    "BackendError",
    "InvalidCategoryError",
    "InvalidValueError",
    "NotFoundError",
    "TrackerError",
    # Logging
    "configure_logging",
    "get_logger",
]
