"""
Domain package for the AS claim tracker.

Exports the category registry, the record codec helpers, the error types, and the
fixed-shape wire models. Keep this package free of I/O.
"""

from as_tracker.domain.categories import CATEGORIES, Category, FieldSpec, category_keys, lookup
from as_tracker.domain.errors import (
    BackendError,
    InvalidCategoryError,
    InvalidValueError,
    NotFoundError,
    TrackerError,
)
from as_tracker.domain.models import ActivityCreate, ActivityEntry, BulkRequest, DashboardStats

__all__ = [
    "ActivityCreate",
    "ActivityEntry",
    "BackendError",
    "BulkRequest",
    "CATEGORIES",
    "Category",
    "DashboardStats",
    "FieldSpec",
    "InvalidCategoryError",
    "InvalidValueError",
    "NotFoundError",
    "TrackerError",
    "category_keys",
    "lookup",
]
