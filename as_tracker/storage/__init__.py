"""
Storage package for the AS claim tracker.

Re-exports the storage interface, both backends, and the startup selection helper
so downstream code can import from `as_tracker.storage` directly.
"""

from as_tracker.storage.abstract import AbstractRecordStore, RecordStore, StatusCounts
from as_tracker.storage.factory import available_backends, create_store
from as_tracker.storage.memory import MemoryRecordStore
from as_tracker.storage.postgres import PostgresRecordStore

__all__ = [
    # Abstracts
    "AbstractRecordStore",
    "RecordStore",
    "StatusCounts",
    # Backends
    "MemoryRecordStore",
    "PostgresRecordStore",
    # Selection
    "available_backends",
    "create_store",
]
