"""
Utilities package for the AS claim tracker.

Exports shared helpers for logging and timestamp-derived identifiers.
Keep this package lightweight and free of domain-specific logic.
"""

from as_tracker.utils.clock import TimestampIds, now_ms, utc_now_iso
from as_tracker.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "TimestampIds",
    "now_ms",
    "utc_now_iso",
]
