"""
Services built on top of the storage interface: dashboard aggregation and the
activity log.
"""

from as_tracker.services.activity import RECENT_LIMIT, ActivityLog
from as_tracker.services.dashboard import aggregate, completion_rate

__all__ = [
    "ActivityLog",
    "RECENT_LIMIT",
    "aggregate",
    "completion_rate",
]
