"""
Append-only activity log shown on the dashboard's "recent activity" panel.
"""

from __future__ import annotations

from typing import List, Optional

from as_tracker.domain.models import ActivityEntry
from as_tracker.storage.abstract import RecordStore
from as_tracker.utils.clock import TimestampIds, utc_now_iso

RECENT_LIMIT = 50


class ActivityLog:
    def __init__(self, store: RecordStore, ids: Optional[TimestampIds] = None) -> None:
        self._store = store
        self._ids = ids or TimestampIds()

    def record(
        self,
        type: Optional[str] = None,
        message: Optional[str] = None,
        item_name: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> ActivityEntry:
        entry = ActivityEntry(
            id=self._ids.next(),
            type=type,
            message=message,
            item_name=item_name,
            timestamp=utc_now_iso(),
            icon=icon,
        )
        return self._store.append_activity(entry)

    def list_recent(self, limit: int = RECENT_LIMIT) -> List[ActivityEntry]:
        return self._store.list_activities(limit)


__all__ = ["ActivityLog", "RECENT_LIMIT"]
