"""
In-memory storage backend.

Used when PostgreSQL is not reachable at startup (or when forced through
STORAGE_BACKEND=memory). State lives for the lifetime of the process. Rows are kept
in the same shape the relational backend stores, so both backends share the codec
and behave identically on the wire.
"""

from __future__ import annotations

import threading
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from as_tracker.domain.categories import CATEGORIES, Category
from as_tracker.domain.codec import (
    Row,
    WireRecord,
    blank_row,
    coerce_id,
    decode,
    encode,
    full_row,
    known_fields,
)
from as_tracker.domain.errors import NotFoundError
from as_tracker.domain.models import ActivityEntry
from as_tracker.storage.abstract import AbstractRecordStore, StatusCounts
from as_tracker.utils.clock import TimestampIds
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)


def _no_sort_key(row: Row) -> Tuple[bool, int]:
    # Rows without a number sort last, like NULLS LAST in the relational backend.
    no = row.get("no")
    return (no is None, no or 0)


class MemoryRecordStore(AbstractRecordStore):
    """
    Per-category lists of rows guarded by a single lock.

    Python's sort is stable, so rows sharing a `no` keep their insertion order when
    listed or renumbered.
    """

    name: str = "memory"

    def __init__(self, ids: Optional[TimestampIds] = None) -> None:
        self._rows: Dict[str, List[Row]] = {key: [] for key in CATEGORIES}
        self._activities: List[ActivityEntry] = []
        self._ids = ids or TimestampIds()
        self._lock = threading.Lock()

    def _index_of(self, category: Category, record_id: int) -> int:
        for index, row in enumerate(self._rows[category.key]):
            if row["id"] == record_id:
                return index
        raise NotFoundError()

    def _new_id(self, category: Category, requested: Optional[int]) -> int:
        taken = {row["id"] for row in self._rows[category.key]}
        if requested is not None and requested not in taken:
            self._ids.observe(requested)
            return requested
        new_id = self._ids.next()
        while new_id in taken:
            new_id = self._ids.next()
        return new_id

    def list_records(self, category: Category) -> List[WireRecord]:
        with self._lock:
            rows = sorted(self._rows[category.key], key=_no_sort_key)
            return [decode(row, category) for row in rows]

    def get_record(self, category: Category, record_id: int) -> WireRecord:
        with self._lock:
            row = self._rows[category.key][self._index_of(category, record_id)]
            return decode(row, category)

    def insert_record(self, category: Category, data: Mapping[str, Any]) -> WireRecord:
        row = blank_row(category)
        row.update(encode(data, category))
        requested = coerce_id(data.get("id"))
        with self._lock:
            row["id"] = self._new_id(category, requested)
            self._rows[category.key].append(row)
            stored = decode(row, category)
        return {**stored, **known_fields(data, category), "id": row["id"]}

    def update_record(
        self, category: Category, record_id: int, data: Mapping[str, Any]
    ) -> WireRecord:
        changes = encode(data, category, partial=True)
        with self._lock:
            rows = self._rows[category.key]
            index = self._index_of(category, record_id)
            updated = {**rows[index], **changes, "id": record_id}
            rows[index] = updated
            return decode(updated, category)

    def delete_record(self, category: Category, record_id: int) -> None:
        with self._lock:
            rows = self._rows[category.key]
            del rows[self._index_of(category, record_id)]

    def delete_all(self, category: Category) -> None:
        with self._lock:
            removed = len(self._rows[category.key])
            self._rows[category.key] = []
        log.info("Category cleared", extra={"category": category.key, "removed": removed})

    def bulk_upsert(
        self, category: Category, items: Sequence[Mapping[str, Any]], clear_first: bool
    ) -> int:
        prepared = [(coerce_id(item.get("id")), full_row(item, category)) for item in items]
        with self._lock:
            rows: List[Row] = [] if clear_first else list(self._rows[category.key])
            positions = {row["id"]: index for index, row in enumerate(rows)}
            for requested, row in prepared:
                if requested is not None and requested in positions:
                    row["id"] = requested
                    rows[positions[requested]] = row
                    continue
                if requested is not None:
                    self._ids.observe(requested)
                new_id = requested if requested is not None else self._ids.next()
                while new_id in positions:
                    new_id = self._ids.next()
                row["id"] = new_id
                positions[new_id] = len(rows)
                rows.append(row)
            self._rows[category.key] = rows
        log.info(
            "Bulk upsert completed",
            extra={"category": category.key, "count": len(items), "clear_first": clear_first},
        )
        return len(items)

    def renumber(self, category: Category) -> None:
        with self._lock:
            rows = sorted(self._rows[category.key], key=_no_sort_key)
            for position, row in enumerate(rows, start=1):
                row["no"] = position
        log.info("Renumbered records", extra={"category": category.key, "count": len(rows)})

    def next_no(self, category: Category) -> int:
        with self._lock:
            numbers = [row["no"] for row in self._rows[category.key] if row.get("no") is not None]
        return (max(numbers) if numbers else 0) + 1

    def count_by_status(self, category: Category) -> StatusCounts:
        with self._lock:
            return dict(Counter(row["status"] for row in self._rows[category.key]))

    def append_activity(self, entry: ActivityEntry) -> ActivityEntry:
        with self._lock:
            self._activities.append(entry)
        return entry

    def list_activities(self, limit: int) -> List[ActivityEntry]:
        with self._lock:
            newest_first = sorted(self._activities, key=lambda e: e.id, reverse=True)
        return newest_first[:limit]


__all__ = ["MemoryRecordStore"]
