from __future__ import annotations

import re
from typing import List

import pytest

from as_tracker.domain.categories import lookup
from as_tracker.domain.errors import BackendError
from as_tracker.services.activity import RECENT_LIMIT, ActivityLog
from as_tracker.services.dashboard import aggregate, completion_rate
from as_tracker.storage.memory import MemoryRecordStore
from as_tracker.utils.clock import TimestampIds, utc_now_iso


class _FailingStore(MemoryRecordStore):
    def count_by_status(self, category):
        if category.key == "converter":
            raise BackendError("connection lost")
        return super().count_by_status(category)


class TestDashboard:
    def test_empty_store(self, memory_store):
        stats = aggregate(memory_store)
        assert stats["total"] == 0
        assert stats["completed"] == 0
        assert stats["incomplete"] == 0
        assert stats["completionRate"] == "0.0"
        assert set(stats["perCategory"]) == {"general", "converter", "floodlight"}

    def test_totals_across_categories(self, memory_store):
        memory_store.insert_record(lookup("general"), {"status": "completed"})
        memory_store.insert_record(lookup("general"), {})
        memory_store.insert_record(lookup("converter"), {"status": "completed"})

        stats = aggregate(memory_store, max_workers=2)

        assert stats["total"] == 3
        assert stats["completed"] == 2
        assert stats["incomplete"] == 1
        assert stats["completionRate"] == "66.7"
        assert stats["perCategory"]["general"] == {"total": 2, "completed": 1, "incomplete": 1}
        assert stats["perCategory"]["floodlight"]["total"] == 0

    def test_any_category_failure_fails_the_call(self):
        store = _FailingStore()
        with pytest.raises(BackendError) as excinfo:
            aggregate(store)
        assert "converter" in excinfo.value.message

    @pytest.mark.parametrize(
        "completed, total, expected",
        [
            (0, 0, "0.0"),
            (1, 3, "33.3"),
            (2, 3, "66.7"),
            (4, 4, "100.0"),
            (1, 16, "6.3"),
            (3, 16, "18.8"),
            (1, 8, "12.5"),
        ],
    )
    def test_completion_rate(self, completed, total, expected):
        assert completion_rate(completed, total) == expected


class TestActivityLog:
    def test_record_and_list_newest_first(self, memory_store):
        activity_log = ActivityLog(memory_store)
        first = activity_log.record(type="add", message="added", item_name="LED", icon="plus")
        second = activity_log.record(type="delete", message="removed")

        recent = activity_log.list_recent()

        assert [entry.id for entry in recent] == [second.id, first.id]
        assert second.id > first.id
        assert recent[1].item_name == "LED"
        assert recent[0].item_name is None

    def test_list_is_capped(self, memory_store):
        activity_log = ActivityLog(memory_store)
        for i in range(RECENT_LIMIT + 5):
            activity_log.record(message=f"event {i}")
        recent = activity_log.list_recent()
        assert len(recent) == RECENT_LIMIT
        assert recent[0].message == f"event {RECENT_LIMIT + 4}"

    def test_created_shape_uses_item_name_alias(self, memory_store):
        entry = ActivityLog(memory_store).record(item_name="LED")
        created = entry.as_created()
        assert created["itemName"] == "LED"
        assert "item_name" not in created


class TestClock:
    def test_ids_strictly_increase_within_one_millisecond(self):
        ids = TimestampIds(clock=lambda: 1_000)
        issued: List[int] = [ids.next() for _ in range(3)]
        assert issued == [1_000, 1_001, 1_002]

    def test_ids_follow_the_clock_when_it_moves_ahead(self):
        ticks = iter([10, 50])
        ids = TimestampIds(clock=lambda: next(ticks))
        assert ids.next() == 10
        assert ids.next() == 50

    def test_observe_raises_the_floor(self):
        ids = TimestampIds(clock=lambda: 5)
        ids.observe(100)
        assert ids.next() == 101

    def test_utc_timestamp_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_now_iso())
