"""
Timestamp-derived identifiers.

Activity entries, and records created by the in-memory backend, take their id from
the current time in milliseconds. Two calls within the same millisecond would
collide, so the generator hands out the previous id + 1 in that case.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Callable


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a `Z` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimestampIds:
    """Strictly increasing millisecond ids, safe to share between threads."""

    def __init__(self, clock: Callable[[], int] = now_ms) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._last = max(self._clock(), self._last + 1)
            return self._last

    def observe(self, value: int) -> None:
        """Never hand out an id at or below `value` from now on."""
        with self._lock:
            self._last = max(self._last, value)


__all__ = ["TimestampIds", "now_ms", "utc_now_iso"]
