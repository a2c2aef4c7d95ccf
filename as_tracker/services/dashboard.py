"""
Dashboard aggregation across every category.

Per-category status counts are read concurrently on a small thread pool and then
reduced into global totals. The call is all-or-nothing: if any category read
fails, no partial statistics are returned.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

from as_tracker.domain.categories import CATEGORIES, STATUS_COMPLETED
from as_tracker.domain.errors import BackendError, TrackerError
from as_tracker.domain.models import CategoryStats, DashboardStats
from as_tracker.storage.abstract import RecordStore, StatusCounts
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)


def _category_stats(counts: StatusCounts) -> CategoryStats:
    total = sum(counts.values())
    completed = counts.get(STATUS_COMPLETED, 0)
    return CategoryStats(total=total, completed=completed, incomplete=total - completed)


def completion_rate(completed: int, total: int) -> str:
    """Percentage with one decimal, halves rounded up; "0.0" when there is nothing to count."""
    if total <= 0:
        return "0.0"
    rate = Decimal(completed * 100) / Decimal(total)
    return str(rate.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate(store: RecordStore, max_workers: Optional[int] = None) -> DashboardStats:
    """
    Collect status counts for all categories and reduce them into global totals.

    Raises
    ------
    BackendError
        If any per-category read fails.
    """
    keys = list(CATEGORIES)
    workers = max_workers or len(keys)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dashboard") as pool:
        futures = {key: pool.submit(store.count_by_status, CATEGORIES[key]) for key in keys}

    per_category: Dict[str, CategoryStats] = {}
    failures: Dict[str, str] = {}
    for key, future in futures.items():
        try:
            per_category[key] = _category_stats(future.result())
        except TrackerError as exc:
            failures[key] = exc.message
        except Exception as exc:  # noqa: BLE001
            failures[key] = str(exc)

    if failures:
        log.error("Dashboard aggregation failed", extra={"failures": failures})
        detail = "; ".join(f"{key}: {message}" for key, message in failures.items())
        raise BackendError(f"Dashboard aggregation failed ({detail})")

    total = sum(stats["total"] for stats in per_category.values())
    completed = sum(stats["completed"] for stats in per_category.values())
    return DashboardStats(
        total=total,
        completed=completed,
        incomplete=total - completed,
        completionRate=completion_rate(completed, total),
        perCategory=per_category,
    )


__all__ = ["aggregate", "completion_rate"]
