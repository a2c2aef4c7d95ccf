"""
Storage interface for the AS claim tracker.

Both backends (relational and in-memory) implement the RecordStore protocol so the
HTTP layer, the dashboard aggregator, and the activity log depend only on this
contract. Records cross the interface in wire shape (see `as_tracker.domain.codec`).
"""

from __future__ import annotations

import abc
from typing import Any, Dict, List, Mapping, Protocol, Sequence, runtime_checkable

from as_tracker.domain.categories import Category
from as_tracker.domain.codec import WireRecord
from as_tracker.domain.models import ActivityEntry

StatusCounts = Dict[str, int]


@runtime_checkable
class RecordStore(Protocol):
    """
    Common interface all storage backends must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier ("postgres", "memory").
    """

    name: str

    def init_schema(self) -> None: ...

    def list_records(self, category: Category) -> List[WireRecord]:
        """All records of the category ordered by ascending `no`."""
        ...

    def get_record(self, category: Category, record_id: int) -> WireRecord:
        """Fetch one record or raise NotFoundError."""
        ...

    def insert_record(self, category: Category, data: Mapping[str, Any]) -> WireRecord:
        """Store a new record and return it with its assigned id."""
        ...

    def update_record(
        self, category: Category, record_id: int, data: Mapping[str, Any]
    ) -> WireRecord:
        """Change only the fields present in `data`; raise NotFoundError if absent."""
        ...

    def delete_record(self, category: Category, record_id: int) -> None: ...

    def delete_all(self, category: Category) -> None: ...

    def bulk_upsert(
        self, category: Category, items: Sequence[Mapping[str, Any]], clear_first: bool
    ) -> int:
        """Insert new items and fully replace existing ones by id; return the item count."""
        ...

    def renumber(self, category: Category) -> None:
        """Reassign `no` = 1..N in ascending order of the current `no`."""
        ...

    def next_no(self, category: Category) -> int: ...

    def count_by_status(self, category: Category) -> StatusCounts: ...

    def append_activity(self, entry: ActivityEntry) -> ActivityEntry: ...

    def list_activities(self, limit: int) -> List[ActivityEntry]: ...

    def close(self) -> None: ...


class AbstractRecordStore(abc.ABC):
    """
    ABC helper for class-based implementations.

    Subclasses set `name` and implement every storage operation.
    """

    name: str

    def init_schema(self) -> None:
        """Create backing structures; a no-op unless the backend needs a schema."""

    @abc.abstractmethod
    def list_records(self, category: Category) -> List[WireRecord]:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def get_record(self, category: Category, record_id: int) -> WireRecord:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def insert_record(
        self, category: Category, data: Mapping[str, Any]
    ) -> WireRecord:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def update_record(
        self, category: Category, record_id: int, data: Mapping[str, Any]
    ) -> WireRecord:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def delete_record(self, category: Category, record_id: int) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def delete_all(self, category: Category) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def bulk_upsert(
        self, category: Category, items: Sequence[Mapping[str, Any]], clear_first: bool
    ) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def renumber(self, category: Category) -> None:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def next_no(self, category: Category) -> int:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def count_by_status(self, category: Category) -> StatusCounts:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def append_activity(self, entry: ActivityEntry) -> ActivityEntry:  # pragma: no cover
        raise NotImplementedError

    @abc.abstractmethod
    def list_activities(self, limit: int) -> List[ActivityEntry]:  # pragma: no cover
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""


__all__ = [
    "AbstractRecordStore",
    "RecordStore",
    "StatusCounts",
]
