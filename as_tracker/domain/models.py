"""
Wire models for the AS claim tracker.

Record payloads stay plain dictionaries because their shape depends on the
category; the models below cover the fixed-shape bodies: bulk requests, activity
entries, and dashboard statistics.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, TypedDict

from pydantic import BaseModel, Field


class BulkRequest(BaseModel):
    """
    Body of `POST /api/bulk/{category}`.
    """

    items: List[Dict[str, Any]] = Field(default_factory=list, description="Records to upsert.")
    clear_first: bool = Field(
        False, alias="clearFirst", description="Delete every row of the category first."
    )

    model_config = {"populate_by_name": True}


class ActivityCreate(BaseModel):
    """
    Body of `POST /api/activities`.
    """

    type: Optional[str] = None
    message: Optional[str] = None
    item_name: Optional[str] = Field(None, alias="itemName")
    icon: Optional[str] = None

    model_config = {"populate_by_name": True}


class ActivityEntry(BaseModel):
    """
    Representation of a single row in the `recent_activities` table.
    """

    id: int = Field(..., description="Millisecond timestamp identifier.")
    type: Optional[str] = None
    message: Optional[str] = None
    item_name: Optional[str] = None
    timestamp: str = Field(..., description="ISO-8601 UTC creation time.")
    icon: Optional[str] = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def as_created(self) -> Dict[str, Any]:
        """Shape returned to the client that created the entry."""
        return {
            "id": self.id,
            "type": self.type,
            "message": self.message,
            "itemName": self.item_name,
            "timestamp": self.timestamp,
            "icon": self.icon,
        }


class CategoryStats(TypedDict):
    total: int
    completed: int
    incomplete: int


class DashboardStats(TypedDict):
    total: int
    completed: int
    incomplete: int
    completionRate: str
    perCategory: Dict[str, CategoryStats]


__all__ = [
    "ActivityCreate",
    "ActivityEntry",
    "BulkRequest",
    "CategoryStats",
    "DashboardStats",
]
