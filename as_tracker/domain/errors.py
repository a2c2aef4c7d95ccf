"""
Error types shared by the storage backends and the HTTP layer.

Each error carries the HTTP status it maps to so the API can render a uniform
`{"error": message}` body without a lookup table.
"""

from __future__ import annotations


class TrackerError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCategoryError(TrackerError):
    status_code = 400

    def __init__(self, category: str) -> None:
        super().__init__("Invalid category")
        self.category = category


class InvalidValueError(TrackerError):
    """A field value that cannot be stored in its column (e.g. text in `no`)."""

    status_code = 400


class NotFoundError(TrackerError):
    status_code = 404

    def __init__(self, message: str = "Item not found") -> None:
        super().__init__(message)


class BackendError(TrackerError):
    """Underlying storage failure; the message is passed through to the caller."""

    status_code = 500


__all__ = [
    "BackendError",
    "InvalidCategoryError",
    "InvalidValueError",
    "NotFoundError",
    "TrackerError",
]
