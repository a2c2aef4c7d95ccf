"""
Translation between the stored row shape and the wire record shape.

Rows use NULL for "no value" in integer columns, while the wire format always
carries every field and uses the empty string for missing values. Encoding is
presence-filtered: fields absent from the input are left out of the row, which
is what makes partial updates possible.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from as_tracker.domain.categories import (
    STATUS_COMPLETED,
    STATUS_INCOMPLETE,
    Category,
)
from as_tracker.domain.errors import InvalidValueError

Row = Dict[str, Any]
WireRecord = Dict[str, Any]

VALID_STATUSES = (STATUS_INCOMPLETE, STATUS_COMPLETED)


def coerce_int(key: str, value: Any) -> Optional[int]:
    """
    Normalize a wire value for an integer column.

    Empty string and None mean "no value". Integral floats and numeric strings
    are accepted; anything else raises InvalidValueError.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidValueError(f"Invalid value for {key}: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidValueError(f"Invalid value for {key}: {value!r}")


def coerce_id(value: Any) -> Optional[int]:
    return coerce_int("id", value)


def coerce_status(value: Any) -> str:
    if value is None or value == "":
        return STATUS_INCOMPLETE
    if value not in VALID_STATUSES:
        raise InvalidValueError(f"Invalid status: {value!r}")
    return value


def _coerce_field(category: Category, key: str, value: Any) -> Any:
    if key in category.integer_keys():
        return coerce_int(key, value)
    return value


def decode(row: Mapping[str, Any], category: Category) -> WireRecord:
    """Stored row -> wire record with every field present."""
    record: WireRecord = {
        "id": row.get("id"),
        "status": row.get("status") or STATUS_INCOMPLETE,
    }
    for key in category.field_keys:
        value = row.get(key)
        record[key] = "" if value is None else value
    return record


def encode(data: Mapping[str, Any], category: Category, partial: bool = False) -> Row:
    """
    Wire record -> row holding only the fields present in `data`.

    `status` defaults to "incomplete" unless `partial` is set, in which case an
    absent status is left untouched like any other field.
    """
    row: Row = {}
    if not partial or "status" in data:
        row["status"] = coerce_status(data.get("status"))
    for key in category.field_keys:
        if key in data:
            row[key] = _coerce_field(category, key, data[key])
    return row


def blank_row(category: Category) -> Row:
    row: Row = {key: None for key in category.field_keys}
    row["status"] = STATUS_INCOMPLETE
    return row


def full_row(item: Mapping[str, Any], category: Category) -> Row:
    """
    Whole-row form used by bulk upserts: missing text fields become "",
    missing integers NULL, status defaults to "incomplete".
    """
    row: Row = {}
    for key in category.field_keys:
        value = item.get(key)
        if key in category.integer_keys():
            row[key] = coerce_int(key, value)
        else:
            row[key] = "" if value is None else value
    row["status"] = coerce_status(item.get("status"))
    return row


def known_fields(data: Mapping[str, Any], category: Category) -> WireRecord:
    """The subset of `data` that belongs to the category's record shape."""
    allowed = set(category.field_keys) | {"status"}
    return {k: v for k, v in data.items() if k in allowed}


__all__ = [
    "Row",
    "VALID_STATUSES",
    "WireRecord",
    "blank_row",
    "coerce_id",
    "coerce_int",
    "coerce_status",
    "decode",
    "encode",
    "full_row",
    "known_fields",
]
