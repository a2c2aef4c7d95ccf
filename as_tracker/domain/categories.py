"""
Category registry for the AS claim tracker.

Each product category owns one storage table and an ordered list of fields. The
display labels are the column headers used by the front office spreadsheets;
they are static data consulted only for column ordering and exports.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Tuple

from as_tracker.domain.errors import InvalidCategoryError

FieldKind = Literal["integer", "text"]


@dataclass(frozen=True)
class FieldSpec:
    label: str
    key: str
    kind: FieldKind = "text"


@dataclass(frozen=True)
class Category:
    """
    A fixed product class with its table name and ordered field list.
    """

    key: str
    table: str
    fields: Tuple[FieldSpec, ...]

    @property
    def field_keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields)

    @property
    def labels(self) -> Tuple[Tuple[str, str], ...]:
        """(display label, field key) pairs in column order."""
        return tuple((f.label, f.key) for f in self.fields)

    def integer_keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields if f.kind == "integer")


_HEAD = (
    FieldSpec("NO.", "no", "integer"),
    FieldSpec("구분", "division"),
    FieldSpec("클레임 NO.", "claim_no"),
    FieldSpec("호선번호", "hull_number"),
)

_TAIL = (
    FieldSpec("제품명", "product_name"),
    FieldSpec("수량", "quantity", "integer"),
    FieldSpec("접수일", "receipt_date"),
    FieldSpec("완료일", "completion_date"),
    FieldSpec("비고", "notes"),
)

_MATERIAL_FIELDS = (
    FieldSpec("불량 자재코드", "defective_material_code"),
    FieldSpec("대체 자재 코드", "alternative_material_code"),
)

_CONVERTER_FIELDS = (
    FieldSpec("컨버터 번호", "converter_number"),
    FieldSpec("컨버터 코드", "converter_code"),
    FieldSpec("설치 위치", "installation_location"),
)

CATEGORIES: Dict[str, Category] = {
    "general": Category("general", "as_general", _HEAD + _MATERIAL_FIELDS + _TAIL),
    "converter": Category("converter", "as_converter", _HEAD + _CONVERTER_FIELDS + _TAIL),
    "floodlight": Category("floodlight", "as_floodlight", _HEAD + _MATERIAL_FIELDS + _TAIL),
}

STATUS_INCOMPLETE = "incomplete"
STATUS_COMPLETED = "completed"


def lookup(key: str) -> Category:
    """
    Resolve a category key, raising InvalidCategoryError for unknown keys.
    """
    try:
        return CATEGORIES[key]
    except KeyError:
        raise InvalidCategoryError(key) from None


def category_keys() -> List[str]:
    return list(CATEGORIES)


__all__ = [
    "CATEGORIES",
    "Category",
    "FieldSpec",
    "STATUS_COMPLETED",
    "STATUS_INCOMPLETE",
    "category_keys",
    "lookup",
]
