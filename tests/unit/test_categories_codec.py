from __future__ import annotations

import pytest

from as_tracker.domain.categories import CATEGORIES, category_keys, lookup
from as_tracker.domain.codec import (
    blank_row,
    coerce_int,
    decode,
    encode,
    full_row,
    known_fields,
)
from as_tracker.domain.errors import InvalidCategoryError, InvalidValueError


class TestRegistry:
    def test_fixed_category_set(self):
        assert category_keys() == ["general", "converter", "floodlight"]

    def test_lookup_returns_table_and_ordered_fields(self):
        converter = lookup("converter")
        assert converter.table == "as_converter"
        assert converter.field_keys[:4] == ("no", "division", "claim_no", "hull_number")
        assert "converter_code" in converter.field_keys
        assert "defective_material_code" not in converter.field_keys
        assert converter.labels[4] == ("컨버터 번호", "converter_number")

    def test_general_and_floodlight_share_field_layout(self):
        assert lookup("general").field_keys == lookup("floodlight").field_keys
        assert lookup("floodlight").table == "as_floodlight"

    def test_integer_fields(self):
        for category in CATEGORIES.values():
            assert category.integer_keys() == ("no", "quantity")

    def test_unknown_category_raises(self):
        with pytest.raises(InvalidCategoryError) as excinfo:
            lookup("widget")
        assert excinfo.value.status_code == 400
        assert excinfo.value.message == "Invalid category"


class TestCodec:
    def test_decode_fills_missing_and_null_fields_with_empty_string(self):
        general = lookup("general")
        record = decode({"id": 4, "status": "completed", "no": 2, "notes": None}, general)
        assert record["id"] == 4
        assert record["status"] == "completed"
        assert record["no"] == 2
        assert record["notes"] == ""
        assert record["product_name"] == ""
        assert set(record) == set(general.field_keys) | {"id", "status"}

    def test_decode_keeps_zero_quantity(self):
        record = decode({"id": 1, "status": "incomplete", "quantity": 0}, lookup("general"))
        assert record["quantity"] == 0

    def test_encode_only_includes_present_fields(self):
        row = encode({"product_name": "LED", "bogus": 1}, lookup("floodlight"))
        assert row == {"status": "incomplete", "product_name": "LED"}

    def test_encode_partial_leaves_status_out_when_absent(self):
        row = encode({"notes": "x"}, lookup("general"), partial=True)
        assert row == {"notes": "x"}

    def test_encode_coerces_integer_fields(self):
        row = encode({"no": "7", "quantity": ""}, lookup("general"))
        assert row["no"] == 7
        assert row["quantity"] is None

    def test_encode_rejects_unknown_status(self):
        with pytest.raises(InvalidValueError):
            encode({"status": "done"}, lookup("general"))

    @pytest.mark.parametrize("value, expected", [(3, 3), ("12", 12), (" 5 ", 5), (4.0, 4), ("", None), (None, None)])
    def test_coerce_int_accepts(self, value, expected):
        assert coerce_int("no", value) == expected

    @pytest.mark.parametrize("value", ["abc", 1.5, True, [1]])
    def test_coerce_int_rejects(self, value):
        with pytest.raises(InvalidValueError):
            coerce_int("no", value)

    def test_full_row_defaults_every_field(self):
        converter = lookup("converter")
        row = full_row({"claim_no": "CL-1"}, converter)
        assert row["claim_no"] == "CL-1"
        assert row["installation_location"] == ""
        assert row["no"] is None
        assert row["status"] == "incomplete"
        assert set(row) == set(converter.field_keys) | {"status"}

    def test_blank_row_round_trips_to_empty_record(self):
        general = lookup("general")
        record = decode({**blank_row(general), "id": 1}, general)
        assert all(record[key] == "" for key in general.field_keys)
        assert record["status"] == "incomplete"

    def test_known_fields_drops_unknown_keys(self):
        data = {"no": 1, "status": "completed", "id": 9, "extra": True}
        assert known_fields(data, lookup("general")) == {"no": 1, "status": "completed"}
