import csv
from pathlib import Path

import pytest

from as_tracker import config
from as_tracker.domain.categories import lookup
from as_tracker.storage.factory import available_backends
from scripts import generate_data

_ENV_VARS = ["DB_HOST", "DB_PORT", "DB_USER", "DB_NAME", "STORAGE_BACKEND", "PORT", "MAX_BODY_BYTES"]


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    settings = config.Settings(_env_file=None)
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "as_management"
    assert settings.storage_backend == "auto"
    assert settings.port == 3000
    assert settings.max_body_bytes == 50 * 1024 * 1024


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("PORT", "8080")
    settings = config.Settings(_env_file=None)
    assert settings.storage_backend == "memory"
    assert settings.port == 8080


def test_available_backends_contains_known_entries():
    assert available_backends() == ["memory", "postgres"]


def test_generate_items_is_deterministic_and_shaped_by_category():
    converter = lookup("converter")
    first = generate_data._generate_items(converter, rows=5, seed=123)
    second = generate_data._generate_items(converter, rows=5, seed=123)
    assert first == second
    assert [item["no"] for item in first] == [1, 2, 3, 4, 5]
    for item in first:
        assert set(item) == set(converter.field_keys) | {"status"}
        assert item["status"] in ("completed", "incomplete")


def test_generate_data_writes_csv(tmp_path: Path):
    general = lookup("general")
    csv_path = tmp_path / "general.csv"
    items = generate_data._generate_items(general, rows=5, seed=123)
    generate_data._write_csv(csv_path, general, items)
    assert csv_path.exists()
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    # header + 5 rows = 6 lines
    assert len(rows) == 6
    assert rows[0][:3] == ["NO.", "구분", "클레임 NO."]
    assert rows[0][-1] == "상태"
    assert rows[1][0] == "1"
