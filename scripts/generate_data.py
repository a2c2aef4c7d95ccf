"""
Sample data generation and loading script for the AS claim tracker.

Implements deterministic pseudo-random claim generation, CSV emission with the
category's display labels as headers, and loading through the storage bulk upsert.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List

import typer

from as_tracker.domain.categories import Category, lookup
from as_tracker.storage.factory import create_store

app = typer.Typer(help="Generate sample AS claims, export them as CSV, and load them.")

_DIVISIONS = ["A/S", "교체", "수리", "점검"]
_PRODUCTS = {
    "general": ["배전반", "분전반", "조명 스위치", "콘센트"],
    "converter": ["DC-DC 컨버터", "AC-DC 컨버터", "인버터 모듈"],
    "floodlight": ["LED 투광등 200W", "LED 투광등 400W", "메탈할라이드 투광등"],
}
_LOCATIONS = ["E/R", "BRIDGE", "DECK", "CARGO HOLD", "ACCOMMODATION"]
_NOTES = ["", "", "부품 대기", "현장 확인 필요", "재발생"]


def _generate_items(category: Category, rows: int, seed: int) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    start = date(2024, 1, 2)
    items: List[Dict[str, Any]] = []
    for i in range(rows):
        received = start + timedelta(days=rng.randint(0, 365))
        completed = rng.random() < 0.6
        candidate: Dict[str, Any] = {
            "no": i + 1,
            "division": rng.choice(_DIVISIONS),
            "claim_no": f"CL-{received:%y%m}-{rng.randint(1, 9999):04d}",
            "hull_number": f"H{rng.randint(2000, 2999)}",
            "defective_material_code": f"M{rng.randint(100000, 999999)}",
            "alternative_material_code": f"M{rng.randint(100000, 999999)}",
            "converter_number": f"CV-{rng.randint(1, 400):03d}",
            "converter_code": f"CC{rng.randint(1000, 9999)}",
            "installation_location": rng.choice(_LOCATIONS),
            "product_name": rng.choice(_PRODUCTS[category.key]),
            "quantity": rng.randint(1, 12),
            "receipt_date": received.isoformat(),
            "completion_date": (
                (received + timedelta(days=rng.randint(1, 30))).isoformat() if completed else ""
            ),
            "notes": rng.choice(_NOTES),
            "status": "completed" if completed else "incomplete",
        }
        item = {key: candidate[key] for key in category.field_keys}
        item["status"] = candidate["status"]
        items.append(item)
    return items


def _write_csv(csv_path: Path, category: Category, items: List[Dict[str, Any]]) -> None:
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([label for label, _ in category.labels] + ["상태"])
        for item in items:
            writer.writerow([item[key] for _, key in category.labels] + [item["status"]])


@app.command()
def main(
    category: str = typer.Argument(..., help="general, converter or floodlight"),
    rows: int = typer.Option(
        50,
        "--rows",
        "-r",
        help="Number of claims to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    clear_first: bool = typer.Option(
        False,
        "--clear-first",
        help="Delete the category's existing records before loading.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into the store.",
    ),
) -> None:
    """
    Generate sample claims and optionally load them with a bulk upsert.
    """
    target = lookup(category)
    start = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="as_claims_"))
        csv_path = tmpdir / f"{target.key}.csv"

    typer.echo(f"Generating {rows:,} {target.key} claims -> {csv_path} (seed={seed})")
    items = _generate_items(target, rows=rows, seed=seed)
    _write_csv(csv_path, target, items)
    typer.echo(f"CSV generation completed in {time.perf_counter() - start:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    store = create_store()
    try:
        count = store.bulk_upsert(target, items, clear_first=clear_first)
    finally:
        store.close()
    typer.echo(f"Loaded {count:,} claims into {target.table} ({store.name} backend).")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
