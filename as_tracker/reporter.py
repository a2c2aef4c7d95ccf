from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from as_tracker.domain.categories import Category


def print_dashboard(stats: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Render dashboard statistics as a rich table, one row per category plus a total.
    """
    console = console or Console()

    table = Table(
        title="AS Claim Dashboard",
        box=box.ROUNDED,
        caption=f"Completion rate: {stats['completionRate']}%",
    )
    table.add_column("Category", style="cyan", no_wrap=True)
    table.add_column("Total", justify="right", style="magenta")
    table.add_column("Completed", justify="right", style="green")
    table.add_column("Incomplete", justify="right", style="yellow")

    for key, counts in stats["perCategory"].items():
        table.add_row(
            key,
            f"{counts['total']:,}",
            f"{counts['completed']:,}",
            f"{counts['incomplete']:,}",
        )

    table.add_section()
    table.add_row(
        "[bold]all[/bold]",
        f"{stats['total']:,}",
        f"{stats['completed']:,}",
        f"{stats['incomplete']:,}",
    )
    console.print(table)


def print_records(
    category: Category, records: List[Dict[str, Any]], console: Optional[Console] = None
) -> None:
    """
    Render a category's records with the display labels as column headers.
    """
    console = console or Console()

    if not records:
        console.print(f"[yellow]No records in {category.key}.[/yellow]")
        return

    table = Table(title=f"{category.key} ({category.table})", box=box.ROUNDED)
    table.add_column("ID", style="dim", justify="right")
    for label, _ in category.labels:
        table.add_column(label, overflow="fold")
    table.add_column("Status", style="bold")

    for record in records:
        status = record.get("status", "")
        styled = f"[green]{status}[/green]" if status == "completed" else f"[red]{status}[/red]"
        table.add_row(
            str(record.get("id", "")),
            *(str(record.get(key, "")) for _, key in category.labels),
            styled,
        )

    console.print(table)


__all__ = ["print_dashboard", "print_records"]
