from __future__ import annotations

import json
import sys
from typing import Optional

import typer
import uvicorn

from as_tracker.config import get_settings
from as_tracker.domain.categories import category_keys, lookup
from as_tracker.domain.errors import TrackerError
from as_tracker.reporter import print_dashboard, print_records
from as_tracker.services.dashboard import aggregate
from as_tracker.storage.factory import create_store
from as_tracker.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(help="AS claim tracker CLI.")


def _setup_logging() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"backend={settings.storage_backend} http={settings.host}:{settings.port} "
        f"static={settings.static_dir} categories={','.join(category_keys())}"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from settings)."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default from settings)."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """
    Run the HTTP API with uvicorn.
    """
    settings = get_settings()
    _setup_logging()
    log.info(
        "Starting HTTP server",
        extra={"host": host or settings.host, "port": port or settings.port},
    )
    uvicorn.run(
        "as_tracker.api.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@app.command("init-db")
def init_db() -> None:
    """
    Create the category and activity tables if they do not exist.
    """
    _setup_logging()
    store = create_store()
    store.close()
    typer.echo(f"Schema ready on {store.name} backend.")


@app.command()
def dashboard(
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON instead of a table."),
) -> None:
    """
    Print completion statistics for every category.
    """
    _setup_logging()
    store = create_store()
    try:
        stats = aggregate(store, max_workers=get_settings().dashboard_workers)
    finally:
        store.close()
    if as_json:
        typer.echo(json.dumps(stats, indent=2, ensure_ascii=False))
    else:
        print_dashboard(stats)


@app.command("list")
def list_records(category: str = typer.Argument(..., help="general, converter or floodlight")) -> None:
    """
    Print the records of one category ordered by NO.
    """
    _setup_logging()
    target = lookup(category)
    store = create_store()
    try:
        records = store.list_records(target)
    finally:
        store.close()
    print_records(target, records)


@app.command()
def reindex(category: str = typer.Argument(..., help="general, converter or floodlight")) -> None:
    """
    Renumber NO. sequentially (1..N) in the current order.
    """
    _setup_logging()
    target = lookup(category)
    store = create_store()
    try:
        store.renumber(target)
    finally:
        store.close()
    typer.echo(f"Reindexing completed for {target.key}.")


def main() -> None:
    try:
        app()
    except TrackerError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
