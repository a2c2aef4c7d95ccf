"""
HTTP API for the AS claim tracker.

Maps HTTP verbs on `/api/...` paths to storage operations. Every route that takes a
category validates it against the registry before touching storage; every error
is rendered as `{"error": message}` with the status carried by the error type.

Usage:
    uvicorn as_tracker.api.app:create_app --factory --port 3000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from as_tracker import __version__
from as_tracker.api.limits import BodySizeLimitMiddleware
from as_tracker.config import Settings, get_settings
from as_tracker.domain.categories import CATEGORIES, Category, lookup
from as_tracker.domain.errors import NotFoundError, TrackerError
from as_tracker.domain.models import ActivityCreate, BulkRequest
from as_tracker.services.activity import ActivityLog
from as_tracker.services.dashboard import aggregate
from as_tracker.storage.abstract import RecordStore
from as_tracker.storage.factory import create_store
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)

FALLBACK_INDEX_TEXT = "AS claim tracker API is running. Static front-end not found."


# ---------- Dependencies ----------


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_activity_log(request: Request) -> ActivityLog:
    return request.app.state.activity_log


def get_category(category: str) -> Category:
    return lookup(category)


def parse_record_id(record_id: str) -> int:
    # Ids are integers in both backends; anything else cannot match a row.
    try:
        return int(record_id)
    except ValueError:
        raise NotFoundError() from None


# ---------- Error handlers ----------


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error(
            "Request failed",
            extra={"path": request.url.path, "method": request.method, "error": exc.message},
        )
    return _error(exc.message, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return _error(f"Invalid request: {location} {message}".strip(), 400)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(str(exc.detail), exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled error", extra={"path": request.url.path, "method": request.method})
    return _error(str(exc), 500)


# ---------- App factory ----------


def create_app(
    store: Optional[RecordStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Parameters
    ----------
    store : RecordStore, optional
        Backend to serve from. When omitted, one is selected at startup (see
        `as_tracker.storage.factory`) and closed at shutdown.
    settings : Settings, optional
        Overrides the cached environment settings.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = store is None
        active = store if store is not None else create_store(settings)
        app.state.store = active
        app.state.activity_log = ActivityLog(active)
        try:
            yield
        finally:
            if owned:
                active.close()

    app = FastAPI(title="AS Claim Tracker", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    app.add_exception_handler(TrackerError, tracker_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    static_dir = Path(settings.static_dir)

    # ---------- Static root / health ----------

    @app.get("/", include_in_schema=False)
    def index() -> Response:
        index_path = static_dir / "index.html"
        if index_path.is_file():
            return FileResponse(index_path)
        return PlainTextResponse(FALLBACK_INDEX_TEXT)

    @app.get("/healthz")
    def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    # ---------- Categories ----------

    @app.get("/api/categories")
    def list_categories() -> List[Dict[str, Any]]:
        return [
            {
                "key": category.key,
                "table": category.table,
                "fields": [{"label": label, "key": key} for label, key in category.labels],
            }
            for category in CATEGORIES.values()
        ]

    # ---------- Records ----------

    @app.get("/api/data/{category}")
    def list_records(
        category: Category = Depends(get_category),
        store: RecordStore = Depends(get_store),
    ) -> List[Dict[str, Any]]:
        return store.list_records(category)

    @app.get("/api/data/{category}/{record_id}")
    def get_record(
        category: Category = Depends(get_category),
        record_id: int = Depends(parse_record_id),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, Any]:
        return store.get_record(category, record_id)

    @app.post("/api/data/{category}")
    def create_record(
        category: Category = Depends(get_category),
        payload: Optional[Dict[str, Any]] = Body(None),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, Any]:
        return store.insert_record(category, payload or {})

    @app.put("/api/data/{category}/{record_id}")
    def update_record(
        category: Category = Depends(get_category),
        record_id: int = Depends(parse_record_id),
        payload: Optional[Dict[str, Any]] = Body(None),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, Any]:
        return store.update_record(category, record_id, payload or {})

    @app.delete("/api/data/{category}/{record_id}")
    def delete_record(
        category: Category = Depends(get_category),
        record_id: int = Depends(parse_record_id),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, str]:
        store.delete_record(category, record_id)
        return {"message": "Item deleted successfully"}

    @app.delete("/api/data/{category}")
    def delete_all(
        category: Category = Depends(get_category),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, str]:
        store.delete_all(category)
        return {"message": "All data deleted successfully"}

    @app.post("/api/bulk/{category}")
    def bulk_upsert(
        body: BulkRequest,
        category: Category = Depends(get_category),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, Any]:
        count = store.bulk_upsert(category, body.items, body.clear_first)
        return {"message": "Bulk operation completed", "count": count}

    @app.post("/api/reindex/{category}")
    def reindex(
        category: Category = Depends(get_category),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, str]:
        store.renumber(category)
        return {"message": "Reindexing completed"}

    @app.get("/api/next-no/{category}")
    def next_no(
        category: Category = Depends(get_category),
        store: RecordStore = Depends(get_store),
    ) -> Dict[str, int]:
        return {"nextNo": store.next_no(category)}

    # ---------- Dashboard / activities ----------

    @app.get("/api/dashboard")
    def dashboard(store: RecordStore = Depends(get_store)) -> Dict[str, Any]:
        return aggregate(store, max_workers=settings.dashboard_workers)

    @app.get("/api/activities")
    def list_activities(
        activity_log: ActivityLog = Depends(get_activity_log),
    ) -> List[Dict[str, Any]]:
        return [entry.model_dump() for entry in activity_log.list_recent()]

    @app.post("/api/activities")
    def create_activity(
        body: Optional[ActivityCreate] = None,
        activity_log: ActivityLog = Depends(get_activity_log),
    ) -> Dict[str, Any]:
        body = body or ActivityCreate()
        entry = activity_log.record(
            type=body.type, message=body.message, item_name=body.item_name, icon=body.icon
        )
        return entry.as_created()

    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir), name="static")

    return app


__all__ = ["create_app"]
