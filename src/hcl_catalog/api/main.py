import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hcl_catalog.config import settings
from hcl_catalog.exceptions import DataSourceError, GroupError, GroupNotFoundError, LastGroupError
from hcl_catalog.api import deps
from hcl_catalog.api.middleware import add_request_id, log_requests
from hcl_catalog.sync.service import SyncService

# Routers
from hcl_catalog.api.routers import catalog, groups, sync, system

# Configure logging
logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
logger = logging.getLogger("hcl_catalog.api")


def _error_payload(request: Request, error: str, detail: str) -> dict:
    payload = {"error": error, "detail": detail}
    rid = getattr(request.state, "request_id", None)
    if rid:
        payload["request_id"] = rid
    return payload


def create_app(sync_service: Optional[SyncService] = None, load_on_startup: Optional[bool] = None) -> FastAPI:
    """
    Factory to build the FastAPI application.
    A custom sync_service replaces the configured sheet provider (used in tests).
    """
    deps.reset_state(sync_service)
    should_load = settings.sheets.load_on_startup if load_on_startup is None else load_on_startup

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if should_load:
            await run_in_threadpool(deps.get_catalog_state().reload, deps.get_sync_service())
        yield

    app = FastAPI(title="HCL Catalog API", version=settings.app.version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom Middleware
    app.middleware("http")(add_request_id)
    if settings.logging.log_requests:
        app.middleware("http")(log_requests)

    app.include_router(system.router)
    app.include_router(catalog.router)
    app.include_router(sync.router)
    app.include_router(groups.router)

    @app.exception_handler(GroupNotFoundError)
    async def group_not_found_handler(request: Request, exc: GroupNotFoundError):
        return JSONResponse(status_code=404, content=_error_payload(request, "group_not_found", str(exc)))

    @app.exception_handler(LastGroupError)
    async def last_group_handler(request: Request, exc: LastGroupError):
        return JSONResponse(status_code=409, content=_error_payload(request, "last_group", str(exc)))

    @app.exception_handler(GroupError)
    async def group_error_handler(request: Request, exc: GroupError):
        return JSONResponse(status_code=400, content=_error_payload(request, "invalid_group", str(exc)))

    @app.exception_handler(DataSourceError)
    async def datasource_exception_handler(request: Request, exc: DataSourceError):
        return JSONResponse(status_code=422, content=_error_payload(request, "invalid_source", str(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        logger.exception("Unhandled error", extra={"path": str(request.url), "request_id": rid})
        return JSONResponse(
            status_code=500,
            content=_error_payload(request, "internal_error", "Unexpected server error"),
        )

    return app

# Module-level app for uvicorn entrypoint
app = create_app()
