"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from journal_tracker.api.routes import register_routes
from journal_tracker.shared.constants import API_PREFIX
from journal_tracker.shared.errors import (
    CatalogUnavailableError,
    InputError,
    PersistenceError,
    StaleRevisionError,
)
from journal_tracker.tracker.refresh import run_periodic_refresh
from journal_tracker.tracker.service import TrackerService

logger = logging.getLogger(__name__)


class CacheControlMiddleware(BaseHTTPMiddleware):
    """
    Keep journal listings from being cached between refreshes.
    """

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith(f"{API_PREFIX}/journals"):
            response.headers["Cache-Control"] = "no-cache"
        return response


async def input_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def catalog_unavailable_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": str(exc)})


async def persistence_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = 409 if isinstance(exc, StaleRevisionError) else 502
    content: dict[str, object] = {"error": str(exc)}
    if isinstance(exc, PersistenceError) and exc.partial:
        content["committedChunks"] = exc.committed_chunks
        content["partial"] = True
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status_code, content=content)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """
    Run the scheduled refresh loop for the lifetime of the application.

    Args:
        application: FastAPI application.

    Returns:
        Async context manager.
    """
    service: TrackerService = application.state.service
    interval = service.config.refresh_interval_seconds
    stop = asyncio.Event()
    task: asyncio.Task | None = None
    if interval > 0 and service.catalog is not None:
        task = asyncio.create_task(run_periodic_refresh(service, interval, stop))
    try:
        yield
    finally:
        stop.set()
        if task is not None:
            await task
        await service.aclose()


def build_app(service: TrackerService) -> FastAPI:
    """
    Build and configure the FastAPI application.

    Args:
        service: Tracker service backing every route.

    Returns:
        Configured FastAPI application.
    """
    application = FastAPI(
        title="Journal Title Tracker API", version="1.0.0", lifespan=lifespan
    )
    application.state.service = service
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(CacheControlMiddleware)
    application.add_exception_handler(InputError, input_error_handler)
    application.add_exception_handler(PersistenceError, persistence_error_handler)
    application.add_exception_handler(
        CatalogUnavailableError, catalog_unavailable_handler
    )
    register_routes(application)
    return application
