"""Route package registration."""

from __future__ import annotations

from fastapi import FastAPI

from journal_tracker.api.routes import catalog, health, journals


def register_routes(app: FastAPI) -> None:
    """
    Register all API routers on the application instance.

    Args:
        app: FastAPI application.

    Returns:
        None.
    """
    routers = (
        health.router,
        journals.router,
        catalog.router,
    )
    for router in routers:
        app.include_router(router)
