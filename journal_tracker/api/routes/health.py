"""Health route registration."""

from __future__ import annotations

from fastapi import APIRouter

from journal_tracker.api.dependencies import ServiceDep
from journal_tracker.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX)


async def health(service: ServiceDep) -> dict[str, str]:
    """
    Health check endpoint.

    Args:
        service: Tracker service.

    Returns:
        Health status payload with the active backend.
    """
    return {
        "status": "ok",
        "backend": service.store.name,
        "refresh": "running" if service.busy else "idle",
    }


router.add_api_route("/health", health, methods=["GET"])
