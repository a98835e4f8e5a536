"""Request dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from journal_tracker.tracker.service import TrackerService


def get_service(request: Request) -> TrackerService:
    """
    Provide the tracker service bound to the application.

    Args:
        request: Incoming request.

    Returns:
        Tracker service.
    """
    return request.app.state.service


ServiceDep = Annotated[TrackerService, Depends(get_service)]
