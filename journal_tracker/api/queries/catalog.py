"""Catalog lookup handlers."""

from __future__ import annotations

from fastapi import Query

from journal_tracker.api.dependencies import ServiceDep
from journal_tracker.api.models import CatalogLookupResponse


async def lookup_catalog(
    service: ServiceDep,
    issns: str | None = Query(default=None, description="Comma-separated ISSNs"),
) -> CatalogLookupResponse:
    """
    Look up ISSNs in the catalog without changing the master list.

    Args:
        issns: Comma-separated ISSNs, with or without hyphens.
        service: Tracker service.

    Returns:
        Normalized ISSNs queried and the catalog payloads returned.
    """
    keys, items = await service.lookup_catalog((issns or "").split(","))
    return CatalogLookupResponse(issns=keys, items=items)
