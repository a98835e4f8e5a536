"""Catalog route registration."""

from __future__ import annotations

from fastapi import APIRouter

from journal_tracker.api.models import CatalogLookupResponse
from journal_tracker.api.queries.catalog import lookup_catalog
from journal_tracker.shared.constants import API_PREFIX

router = APIRouter(prefix=API_PREFIX)

router.add_api_route(
    "/catalog",
    lookup_catalog,
    methods=["GET"],
    response_model=CatalogLookupResponse,
)
