"""Pagination and sorting helpers."""

from __future__ import annotations

from fastapi import HTTPException

from journal_tracker.api.models import PageMeta
from journal_tracker.reconcile.filters import SORT_KEYS

SORT_ALIASES = {
    "issn": "issn",
    "title": "title",
    "previous_title": "previous_title",
    "previousTitle": "previous_title",
    "changed": "changed",
    "status": "changed",
}


def parse_sort(sort: str | None) -> tuple[str | None, bool]:
    """
    Parse a single-column sort string.

    Accepts "field", "-field", or "field:desc".

    Args:
        sort: Sort string.

    Returns:
        Sort key and ascending flag; key is None when sort is empty.
    """
    part = (sort or "").strip()
    if not part:
        return None, True
    ascending = True
    field = part
    if part.startswith("-"):
        field = part[1:]
        ascending = False
    elif ":" in part:
        field, raw_dir = part.split(":", 1)
        ascending = raw_dir.strip().lower() != "desc"
    key = SORT_ALIASES.get(field.strip())
    if key not in SORT_KEYS:
        raise HTTPException(status_code=400, detail=f"Unsupported sort field: {field}")
    return key, ascending


def build_page_meta(total: int, limit: int, offset: int) -> PageMeta:
    """
    Build pagination metadata.

    Args:
        total: Total matching rows.
        limit: Page size.
        offset: Page offset.

    Returns:
        Page metadata.
    """
    return PageMeta(
        total=total, limit=limit, offset=offset, has_more=offset + limit < total
    )
