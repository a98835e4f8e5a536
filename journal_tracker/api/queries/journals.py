"""Journal query handlers."""

from __future__ import annotations

from datetime import date

from fastapi import HTTPException, Query
from fastapi.responses import Response

from journal_tracker.api.dependencies import ServiceDep
from journal_tracker.api.models import (
    JournalItem,
    JournalPage,
    RefreshResponse,
    SummaryModel,
    TitleChangeModel,
)
from journal_tracker.api.pagination import build_page_meta, parse_sort
from journal_tracker.reconcile.filters import JournalFilter, summarize
from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.shared.constants import MAX_LIMIT


async def list_journals(
    service: ServiceDep,
    q: str | None = Query(default=None, description="ISSN or title substring"),
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
    changed_only: bool = Query(default=False),
    letter: str | None = Query(default=None, max_length=3),
    sort: str | None = Query(default="changed:desc"),
    limit: int = Query(default=100, ge=1, le=MAX_LIMIT),
    offset: int = Query(default=0, ge=0),
) -> JournalPage:
    """
    List journals with filtering and sorting.

    Args:
        q: Case-insensitive ISSN or title substring.
        date_from: Inclusive lower bound on last checked date.
        date_to: Inclusive upper bound on last checked date.
        changed_only: Keep only updated titles.
        letter: First letter of the title, or All.
        sort: Sort column with optional direction.
        limit: Page size.
        offset: Page offset.
        service: Tracker service.

    Returns:
        Page of journals with summary counts for the whole filtered set.
    """
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=400, detail="from must not be after to")
    sort_key, ascending = parse_sort(sort)
    records, summary = await service.query(
        JournalFilter(
            query=q,
            date_from=date_from,
            date_to=date_to,
            changed_only=changed_only,
            letter=letter,
        ),
        sort=sort_key,
        ascending=ascending,
    )
    page = records[offset : offset + limit]
    return JournalPage(
        items=[JournalItem.from_record(record) for record in page],
        summary=SummaryModel.from_summary(summary),
        page=build_page_meta(len(records), limit, offset),
    )


async def list_all_journals(service: ServiceDep) -> list[JournalItem]:
    """
    Return the full master list in stored order.

    Args:
        service: Tracker service.

    Returns:
        Every tracked journal.
    """
    return [JournalItem.from_record(record) for record in await service.list_all()]


async def journal_summary(service: ServiceDep) -> SummaryModel:
    """
    Count total, updated, and unchanged journals.

    Args:
        service: Tracker service.

    Returns:
        Summary counts.
    """
    return SummaryModel.from_summary(summarize(await service.list_all()))


async def get_journal(issn: str, service: ServiceDep) -> JournalItem:
    """
    Fetch a single journal by ISSN in any common notation.

    Args:
        issn: ISSN, with or without hyphen.
        service: Tracker service.

    Returns:
        Journal row.
    """
    key = normalize_issn(issn)
    if key:
        for record in await service.list_all():
            if record.issn == key:
                return JournalItem.from_record(record)
    raise HTTPException(status_code=404, detail="Journal not found")


async def export_journals(
    service: ServiceDep,
    changed_only: bool = Query(default=False),
) -> Response:
    """
    Download the master list as CSV.

    Args:
        changed_only: Export only updated titles.
        service: Tracker service.

    Returns:
        CSV attachment.
    """
    filename = "changes_only.csv" if changed_only else "all_journals.csv"
    return Response(
        content=await service.export_csv(changed_only),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def refresh_journals(service: ServiceDep) -> RefreshResponse:
    """
    Run a catalog refresh now unless one is already running.

    Args:
        service: Tracker service.

    Returns:
        Refresh outcome.
    """
    outcome = await service.refresh()
    return RefreshResponse(
        status=outcome.status,
        reason=outcome.reason,
        fetched=outcome.fetched,
        merged_count=outcome.merged_count,
        changes=[TitleChangeModel.from_change(change) for change in outcome.changes],
    )
