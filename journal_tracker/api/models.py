"""API response models."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel

from journal_tracker.reconcile.models import JournalRecord, JournalSummary, TitleChange


class JournalItem(BaseModel):
    """
    Journal row as shown in the tracker table.
    """

    issn: str
    title: str
    previous_title: str | None = None
    changed: bool = False
    last_checked: date | None = None

    @classmethod
    def from_record(cls, record: JournalRecord) -> JournalItem:
        return cls(
            issn=record.issn,
            title=record.title,
            previous_title=record.previous_title,
            changed=record.changed,
            last_checked=record.last_checked,
        )


class SummaryModel(BaseModel):
    """
    Total, updated, and unchanged counts.
    """

    total: int
    updated_count: int
    unchanged_count: int

    @classmethod
    def from_summary(cls, summary: JournalSummary) -> SummaryModel:
        return cls(
            total=summary.total,
            updated_count=summary.updated_count,
            unchanged_count=summary.unchanged_count,
        )


class PageMeta(BaseModel):
    """
    Pagination metadata.
    """

    total: int
    limit: int
    offset: int
    has_more: bool


class JournalPage(BaseModel):
    """
    Filtered journals response.
    """

    items: list[JournalItem]
    summary: SummaryModel
    page: PageMeta


class TitleChangeModel(BaseModel):
    """
    One detected title change.
    """

    issn: str
    old_title: str
    new_title: str
    date_checked: date

    @classmethod
    def from_change(cls, change: TitleChange) -> TitleChangeModel:
        return cls(
            issn=change.issn,
            old_title=change.old_title,
            new_title=change.new_title,
            date_checked=change.date_checked,
        )


class RefreshResponse(BaseModel):
    """
    Catalog refresh outcome.
    """

    status: str
    reason: str | None = None
    fetched: int
    merged_count: int
    changes: list[TitleChangeModel]


class CatalogLookupResponse(BaseModel):
    """
    Ad-hoc catalog lookup result.
    """

    issns: list[str]
    items: list[dict[str, Any]]
