"""Journal record and reconciliation result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.shared.converters import to_date, to_text


@dataclass(frozen=True)
class JournalRecord:
    """
    One tracked journal keyed by normalized ISSN.

    Args:
        issn: Canonical ISSN key.
        title: Current known title.
        previous_title: Last distinct title seen for this ISSN.
        last_checked: Date the record was created or its title last changed.
    """

    issn: str
    title: str
    previous_title: str | None = None
    last_checked: date | None = None

    @property
    def changed(self) -> bool:
        """
        Whether the title differs from the recorded previous title.

        Returns:
            True when a distinct previous title exists.
        """
        return self.previous_title is not None and self.previous_title != self.title

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the record into its stored JSON form.

        Returns:
            JSON-compatible dictionary.
        """
        return {
            "issn": self.issn,
            "title": self.title,
            "previousTitle": self.previous_title,
            "changed": self.changed,
            "lastChecked": self.last_checked.isoformat() if self.last_checked else None,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> JournalRecord | None:
        """
        Parse a stored record, accepting the legacy oldTitle key.

        Args:
            payload: Stored record object.

        Returns:
            Parsed record, or None when the ISSN or title is unusable.
        """
        issn = normalize_issn(payload.get("issn"))
        title = to_text(payload.get("title"))
        if not issn or not title:
            return None
        previous = to_text(payload.get("previousTitle"))
        if previous is None:
            previous = to_text(payload.get("oldTitle"))
        if previous == title:
            previous = None
        return cls(
            issn=issn,
            title=title,
            previous_title=previous,
            last_checked=to_date(
                payload.get("lastChecked") or payload.get("dateChecked")
            ),
        )


@dataclass(frozen=True)
class IncomingRecord:
    """
    Normalized record from an upload or catalog lookup.
    """

    issn: str
    title: str


@dataclass(frozen=True)
class TitleChange:
    """
    A detected title change for one ISSN.
    """

    issn: str
    old_title: str
    new_title: str
    date_checked: date

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the change for logs and API responses.

        Returns:
            JSON-compatible dictionary.
        """
        return {
            "issn": self.issn,
            "oldTitle": self.old_title,
            "newTitle": self.new_title,
            "dateChecked": self.date_checked.isoformat(),
        }


@dataclass(frozen=True)
class PreparedBatch:
    """
    Incoming records accepted from raw rows plus the skipped row count.
    """

    records: list[IncomingRecord]
    skipped: int


@dataclass(frozen=True)
class ReconcileResult:
    """
    Merged master list and the changes detected while building it.
    """

    merged: list[JournalRecord]
    changes: list[TitleChange] = field(default_factory=list)
    inserted: int = 0
    removed: int = 0


@dataclass(frozen=True)
class JournalSummary:
    """
    Record counts for the dashboard.
    """

    total: int
    updated_count: int
    unchanged_count: int
