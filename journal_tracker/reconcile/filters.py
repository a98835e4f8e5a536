"""Record filtering, sorting, and summary counts."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.reconcile.models import JournalRecord, JournalSummary

ALL_LETTERS = "ALL"
SORT_KEYS = ("issn", "title", "previous_title", "changed")
_ISSN_QUERY = re.compile(r"[\dXx\-\s]+")


@dataclass(frozen=True)
class JournalFilter:
    """
    Table filter state.

    Args:
        query: Case-insensitive substring matched against ISSN or title.
        date_from: Inclusive lower bound on last_checked.
        date_to: Inclusive upper bound on last_checked.
        changed_only: Keep only records with a title change.
        letter: First-letter bucket for titles, None or "All" disables it.
    """

    query: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    changed_only: bool = False
    letter: str | None = None


def summarize(records: Iterable[JournalRecord]) -> JournalSummary:
    """
    Count total, updated, and unchanged records.

    Args:
        records: Records to count.

    Returns:
        Summary counts.
    """
    total = 0
    updated = 0
    for record in records:
        total += 1
        if record.changed:
            updated += 1
    return JournalSummary(
        total=total, updated_count=updated, unchanged_count=total - updated
    )


def _matches_query(record: JournalRecord, query: str, issn_query: str | None) -> bool:
    if query in record.issn.lower() or query in record.title.lower():
        return True
    return bool(issn_query and issn_query in record.issn)


def apply_filters(
    records: Sequence[JournalRecord], journal_filter: JournalFilter
) -> list[JournalRecord]:
    """
    Apply every active filter, preserving input order.

    Args:
        records: Records to filter.
        journal_filter: Filter state.

    Returns:
        Matching records.
    """
    result = list(records)

    query = (journal_filter.query or "").strip().lower()
    if query:
        issn_query = (
            normalize_issn(query)
            if _ISSN_QUERY.fullmatch(query) and any(ch.isdigit() for ch in query)
            else None
        )
        result = [
            record for record in result if _matches_query(record, query, issn_query)
        ]

    if journal_filter.date_from is not None:
        result = [
            record
            for record in result
            if record.last_checked is not None
            and record.last_checked >= journal_filter.date_from
        ]
    if journal_filter.date_to is not None:
        result = [
            record
            for record in result
            if record.last_checked is not None
            and record.last_checked <= journal_filter.date_to
        ]

    if journal_filter.changed_only:
        result = [record for record in result if record.changed]

    letter = (journal_filter.letter or "").strip().upper()
    if letter and letter != ALL_LETTERS:
        result = [record for record in result if record.title[:1].upper() == letter]

    return result


def sort_records(
    records: Sequence[JournalRecord], key: str, ascending: bool = True
) -> list[JournalRecord]:
    """
    Sort records by a table column.

    Text columns sort case-insensitively with missing values first; the
    changed column sorts by its boolean value. The sort is stable.

    Args:
        records: Records to sort.
        key: One of issn, title, previous_title, changed.
        ascending: Sort direction.

    Returns:
        Sorted copy of the records.

    Raises:
        ValueError: Unsupported sort key.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort field: {key}")
    if key == "changed":
        return sorted(records, key=lambda record: record.changed, reverse=not ascending)
    return sorted(
        records,
        key=lambda record: (getattr(record, key) or "").lower(),
        reverse=not ascending,
    )
