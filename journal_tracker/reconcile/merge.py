"""ISSN-keyed merge and title change detection."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import date
from typing import Any, Protocol

from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.reconcile.models import (
    IncomingRecord,
    JournalRecord,
    PreparedBatch,
    ReconcileResult,
    TitleChange,
)
from journal_tracker.shared.converters import to_text
from journal_tracker.shared.state import utc_today

MERGE_MODE = "merge"
REPLACE_MODE = "replace"
MODES = (MERGE_MODE, REPLACE_MODE)


class KeyedTitle(Protocol):
    """
    Anything carrying a normalized ISSN and a title.
    """

    @property
    def issn(self) -> str: ...

    @property
    def title(self) -> str: ...


def _field(row: Mapping[str, Any], name: str) -> Any:
    if name in row:
        return row[name]
    lowered = name.lower()
    for key, value in row.items():
        if str(key).strip().lower() == lowered:
            return value
    return None


def prepare_incoming(rows: Iterable[Mapping[str, Any]]) -> PreparedBatch:
    """
    Normalize raw rows into incoming records.

    Rows without a title, or whose ISSN normalizes to nothing, are skipped
    and counted rather than rejected.

    Args:
        rows: Row mappings with Title and ISSN fields.

    Returns:
        Accepted records in row order and the skipped row count.
    """
    records: list[IncomingRecord] = []
    skipped = 0
    for row in rows:
        title = to_text(_field(row, "Title"))
        issn = normalize_issn(_field(row, "ISSN"))
        if not title or not issn:
            skipped += 1
            continue
        records.append(IncomingRecord(issn=issn, title=title))
    return PreparedBatch(records=records, skipped=skipped)


def _latest_titles(incoming: Iterable[KeyedTitle]) -> dict[str, str]:
    # Later duplicates win but keep the slot of the first occurrence.
    latest: dict[str, str] = {}
    for item in incoming:
        latest[item.issn] = item.title
    return latest


def reconcile(
    existing: Sequence[JournalRecord],
    incoming: Iterable[KeyedTitle],
    mode: str = MERGE_MODE,
    checked_on: date | None = None,
) -> ReconcileResult:
    """
    Merge incoming titles into the master list and record title changes.

    In merge mode, existing records absent from the batch are carried over
    unchanged. In replace mode the result holds only the incoming ISSNs,
    while surviving ISSNs keep their history.

    Args:
        existing: Current master list.
        incoming: Normalized incoming records.
        mode: Either "merge" or "replace".
        checked_on: Date stamped on inserted and changed records.

    Returns:
        Merged list ordered by first appearance, plus detected changes.

    Raises:
        ValueError: Unknown mode.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown reconcile mode {mode!r}")
    checked = checked_on or utc_today()

    current: dict[str, JournalRecord] = {}
    for record in existing:
        current[record.issn] = record
    updates = _latest_titles(incoming)

    merged: dict[str, JournalRecord] = dict(current) if mode == MERGE_MODE else {}
    changes: list[TitleChange] = []
    inserted = 0
    for issn, title in updates.items():
        stored = current.get(issn)
        if stored is None:
            merged[issn] = JournalRecord(issn=issn, title=title, last_checked=checked)
            inserted += 1
        elif stored.title == title:
            merged[issn] = stored
        else:
            changes.append(
                TitleChange(
                    issn=issn,
                    old_title=stored.title,
                    new_title=title,
                    date_checked=checked,
                )
            )
            merged[issn] = replace(
                stored, title=title, previous_title=stored.title, last_checked=checked
            )

    removed = len(current.keys() - merged.keys())
    return ReconcileResult(
        merged=list(merged.values()),
        changes=changes,
        inserted=inserted,
        removed=removed,
    )
