"""CSV export of the journal table."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from pathlib import Path

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.constants import (
    CSV_HEADER,
    STATUS_UNCHANGED,
    STATUS_UPDATED,
)


def status_label(record: JournalRecord) -> str:
    """
    Return the display status for a record.

    Args:
        record: Journal record.

    Returns:
        "Updated" or "Unchanged".
    """
    return STATUS_UPDATED if record.changed else STATUS_UNCHANGED


def build_csv(records: Iterable[JournalRecord], changed_only: bool = False) -> str:
    """
    Render records as CSV text with every field quoted.

    Args:
        records: Records in display order.
        changed_only: Emit only records with a title change.

    Returns:
        CSV text with the ISSN,Title,Previous Title,Status header.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        if changed_only and not record.changed:
            continue
        writer.writerow(
            [
                record.issn,
                record.title,
                record.previous_title or "",
                status_label(record),
            ]
        )
    return buffer.getvalue()


def write_csv(
    path: Path, records: Iterable[JournalRecord], changed_only: bool = False
) -> Path:
    """
    Write the CSV export to disk.

    Args:
        path: Output file path.
        records: Records in display order.
        changed_only: Emit only records with a title change.

    Returns:
        Output path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(build_csv(records, changed_only))
    return path
