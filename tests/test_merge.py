"""Tests for merge-and-reconcile."""

from __future__ import annotations

from datetime import date

import pytest

from journal_tracker.reconcile.merge import (
    REPLACE_MODE,
    prepare_incoming,
    reconcile,
)
from journal_tracker.reconcile.models import IncomingRecord, JournalRecord, TitleChange

CHECKED = date(2025, 3, 1)


def test_title_change_sets_previous_title() -> None:
    existing = [JournalRecord("A", "Old")]
    result = reconcile(existing, [IncomingRecord("A", "New")], checked_on=CHECKED)

    assert result.merged == [
        JournalRecord("A", "New", previous_title="Old", last_checked=CHECKED)
    ]
    assert result.merged[0].changed is True
    assert result.changes == [TitleChange("A", "Old", "New", CHECKED)]


def test_new_record_is_inserted_without_change() -> None:
    result = reconcile([], [IncomingRecord("B", "X")], checked_on=CHECKED)

    assert result.merged == [JournalRecord("B", "X", last_checked=CHECKED)]
    assert result.merged[0].changed is False
    assert result.changes == []
    assert result.inserted == 1


def test_absent_records_are_carried_over(seeded_records) -> None:
    incoming = [IncomingRecord("00368075", "Science")]
    result = reconcile(seeded_records, incoming, checked_on=CHECKED)

    assert result.merged == seeded_records
    assert result.changes == []


def test_reconcile_with_itself_is_identity(seeded_records) -> None:
    result = reconcile(seeded_records, seeded_records, checked_on=CHECKED)

    assert result.merged == seeded_records
    assert result.changes == []


def test_second_application_is_idempotent() -> None:
    incoming = [IncomingRecord("A", "New"), IncomingRecord("C", "Fresh")]
    first = reconcile([JournalRecord("A", "Old")], incoming, checked_on=CHECKED)
    second = reconcile(first.merged, incoming, checked_on=date(2025, 4, 1))

    assert second.changes == []
    assert second.merged == first.merged


def test_title_comparison_is_case_sensitive() -> None:
    result = reconcile(
        [JournalRecord("A", "Cell")], [IncomingRecord("A", "CELL")], checked_on=CHECKED
    )

    assert result.changes[0].old_title == "Cell"
    assert result.merged[0].previous_title == "Cell"


def test_order_is_existing_then_new_arrivals() -> None:
    existing = [JournalRecord("B", "Beta"), JournalRecord("A", "Alpha")]
    incoming = [
        IncomingRecord("D", "Delta"),
        IncomingRecord("A", "Alpha 2"),
        IncomingRecord("C", "Gamma"),
    ]
    result = reconcile(existing, incoming, checked_on=CHECKED)

    assert [record.issn for record in result.merged] == ["B", "A", "D", "C"]


def test_duplicate_incoming_issn_keeps_last_title() -> None:
    incoming = [IncomingRecord("A", "First"), IncomingRecord("A", "Second")]
    result = reconcile([JournalRecord("A", "Old")], incoming, checked_on=CHECKED)

    assert len(result.merged) == 1
    assert result.merged[0].title == "Second"
    assert result.changes == [TitleChange("A", "Old", "Second", CHECKED)]


def test_unchanged_record_keeps_history() -> None:
    stored = JournalRecord(
        "A", "New", previous_title="Old", last_checked=date(2024, 12, 1)
    )
    result = reconcile([stored], [IncomingRecord("A", "New")], checked_on=CHECKED)

    assert result.merged == [stored]


def test_replace_mode_drops_absent_records() -> None:
    existing = [JournalRecord("A", "Old"), JournalRecord("B", "Beta")]
    result = reconcile(
        existing,
        [IncomingRecord("A", "New"), IncomingRecord("C", "Gamma")],
        mode=REPLACE_MODE,
        checked_on=CHECKED,
    )

    assert [record.issn for record in result.merged] == ["A", "C"]
    assert result.merged[0].previous_title == "Old"
    assert result.removed == 1
    assert len(result.changes) == 1


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        reconcile([], [], mode="overwrite")


def test_prepare_incoming_skips_unusable_rows() -> None:
    rows = [
        {"Title": "  Science ", "ISSN": "0036-8075"},
        {"Title": "No ISSN", "ISSN": None},
        {"Title": "", "ISSN": "0028-0836"},
        {"Title": "Dashes only", "ISSN": "----"},
        {"title": "Lowercase Columns", "issn": "1234-567x"},
    ]
    batch = prepare_incoming(rows)

    assert batch.records == [
        IncomingRecord("00368075", "Science"),
        IncomingRecord("1234567X", "Lowercase Columns"),
    ]
    assert batch.skipped == 3
