"""Tests for the local JSON backend."""

from __future__ import annotations

import json

import pytest

from journal_tracker.shared.errors import PersistenceError
from journal_tracker.storage import LocalJsonStore


def test_missing_file_reads_empty(store) -> None:
    assert store.read_all() == []


def test_write_then_read(store, seeded_records, journals_file) -> None:
    result = store.write_all(seeded_records)

    assert result.count == 3
    assert store.read_all() == seeded_records
    assert not journals_file.with_name("journals.json.tmp").exists()
    payload = json.loads(journals_file.read_text(encoding="utf-8"))
    assert payload[1]["previousTitle"] == "Nature London"


def test_reads_legacy_file(journals_file) -> None:
    journals_file.parent.mkdir(parents=True)
    journals_file.write_text(
        json.dumps(
            [
                {"issn": "0036-8075", "title": "Science"},
                {"issn": "00280836", "title": "Nature", "oldTitle": "Nature"},
            ]
        ),
        encoding="utf-8",
    )

    records = LocalJsonStore(journals_file).read_all()

    assert [record.issn for record in records] == ["00368075", "00280836"]
    assert not any(record.changed for record in records)


@pytest.mark.parametrize("content", ["{not json", '{"issn": "1"}'])
def test_corrupt_file_is_not_treated_as_empty(journals_file, content) -> None:
    journals_file.parent.mkdir(parents=True)
    journals_file.write_text(content, encoding="utf-8")

    with pytest.raises(PersistenceError):
        LocalJsonStore(journals_file).read_all()
