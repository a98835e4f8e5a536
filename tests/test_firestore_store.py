"""Tests for the Firestore backend."""

from __future__ import annotations

from typing import Any

import pytest
from google.api_core.exceptions import ServiceUnavailable

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.config import FirestoreSettings
from journal_tracker.shared.errors import PersistenceError
from journal_tracker.storage import FirestoreStore


class FakeDocument:
    def __init__(self, doc_id: str, data: dict[str, Any]) -> None:
        self.id = doc_id
        self._data = data

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


class FakeRef:
    def __init__(self, doc_id: str) -> None:
        self.id = doc_id


class FakeCollection:
    def __init__(self, docs: dict[str, dict[str, Any]]) -> None:
        self.docs = docs

    def stream(self):
        # Firestore streams documents ordered by ID.
        return [
            FakeDocument(doc_id, data) for doc_id, data in sorted(self.docs.items())
        ]

    def list_documents(self):
        return [FakeRef(doc_id) for doc_id in self.docs]

    def document(self, doc_id: str) -> FakeRef:
        return FakeRef(doc_id)


class FakeBatch:
    def __init__(self, client: FakeClient) -> None:
        self.client = client
        self.ops: list[tuple[str, str, dict[str, Any] | None]] = []

    def set(self, ref: FakeRef, data: dict[str, Any]) -> None:
        self.ops.append(("set", ref.id, data))

    def delete(self, ref: FakeRef) -> None:
        self.ops.append(("delete", ref.id, None))

    def commit(self) -> None:
        if self.client.fail_on_commit == len(self.client.commits) + 1:
            raise ServiceUnavailable("quota exceeded")
        docs = self.client.collections["journals"].docs
        for action, doc_id, data in self.ops:
            if action == "set":
                docs[doc_id] = data
            else:
                docs.pop(doc_id, None)
        self.client.commits.append(len(self.ops))


class FakeClient:
    def __init__(self, docs: dict[str, dict[str, Any]] | None = None) -> None:
        self.collections = {"journals": FakeCollection(docs or {})}
        self.commits: list[int] = []
        self.fail_on_commit: int | None = None

    def collection(self, name: str) -> FakeCollection:
        return self.collections[name]

    def batch(self) -> FakeBatch:
        return FakeBatch(self)


SETTINGS = FirestoreSettings(project_id="tracker")


def _records(count: int) -> list[JournalRecord]:
    return [JournalRecord(f"{index:08d}", f"Journal {index}") for index in range(count)]


def test_read_all_parses_documents() -> None:
    client = FakeClient(
        {
            "00368075": {"issn": "0036-8075", "title": "Science", "oldTitle": "Sci"},
            "junk": {"title": "No ISSN"},
        }
    )
    store = FirestoreStore(SETTINGS, client=client)

    assert store.read_all() == [
        JournalRecord("00368075", "Science", previous_title="Sci")
    ]


def test_write_all_commits_in_chunks() -> None:
    client = FakeClient()
    store = FirestoreStore(SETTINGS, chunk_size=2, client=client)

    result = store.write_all(_records(5))

    assert client.commits == [2, 2, 1]
    assert result.chunks == 3
    assert result.count == 5
    assert len(client.collections["journals"].docs) == 5


def test_write_all_deletes_absent_documents() -> None:
    client = FakeClient({"00000009": {"issn": "00000009", "title": "Gone"}})
    store = FirestoreStore(SETTINGS, client=client)

    store.write_all(_records(2))

    assert sorted(client.collections["journals"].docs) == ["00000000", "00000001"]


def test_failed_chunk_reports_partial_commit() -> None:
    client = FakeClient()
    client.fail_on_commit = 2
    store = FirestoreStore(SETTINGS, chunk_size=2, client=client)

    with pytest.raises(PersistenceError) as excinfo:
        store.write_all(_records(5))

    assert excinfo.value.committed_chunks == 1
    assert excinfo.value.partial is True


def test_failed_first_chunk_is_not_partial() -> None:
    client = FakeClient()
    client.fail_on_commit = 1
    store = FirestoreStore(SETTINGS, chunk_size=2, client=client)

    with pytest.raises(PersistenceError) as excinfo:
        store.write_all(_records(3))

    assert excinfo.value.partial is False


@pytest.mark.parametrize("size", [0, 501])
def test_chunk_size_bounds(size: int) -> None:
    with pytest.raises(ValueError):
        FirestoreStore(SETTINGS, chunk_size=size, client=FakeClient())


def test_read_all_keeps_list_order() -> None:
    client = FakeClient()
    store = FirestoreStore(SETTINGS, client=client)
    records = [
        JournalRecord("99999999", "Zeta"),
        JournalRecord("11111111", "Alpha"),
        JournalRecord("55555555", "Mu"),
    ]
    store.write_all(records)
    client.collections["journals"].docs["00000000"] = {
        "issn": "00000000",
        "title": "Legacy",
    }

    assert [record.issn for record in store.read_all()] == [
        "99999999",
        "11111111",
        "55555555",
        "00000000",
    ]
    assert client.collections["journals"].docs["11111111"]["position"] == 1
