"""Journal store capability and shared record codecs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from journal_tracker.reconcile.models import JournalRecord


@dataclass(frozen=True)
class WriteResult:
    """
    Outcome of a successful store write.

    Args:
        count: Records written.
        chunks: Write batches committed.
        revision: Backend revision token after the write, when one exists.
    """

    count: int
    chunks: int = 1
    revision: str | None = None


@dataclass(frozen=True)
class StoreSnapshot:
    """
    Records read for a read-modify-write pass.

    Args:
        records: Stored records in stored order.
        revision: Backend revision token the records were read at, if any.
    """

    records: list[JournalRecord]
    revision: str | None = None


class JournalStore(Protocol):
    """
    Read and write the full master list.

    A write must pass the revision of the snapshot it was derived from.
    Backends with revision tokens reject the write when the stored list
    moved on since that snapshot.
    """

    name: str

    def read_all(self) -> list[JournalRecord]: ...

    def read_snapshot(self) -> StoreSnapshot: ...

    def write_all(
        self, records: Sequence[JournalRecord], expected_revision: str | None = None
    ) -> WriteResult: ...


def decode_records(payload: Any) -> list[JournalRecord]:
    """
    Parse stored record objects, keeping one record per ISSN.

    Args:
        payload: Decoded JSON array.

    Returns:
        Parsed records; unusable entries are dropped.
    """
    if not isinstance(payload, list):
        return []
    records: dict[str, JournalRecord] = {}
    for item in payload:
        if not isinstance(item, dict):
            continue
        record = JournalRecord.from_dict(item)
        if record is not None:
            records[record.issn] = record
    return list(records.values())


def encode_records(records: Iterable[JournalRecord]) -> list[dict[str, Any]]:
    """
    Serialize records into their stored JSON form.

    Args:
        records: Records to serialize.

    Returns:
        JSON-compatible list.
    """
    return [record.to_dict() for record in records]
