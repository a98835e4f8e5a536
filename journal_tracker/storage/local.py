"""Local JSON file backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.errors import PersistenceError
from journal_tracker.shared.state import load_json, save_json_atomic
from journal_tracker.storage.base import (
    StoreSnapshot,
    WriteResult,
    decode_records,
    encode_records,
)

logger = logging.getLogger(__name__)


class LocalJsonStore:
    """
    Store the master list as a JSON array on local disk.

    Args:
        path: JSON file path.
    """

    name = "local"

    def __init__(self, path: Path) -> None:
        self.path = path

    def read_all(self) -> list[JournalRecord]:
        """
        Load every stored record.

        Returns:
            Stored records, empty when the file does not exist yet.

        Raises:
            PersistenceError: The file exists but cannot be parsed.
        """
        try:
            payload = load_json(self.path, [])
        except (OSError, json.JSONDecodeError) as exc:
            raise PersistenceError(f"Unable to read {self.path}: {exc}") from exc
        if not isinstance(payload, list):
            raise PersistenceError(f"{self.path} does not contain a JSON array")
        return decode_records(payload)

    def read_snapshot(self) -> StoreSnapshot:
        """
        Load every stored record for a read-modify-write pass.

        Returns:
            Snapshot without a revision; local files are not versioned.
        """
        return StoreSnapshot(records=self.read_all())

    def write_all(
        self, records: Sequence[JournalRecord], expected_revision: str | None = None
    ) -> WriteResult:
        """
        Replace the file contents atomically.

        Args:
            records: Full master list.
            expected_revision: Ignored; local files carry no revision.

        Returns:
            Write result.

        Raises:
            PersistenceError: The file cannot be written.
        """
        try:
            save_json_atomic(self.path, encode_records(records))
        except OSError as exc:
            raise PersistenceError(f"Unable to write {self.path}: {exc}") from exc
        logger.info("Wrote %d journals to %s", len(records), self.path)
        return WriteResult(count=len(records))
