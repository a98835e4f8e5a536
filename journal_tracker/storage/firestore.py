"""Firestore document store backend."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore
from google.oauth2 import service_account

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.config import FirestoreSettings
from journal_tracker.shared.constants import FIRESTORE_BATCH_LIMIT
from journal_tracker.shared.converters import chunked, to_int
from journal_tracker.shared.errors import PersistenceError
from journal_tracker.storage.base import StoreSnapshot, WriteResult, decode_records

logger = logging.getLogger(__name__)

POSITION_FIELD = "position"


def _position(value: Any) -> tuple[int, int]:
    index = to_int(value)
    return (1, 0) if index is None else (0, index)


def build_firestore_client(settings: FirestoreSettings) -> firestore.Client:
    """
    Create a Firestore client from service account settings.

    Falls back to application default credentials when no key is configured.

    Args:
        settings: Firestore settings.

    Returns:
        Firestore client.
    """
    if settings.client_email and settings.private_key:
        credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "project_id": settings.project_id,
                "client_email": settings.client_email,
                "private_key": settings.private_key,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )
        return firestore.Client(project=settings.project_id, credentials=credentials)
    return firestore.Client(project=settings.project_id)


class FirestoreStore:
    """
    Store one Firestore document per ISSN.

    Writes are split into batches of at most chunk_size operations. Each
    batch commits atomically, but the sequence as a whole does not.

    Args:
        settings: Firestore settings.
        chunk_size: Operations per batch commit.
        client: Optional preconfigured Firestore client.
    """

    name = "firestore"

    def __init__(
        self,
        settings: FirestoreSettings,
        chunk_size: int = FIRESTORE_BATCH_LIMIT,
        client: Any = None,
    ) -> None:
        if chunk_size <= 0 or chunk_size > FIRESTORE_BATCH_LIMIT:
            raise ValueError(
                f"chunk_size must be between 1 and {FIRESTORE_BATCH_LIMIT}"
            )
        self.settings = settings
        self.chunk_size = chunk_size
        self.client = client or build_firestore_client(settings)

    def _collection(self) -> Any:
        return self.client.collection(self.settings.collection)

    def read_all(self) -> list[JournalRecord]:
        """
        Load every journal document.

        Returns:
            Stored records.

        Raises:
            PersistenceError: The collection cannot be read.
        """
        try:
            payload = [doc.to_dict() or {} for doc in self._collection().stream()]
        except GoogleAPIError as exc:
            raise PersistenceError(f"Firestore read failed: {exc}") from exc
        # stream() yields documents by ID; restore list order, unpositioned last.
        payload.sort(key=lambda item: _position(item.get(POSITION_FIELD)))
        return decode_records(payload)

    def read_snapshot(self) -> StoreSnapshot:
        """
        Load every journal document for a read-modify-write pass.

        Returns:
            Snapshot without a revision; concurrent writers are not detected.
        """
        return StoreSnapshot(records=self.read_all())

    def write_all(
        self, records: Sequence[JournalRecord], expected_revision: str | None = None
    ) -> WriteResult:
        """
        Upsert every record and delete documents no longer in the list.

        Each document stores its list index so reads keep insertion order.

        Args:
            records: Full master list.
            expected_revision: Ignored; the collection carries no revision.

        Returns:
            Write result with the number of committed batches.

        Raises:
            PersistenceError: A batch fails; committed_chunks tells how many
                earlier batches were already applied.
        """
        collection = self._collection()
        keep = {record.issn for record in records}
        try:
            stale_ids = [
                ref.id for ref in collection.list_documents() if ref.id not in keep
            ]
        except GoogleAPIError as exc:
            raise PersistenceError(f"Firestore listing failed: {exc}") from exc

        operations: list[tuple[str, str, dict[str, Any] | None]] = [
            ("set", record.issn, {**record.to_dict(), POSITION_FIELD: index})
            for index, record in enumerate(records)
        ]
        operations.extend(("delete", doc_id, None) for doc_id in stale_ids)

        committed = 0
        for chunk in chunked(operations, self.chunk_size):
            batch = self.client.batch()
            for action, doc_id, data in chunk:
                ref = collection.document(doc_id)
                if action == "set":
                    batch.set(ref, data)
                else:
                    batch.delete(ref)
            try:
                batch.commit()
            except GoogleAPIError as exc:
                raise PersistenceError(
                    f"Firestore batch {committed + 1} failed: {exc}",
                    committed_chunks=committed,
                    partial=committed > 0,
                ) from exc
            committed += 1

        logger.info(
            "Wrote %d journals and removed %d in %d Firestore batch(es)",
            len(records),
            len(stale_ids),
            committed,
        )
        return WriteResult(count=len(records), chunks=committed)
