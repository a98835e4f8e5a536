"""Reconciliation orchestration against a journal store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from journal_tracker.catalog import CatalogClient
from journal_tracker.reconcile.export import build_csv
from journal_tracker.reconcile.filters import (
    JournalFilter,
    apply_filters,
    sort_records,
    summarize,
)
from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.reconcile.merge import MERGE_MODE, prepare_incoming, reconcile
from journal_tracker.reconcile.models import JournalRecord, JournalSummary, TitleChange
from journal_tracker.shared.config import TrackerConfig
from journal_tracker.shared.errors import CatalogUnavailableError, InputError
from journal_tracker.storage import JournalStore, build_store
from journal_tracker.tracker.ingest import load_spreadsheet_rows

logger = logging.getLogger(__name__)

REFRESH_UPDATED = "updated"
REFRESH_UNCHANGED = "unchanged"
REFRESH_SKIPPED = "skipped"
REFRESH_BUSY = "busy"


@dataclass(frozen=True)
class IngestResult:
    """
    Outcome of one upload pass.

    Args:
        count: Rows accepted from the upload.
        merged_count: Records in the stored master list after the pass.
        skipped: Rows dropped for a missing title or ISSN.
        inserted: ISSNs seen for the first time.
        removed: Records dropped by a replace pass.
        changes: Detected title changes.
        mode: Reconcile mode used.
        backend: Store backend name.
    """

    count: int
    merged_count: int
    skipped: int
    inserted: int
    removed: int
    changes: list[TitleChange]
    mode: str
    backend: str

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize for CLI and API output.

        Returns:
            JSON-compatible dictionary.
        """
        return {
            "success": True,
            "count": self.count,
            "mergedCount": self.merged_count,
            "skipped": self.skipped,
            "inserted": self.inserted,
            "removed": self.removed,
            "changes": [change.to_dict() for change in self.changes],
            "mode": self.mode,
            "source": self.backend,
        }


@dataclass(frozen=True)
class RefreshOutcome:
    """
    Outcome of one catalog refresh pass.

    Args:
        status: updated, unchanged, skipped, or busy.
        reason: Explanation for skipped and busy passes.
        fetched: Catalog records matched to tracked ISSNs.
        merged_count: Records in the master list after the pass.
        changes: Detected title changes.
    """

    status: str
    reason: str | None = None
    fetched: int = 0
    merged_count: int = 0
    changes: list[TitleChange] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize for CLI and API output.

        Returns:
            JSON-compatible dictionary.
        """
        return {
            "status": self.status,
            "reason": self.reason,
            "fetched": self.fetched,
            "mergedCount": self.merged_count,
            "changes": [change.to_dict() for change in self.changes],
        }


class TrackerService:
    """
    Run ingest and refresh passes against one store.

    All read-modify-write passes share one lock. Ingests wait for it; a
    refresh that finds it held is skipped.

    Args:
        store: Journal store backend.
        config: Tracker configuration.
        catalog: Catalog client, None when no API key is configured.
    """

    def __init__(
        self,
        store: JournalStore,
        config: TrackerConfig,
        catalog: CatalogClient | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.catalog = catalog
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        """
        Whether a reconciliation pass is running.

        Returns:
            True while the write lock is held.
        """
        return self._lock.locked()

    async def list_all(self) -> list[JournalRecord]:
        """
        Read the full master list.

        Returns:
            Stored records in stored order.
        """
        return await asyncio.to_thread(self.store.read_all)

    async def query(
        self,
        journal_filter: JournalFilter,
        sort: str | None = None,
        ascending: bool = True,
    ) -> tuple[list[JournalRecord], JournalSummary]:
        """
        Filter and sort the master list.

        Args:
            journal_filter: Filter state.
            sort: Optional sort column.
            ascending: Sort direction.

        Returns:
            Matching records and their summary counts.
        """
        records = apply_filters(await self.list_all(), journal_filter)
        if sort:
            records = sort_records(records, sort, ascending)
        return records, summarize(records)

    async def export_csv(self, changed_only: bool = False) -> str:
        """
        Render the master list as CSV.

        Args:
            changed_only: Emit only records with a title change.

        Returns:
            CSV text.
        """
        return build_csv(await self.list_all(), changed_only)

    async def lookup_catalog(
        self, issns: Iterable[Any]
    ) -> tuple[list[str], list[dict[str, Any]]]:
        """
        Look up arbitrary ISSNs in the catalog without touching the store.

        Args:
            issns: ISSNs in any common notation.

        Returns:
            Distinct normalized ISSNs queried and the catalog payloads found.

        Raises:
            InputError: No usable ISSN was given.
            CatalogUnavailableError: No catalog API key is configured.
        """
        keys = list(dict.fromkeys(filter(None, map(normalize_issn, issns))))
        if not keys:
            raise InputError("No valid ISSNs provided")
        if self.catalog is None:
            raise CatalogUnavailableError("Catalog API key is not configured")
        return keys, await self.catalog.fetch_batched(keys, self.config.batch_size)

    async def ingest_rows(
        self,
        rows: Iterable[Mapping[str, Any]],
        mode: str = MERGE_MODE,
        checked_on: date | None = None,
    ) -> IngestResult:
        """
        Reconcile uploaded rows into the stored master list.

        Args:
            rows: Raw rows with Title and ISSN fields.
            mode: merge or replace.
            checked_on: Date stamped on inserted and changed records.

        Returns:
            Ingest result.

        Raises:
            InputError: No row carries a usable title and ISSN.
            PersistenceError: The store cannot be read or written.
        """
        batch = prepare_incoming(rows)
        if not batch.records:
            raise InputError("No valid journals found in spreadsheet.")

        async with self._lock:
            snapshot = await asyncio.to_thread(self.store.read_snapshot)
            result = reconcile(snapshot.records, batch.records, mode, checked_on)
            await asyncio.to_thread(
                self.store.write_all, result.merged, snapshot.revision
            )

        logger.info(
            "Ingested %d rows (%d skipped) into %d journals, %d title change(s)",
            len(batch.records),
            batch.skipped,
            len(result.merged),
            len(result.changes),
        )
        return IngestResult(
            count=len(batch.records),
            merged_count=len(result.merged),
            skipped=batch.skipped,
            inserted=result.inserted,
            removed=result.removed,
            changes=result.changes,
            mode=mode,
            backend=self.store.name,
        )

    async def ingest_file(
        self, path: Path, mode: str = MERGE_MODE, checked_on: date | None = None
    ) -> IngestResult:
        """
        Load a spreadsheet and reconcile its rows.

        Args:
            path: Spreadsheet path.
            mode: merge or replace.
            checked_on: Date stamped on inserted and changed records.

        Returns:
            Ingest result.
        """
        rows = await asyncio.to_thread(load_spreadsheet_rows, path)
        return await self.ingest_rows(rows, mode, checked_on)

    async def refresh(self, checked_on: date | None = None) -> RefreshOutcome:
        """
        Re-fetch tracked titles from the catalog and record changes.

        The stored list is left untouched when the catalog returns nothing.

        Args:
            checked_on: Date stamped on changed records.

        Returns:
            Refresh outcome.

        Raises:
            PersistenceError: The store cannot be read or written.
        """
        if self.catalog is None:
            return RefreshOutcome(
                status=REFRESH_SKIPPED, reason="Catalog API key is not configured"
            )
        if self._lock.locked():
            logger.info("Refresh skipped, another pass is running")
            return RefreshOutcome(
                status=REFRESH_BUSY, reason="A reconciliation pass is already running"
            )

        async with self._lock:
            snapshot = await asyncio.to_thread(self.store.read_snapshot)
            existing = snapshot.records
            issns = [record.issn for record in existing]
            if not issns:
                return RefreshOutcome(
                    status=REFRESH_SKIPPED, reason="No ISSNs in the master list"
                )

            fetched = await self.catalog.fetch_batched(issns, self.config.batch_size)
            known = set(issns)
            incoming = [
                record
                for record in prepare_incoming(fetched).records
                if record.issn in known
            ]
            if not incoming:
                logger.warning("Catalog refresh returned no data, keeping master list")
                return RefreshOutcome(
                    status=REFRESH_SKIPPED,
                    reason="Catalog returned no matching journals",
                    merged_count=len(existing),
                )

            result = reconcile(existing, incoming, MERGE_MODE, checked_on)
            if result.changes:
                await asyncio.to_thread(
                    self.store.write_all, result.merged, snapshot.revision
                )

        logger.info(
            "Refreshed %d journals from catalog, %d title change(s)",
            len(incoming),
            len(result.changes),
        )
        return RefreshOutcome(
            status=REFRESH_UPDATED if result.changes else REFRESH_UNCHANGED,
            fetched=len(incoming),
            merged_count=len(result.merged),
            changes=result.changes,
        )

    async def aclose(self) -> None:
        """
        Close catalog and store resources.

        Returns:
            None.
        """
        if self.catalog is not None:
            await self.catalog.aclose()
        close = getattr(self.store, "close", None)
        if callable(close):
            close()


def build_service(config: TrackerConfig) -> TrackerService:
    """
    Build a service with the configured store and catalog client.

    Args:
        config: Tracker configuration.

    Returns:
        Tracker service.
    """
    catalog = None
    if config.catalog_api_key:
        catalog = CatalogClient(
            api_key=config.catalog_api_key,
            library_id=config.library_id,
            timeout=config.timeout_seconds,
            retries=config.retries,
        )
    return TrackerService(build_store(config), config, catalog)
