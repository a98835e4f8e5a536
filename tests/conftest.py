"""Shared fixtures for tracker tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from journal_tracker.reconcile.models import JournalRecord
from journal_tracker.shared.config import TrackerConfig
from journal_tracker.storage import LocalJsonStore
from journal_tracker.tracker.service import TrackerService

CHECKED = date(2025, 3, 1)


class FakeCatalog:
    """
    Catalog stand-in returning canned payloads.
    """

    def __init__(self, items: list[dict[str, Any]]) -> None:
        self.items = items
        self.calls: list[tuple[list[str], int]] = []
        self.closed = False

    async def fetch_batched(
        self, issns: Sequence[str], batch_size: int
    ) -> list[dict[str, Any]]:
        self.calls.append((list(issns), batch_size))
        return list(self.items)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def journals_file(tmp_path: Path) -> Path:
    return tmp_path / "alljournals" / "journals.json"


@pytest.fixture
def config(journals_file: Path) -> TrackerConfig:
    return TrackerConfig(
        catalog_api_key="test-key",
        data_file=journals_file,
        batch_size=2,
        refresh_interval_seconds=0,
    )


@pytest.fixture
def store(journals_file: Path) -> LocalJsonStore:
    return LocalJsonStore(journals_file)


@pytest.fixture
def seeded_records() -> list[JournalRecord]:
    return [
        JournalRecord("00368075", "Science", last_checked=date(2025, 1, 10)),
        JournalRecord(
            "00280836",
            "Nature",
            previous_title="Nature London",
            last_checked=date(2025, 2, 1),
        ),
        JournalRecord("1234567X", "Annals of Testing", last_checked=date(2025, 2, 20)),
    ]


@pytest.fixture
def service(store: LocalJsonStore, config: TrackerConfig) -> TrackerService:
    return TrackerService(store, config)
