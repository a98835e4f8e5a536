"""Store selection from configuration."""

from __future__ import annotations

from journal_tracker.shared.config import TrackerConfig
from journal_tracker.storage.base import JournalStore
from journal_tracker.storage.firestore import FirestoreStore
from journal_tracker.storage.github import GitHubContentsStore
from journal_tracker.storage.local import LocalJsonStore


def build_store(config: TrackerConfig) -> JournalStore:
    """
    Build the store named by the configured backend.

    Args:
        config: Tracker configuration.

    Returns:
        Configured journal store.

    Raises:
        ValueError: Unknown backend name.
    """
    if config.backend == "local":
        return LocalJsonStore(config.data_file)
    if config.backend == "github":
        return GitHubContentsStore(config.github, timeout=config.timeout_seconds)
    if config.backend == "firestore":
        return FirestoreStore(config.firestore, chunk_size=config.chunk_size)
    raise ValueError(f"Unknown backend {config.backend!r}")
