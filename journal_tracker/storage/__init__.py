"""Journal store backends."""

from journal_tracker.storage.base import (
    JournalStore,
    StoreSnapshot,
    WriteResult,
    decode_records,
    encode_records,
)
from journal_tracker.storage.factory import build_store
from journal_tracker.storage.firestore import FirestoreStore
from journal_tracker.storage.github import GitHubContentsStore
from journal_tracker.storage.local import LocalJsonStore

__all__ = [
    "JournalStore",
    "StoreSnapshot",
    "WriteResult",
    "LocalJsonStore",
    "GitHubContentsStore",
    "FirestoreStore",
    "build_store",
    "decode_records",
    "encode_records",
]
