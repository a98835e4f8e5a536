"""Error types raised by ingest, refresh, and storage code."""

from __future__ import annotations


class InputError(ValueError):
    """
    Rejected input such as a missing file or a batch with no valid rows.
    """


class PersistenceError(RuntimeError):
    """
    Failure while reading or writing the journal store.

    Args:
        message: Human-readable failure description.
        committed_chunks: Number of write chunks already committed.
        partial: Whether earlier chunks may remain committed.
    """

    def __init__(
        self, message: str, committed_chunks: int = 0, partial: bool = False
    ) -> None:
        super().__init__(message)
        self.committed_chunks = committed_chunks
        self.partial = partial


class StaleRevisionError(PersistenceError):
    """
    Write rejected because the stored revision moved since it was read.
    """


class CatalogUnavailableError(RuntimeError):
    """
    Catalog lookup requested while no catalog API key is configured.
    """
