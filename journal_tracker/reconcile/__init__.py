"""Journal reconciliation core."""

from journal_tracker.reconcile.export import build_csv
from journal_tracker.reconcile.filters import (
    JournalFilter,
    apply_filters,
    sort_records,
    summarize,
)
from journal_tracker.reconcile.issn import normalize_issn
from journal_tracker.reconcile.merge import (
    MERGE_MODE,
    REPLACE_MODE,
    prepare_incoming,
    reconcile,
)
from journal_tracker.reconcile.models import (
    IncomingRecord,
    JournalRecord,
    JournalSummary,
    PreparedBatch,
    ReconcileResult,
    TitleChange,
)
from journal_tracker.shared.converters import chunked

__all__ = [
    "JournalRecord",
    "IncomingRecord",
    "TitleChange",
    "PreparedBatch",
    "ReconcileResult",
    "JournalSummary",
    "JournalFilter",
    "MERGE_MODE",
    "REPLACE_MODE",
    "normalize_issn",
    "prepare_incoming",
    "reconcile",
    "chunked",
    "apply_filters",
    "sort_records",
    "summarize",
    "build_csv",
]
