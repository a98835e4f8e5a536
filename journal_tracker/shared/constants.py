"""Shared constants used across tracker modules."""

from __future__ import annotations

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_JOURNALS_FILE = DATA_DIR / "alljournals" / "journals.json"

DEFAULT_LIBRARY_ID = "3820"
THIRDIRON_PUBLIC_URL = "https://public-api.thirdiron.com/public/v1"
DEFAULT_BATCH_SIZE = 5
DEFAULT_TIMEOUT_SECONDS = 20
DEFAULT_RETRIES = 2
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})

FIRESTORE_BATCH_LIMIT = 500
DEFAULT_CHUNK_SIZE = FIRESTORE_BATCH_LIMIT
DEFAULT_FIRESTORE_COLLECTION = "journals"

GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_PATH = "alljournals/journals.json"
DEFAULT_GITHUB_BRANCH = "main"

DEFAULT_REFRESH_INTERVAL = 24 * 60 * 60
BACKENDS = ("local", "github", "firestore")

CONFIG_ENV = "JOURNAL_TRACKER_CONFIG"
API_PREFIX = "/api"
MAX_LIMIT = 1000

CSV_HEADER = ("ISSN", "Title", "Previous Title", "Status")
STATUS_UPDATED = "Updated"
STATUS_UNCHANGED = "Unchanged"
