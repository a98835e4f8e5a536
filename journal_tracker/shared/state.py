"""JSON persistence and clock helpers."""

from __future__ import annotations

import json
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any


def utc_now_iso() -> str:
    """
    Build current UTC ISO-8601 timestamp.

    Returns:
        Timestamp string.
    """
    return datetime.now(UTC).replace(microsecond=0).isoformat()


def utc_today() -> date:
    """
    Return the current UTC calendar date.

    Returns:
        Today's date in UTC.
    """
    return datetime.now(UTC).date()


def load_json(path: Path, default: Any) -> Any:
    """
    Load JSON payload from disk.

    Args:
        path: Source path.
        default: Default value when file is missing.

    Returns:
        Loaded payload.
    """
    if not path.exists():
        return default
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def save_json_atomic(path: Path, payload: Any) -> None:
    """
    Save JSON payload atomically.

    Args:
        path: Output path.
        payload: Payload object.

    Returns:
        None.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp")
    with open(temp_path, "w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)
    temp_path.replace(path)
