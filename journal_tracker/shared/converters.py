"""Shared conversion helpers for tracker modules."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any, TypeVar

T = TypeVar("T")


def to_int(value: Any) -> int | None:
    """
    Convert a value to an integer.

    Args:
        value: Input value.

    Returns:
        Parsed integer when valid, otherwise None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_text(value: Any) -> str | None:
    """
    Convert a value to stripped text.

    Args:
        value: Input value.

    Returns:
        Stripped string, or None when the value is missing or blank.
    """
    if value is None:
        return None
    if isinstance(value, float) and value != value:
        return None
    text = str(value).strip()
    return text or None


def to_date(value: Any) -> date | None:
    """
    Parse a date from a date, datetime, or ISO-8601 string.

    Args:
        value: Input value.

    Returns:
        Parsed date or None when parsing fails.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split a sequence into contiguous fixed-size chunks.

    Args:
        items: Input sequence.
        size: Maximum chunk length.

    Returns:
        Ordered chunk lists; the last one holds the remainder.

    Raises:
        ValueError: Chunk size is not positive.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]
