"""Tests for batch chunking."""

from __future__ import annotations

import pytest

from journal_tracker.shared.converters import chunked


def test_even_split() -> None:
    items = list(range(1, 1001))
    chunks = chunked(items, 500)

    assert [len(chunk) for chunk in chunks] == [500, 500]
    assert [item for chunk in chunks for item in chunk] == items


def test_remainder_chunk() -> None:
    assert chunked([1, 2, 3], 10) == [[1, 2, 3]]
    assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]


def test_empty_input() -> None:
    assert chunked([], 5) == []


@pytest.mark.parametrize("size", [0, -1])
def test_non_positive_size_is_configuration_error(size: int) -> None:
    with pytest.raises(ValueError):
        chunked([1, 2, 3], size)
