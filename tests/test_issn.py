"""Tests for ISSN normalization."""

from __future__ import annotations

import pytest

from journal_tracker.reconcile.issn import normalize_issn


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0036-8075", "00368075"),
        ("1234-567x", "1234567X"),
        ("  1234-567X  ", "1234567X"),
        ("ISSN 0028-0836", "00280836"),
        (12345678, "12345678"),
        (12345678.0, "12345678"),
    ],
)
def test_normalize_issn_canonical_form(raw, expected) -> None:
    assert normalize_issn(raw) == expected


@pytest.mark.parametrize("raw", ["", None, "---", "   ", "n/a", float("nan"), True])
def test_normalize_issn_invalid(raw) -> None:
    assert normalize_issn(raw) is None
