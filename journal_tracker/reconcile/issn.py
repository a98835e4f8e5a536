"""ISSN key normalization."""

from __future__ import annotations

import re
from typing import Any

_NON_ISSN_CHARS = re.compile(r"[^0-9Xx]")


def normalize_issn(raw: Any) -> str | None:
    """
    Normalize an ISSN into its canonical key.

    Every character other than a digit or the check letter X is removed and
    the result is uppercased. No checksum validation is performed.

    Args:
        raw: ISSN value from a spreadsheet cell, API payload, or query.

    Returns:
        Canonical ISSN key, or None when nothing usable remains.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        if raw != raw:
            return None
        if raw.is_integer():
            raw = int(raw)
    key = _NON_ISSN_CHARS.sub("", str(raw).strip()).upper()
    return key or None
