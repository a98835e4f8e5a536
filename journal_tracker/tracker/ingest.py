"""Spreadsheet loading for journal uploads."""

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any

import pandas as pd

from journal_tracker.shared.errors import InputError

EXCEL_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
REQUIRED_COLUMNS = ("Title", "ISSN")


def read_frame(path: Path) -> pd.DataFrame:
    """
    Read the first sheet of a workbook, or a CSV file, as text columns.

    Args:
        path: Spreadsheet path.

    Returns:
        Parsed data frame.

    Raises:
        InputError: File is missing, unsupported, or unparsable.
    """
    if not path.is_file():
        raise InputError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix != ".csv" and suffix not in EXCEL_SUFFIXES:
        raise InputError(f"Unsupported spreadsheet format: {path.name}")
    try:
        if suffix == ".csv":
            return pd.read_csv(path, dtype=str)
        return pd.read_excel(path, sheet_name=0, dtype=str)
    except (ValueError, OSError, zipfile.BadZipFile) as exc:
        raise InputError(f"Unable to parse {path.name}: {exc}") from exc


def load_spreadsheet_rows(path: Path) -> list[dict[str, Any]]:
    """
    Load spreadsheet rows with empty cells mapped to None.

    Args:
        path: Spreadsheet path.

    Returns:
        Row dictionaries keyed by column header.

    Raises:
        InputError: File cannot be read or lacks Title/ISSN columns.
    """
    frame = read_frame(path)
    headers = {str(column).strip().lower() for column in frame.columns}
    missing = [name for name in REQUIRED_COLUMNS if name.lower() not in headers]
    if missing:
        raise InputError(
            f"{path.name} is missing required column(s): {', '.join(missing)}"
        )
    frame = frame.dropna(how="all")
    frame = frame.astype(object).where(frame.notna(), None)
    return frame.to_dict(orient="records")
