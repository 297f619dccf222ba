# services/grid_loader.py
"""Load a downloaded form-response export into the same grid the Sheets API returns."""

from __future__ import annotations

import os
from datetime import date, datetime
from typing import IO, List, Optional, Union

import openpyxl
import pandas as pd

from middleware.errors import ImportParsingError, UnsupportedFileError

CSV_EXTENSIONS = {".csv"}
XLSX_EXTENSIONS = {".xlsx", ".xlsm"}


def _cell_text(value: object) -> str:
    """Stringify a cell the way the Sheets values API renders it."""
    if value is None:
        return ""
    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _trim_row(cells: List[str]) -> List[str]:
    """Drop trailing empty cells (the Sheets API never returns them)."""
    end = len(cells)
    while end and not cells[end - 1]:
        end -= 1
    return cells[:end]


def _read_csv(source: Union[str, IO]) -> List[List[str]]:
    try:
        df = pd.read_csv(
            source, header=None, dtype=str, keep_default_na=False, skip_blank_lines=False
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ImportParsingError(
            f"Could not read CSV export: {exc}",
            details={"format": "csv"},
        ) from exc
    return [_trim_row([_cell_text(v) for v in row]) for row in df.itertuples(index=False)]


def _read_xlsx(source: Union[str, IO], sheet: Optional[str] = None) -> List[List[str]]:
    wb = openpyxl.load_workbook(source, data_only=True, read_only=True)
    try:
        ws = wb[sheet] if sheet else wb.worksheets[0]
        return [_trim_row([_cell_text(v) for v in row]) for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()


def load_grid(
    source: Union[str, IO],
    *,
    filename: Optional[str] = None,
    sheet: Optional[str] = None,
) -> List[List[str]]:
    """
    Read a ``.csv`` or ``.xlsx`` export into ``list[list[str]]``.

    ``filename`` is used to pick the reader when ``source`` is a file object.
    Fully blank rows are kept (as empty lists) so row numbers stay aligned
    with the spreadsheet.
    """
    name = filename or (source if isinstance(source, str) else "")
    ext = os.path.splitext(name)[1].lower()
    if ext in CSV_EXTENSIONS:
        return _read_csv(source)
    if ext in XLSX_EXTENSIONS:
        return _read_xlsx(source, sheet)
    raise UnsupportedFileError(
        f"Unsupported export file type: {ext or 'unknown'}",
        details={"allowed": sorted(CSV_EXTENSIONS | XLSX_EXTENSIONS)},
    )
