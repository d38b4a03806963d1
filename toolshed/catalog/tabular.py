"""
Spreadsheet codec used by the bulk import/export endpoints.

Two primitives only: ``parse_table()`` turns uploaded bytes into rows
of named fields (first worksheet, first row as headers) and
``rows_to_workbook()`` turns rows back into ``.xlsx`` bytes. CSV files
are read with the standard ``csv`` module; everything else goes
through openpyxl.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE


logger = logging.getLogger(__name__)

Row = Dict[str, Any]

CSV_ENCODINGS = ("utf-8-sig", "cp1252")


class FileReadFailure(Exception):
    """The uploaded file could not be read as a table."""

    def __init__(self, message: str = "Failed to read the file."):
        super().__init__(message)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _rows_from_grid(grid: Iterable[Sequence[Any]]) -> List[Row]:
    it = iter(grid)
    try:
        header = next(it)
    except StopIteration:
        return []
    keys = ["" if h is None else str(h).strip() for h in header]
    rows: List[Row] = []
    for values in it:
        row = {
            key: value
            for key, value in zip(keys, values)
            if key and not _is_blank(value)
        }
        # Fully empty lines are skipped, as spreadsheet-to-JSON tools do.
        if row:
            rows.append(row)
    return rows


def _decode(data: bytes) -> str:
    # Excel on Windows saves "CSV" as cp1252 unless told otherwise.
    for encoding in CSV_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FileReadFailure("Failed to read the file: unsupported text encoding.")


def _parse_csv(data: bytes) -> List[Row]:
    text = _decode(data)
    try:
        grid = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as exc:
        raise FileReadFailure(f"Failed to read the file: {exc}") from exc
    return _rows_from_grid(grid)


def _parse_workbook(data: bytes) -> List[Row]:
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        # openpyxl raises zipfile, KeyError and its own errors for bad input
        raise FileReadFailure("Failed to read the file: not a valid workbook.") from exc
    try:
        ws = wb.worksheets[0]
        return _rows_from_grid(ws.iter_rows(values_only=True))
    finally:
        wb.close()


def parse_table(data: bytes, filename: str = "") -> List[Row]:
    """Parse ``data`` into a list of row mappings.

    Raises ``FileReadFailure`` for an empty payload or a file that is
    neither a UTF-8 or cp1252 CSV nor an ``.xlsx`` workbook.
    """
    if not data:
        raise FileReadFailure("Could not read file data.")
    if (filename or "").lower().endswith(".csv"):
        rows = _parse_csv(data)
    else:
        rows = _parse_workbook(data)
    logger.debug("Parsed %d row(s) from %s", len(rows), filename or "<upload>")
    return rows


def _sheet_text(value: Any) -> Any:
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _append_text_row(ws, values: Sequence[Any]) -> None:
    ws.append([_sheet_text(v) for v in values])
    for cell in ws[ws.max_row]:
        # openpyxl turns a leading "=" into a formula; keep it as text.
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


def rows_to_workbook(rows: Sequence[Mapping[str, Any]], sheet_title: str) -> bytes:
    """Serialise ``rows`` into an ``.xlsx`` workbook with one sheet.

    Every string is written as text, never as a formula. Control
    characters that XML cannot carry are dropped.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    if rows:
        headers = list(rows[0].keys())
        _append_text_row(ws, headers)
        for row in rows:
            _append_text_row(ws, [row.get(h, "") for h in headers])
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
