"""
Spreadsheet parsing.

Goal: turn the first worksheet of an upload into a list of row objects keyed
by the header row.

Rules:
- the first non-blank row is the header row
- blank header cells become `__EMPTY`, `__EMPTY_1`, ...
- repeated header names get `_1`, `_2`, ... suffixes
- empty cells are left out of a row object; fully blank rows are skipped
- numeric CSV cells become numbers, like cells typed as numbers in a workbook
- dates and times become ISO-8601 strings so every row is JSON-serializable

`.xlsx`/`.xlsm` are streamed with openpyxl in read-only mode. Legacy `.xls`
and OpenDocument `.ods` go through `pandas.read_excel`, and CSV through
`pandas.read_csv`.
"""

from __future__ import annotations

import io
import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta
from typing import Any

import numpy as np
import pandas as pd
from openpyxl import load_workbook

EXCEL_EXTENSIONS = {".xlsx", ".xlsm"}
# pandas engine per legacy/OpenDocument extension
PANDAS_EXCEL_ENGINES = {".xls": "xlrd", ".ods": "odf"}
CSV_EXTENSIONS = {".csv"}
SUPPORTED_EXTENSIONS = EXCEL_EXTENSIONS | set(PANDAS_EXCEL_ENGINES) | CSV_EXTENSIONS

EMPTY_HEADER = "__EMPTY"

_NUMBER_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")


class SpreadsheetError(ValueError):
    pass


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def _cell_value(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def coerce_number(text: str) -> Any:
    """
    "31" -> 31, "2.5" -> 2.5; anything that isn't a plain decimal stays text.
    """
    candidate = text.strip()
    if not _NUMBER_RE.fullmatch(candidate):
        return text
    if _INTEGER_RE.fullmatch(candidate):
        return int(candidate)
    return float(candidate)


def make_headers(raw: Sequence[Any]) -> list[str]:
    headers: list[str] = []
    seen: dict[str, int] = {}
    for cell in raw:
        base = EMPTY_HEADER if _is_blank(cell) else str(_cell_value(cell))
        name = base
        count = seen.get(base, 0)
        # Walk forward until the suffixed name is unused (a literal "a_1"
        # header can collide with a generated one).
        while name in seen:
            count += 1
            name = f"{base}_{count}"
        seen[base] = count
        seen.setdefault(name, 0)
        headers.append(name)
    return headers


def rows_to_records(rows: Iterable[Sequence[Any]]) -> list[dict[str, Any]]:
    """
    Header-keyed records from raw row tuples.
    """
    raw_header: list[Any] | None = None
    headers: list[str] = []
    records: list[dict[str, Any]] = []

    for row in rows:
        if all(_is_blank(v) for v in row):
            continue

        if raw_header is None:
            raw_header = list(row)
            headers = make_headers(raw_header)
            continue

        if len(row) > len(headers):
            # Data wider than the header row: extra cells get blank-header names.
            raw_header.extend([None] * (len(row) - len(headers)))
            headers = make_headers(raw_header)

        record: dict[str, Any] = {}
        for name, value in zip(headers, row):
            if _is_blank(value):
                continue
            record[name] = _cell_value(value)
        records.append(record)

    return records


def _excel_rows(data: bytes) -> list[tuple[Any, ...]]:
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except Exception as exc:
        raise SpreadsheetError(f"Could not read spreadsheet: {exc}") from exc

    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _frame_value(value: Any) -> Any:
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, float) and np.isnan(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def frame_rows(frame: pd.DataFrame) -> list[tuple[Any, ...]]:
    """
    Raw row tuples from a header-less DataFrame, with NaN/NaT as None.
    """
    return [
        tuple(_frame_value(value) for value in row)
        for row in frame.itertuples(index=False, name=None)
    ]


def _pandas_excel_rows(ext: str, data: bytes) -> list[tuple[Any, ...]]:
    try:
        frame = pd.read_excel(
            io.BytesIO(data),
            sheet_name=0,
            header=None,
            dtype=object,
            engine=PANDAS_EXCEL_ENGINES[ext],
        )
    except Exception as exc:
        raise SpreadsheetError(f"Could not read spreadsheet: {exc}") from exc
    return frame_rows(frame)


def _csv_rows(data: bytes) -> list[tuple[Any, ...]]:
    try:
        # utf-8-sig drops the BOM spreadsheet tools like to write.
        frame = pd.read_csv(
            io.BytesIO(data),
            header=None,
            dtype=object,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
            encoding_errors="replace",
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as exc:
        raise SpreadsheetError(f"Could not read CSV: {exc}") from exc

    return [
        tuple(coerce_number(value) if isinstance(value, str) and value else value for value in row)
        for row in frame_rows(frame)
    ]


def parse_records(ext: str, data: bytes) -> list[dict[str, Any]]:
    """
    Parse an uploaded spreadsheet (by extension) into row objects.
    """
    if ext in EXCEL_EXTENSIONS:
        return rows_to_records(_excel_rows(data))
    if ext in PANDAS_EXCEL_ENGINES:
        return rows_to_records(_pandas_excel_rows(ext, data))
    if ext in CSV_EXTENSIONS:
        return rows_to_records(_csv_rows(data))
    raise SpreadsheetError(f"Unsupported extension: {ext}")
