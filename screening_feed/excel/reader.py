from __future__ import annotations

import io
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO

import pandas as pd

"""Workbook reader: the decoding boundary of the converter.

Only the first sheet of a workbook is consumed. read_excel_file returns it as a raw
object-dtype DataFrame; normalize_sheet turns that into header -> value row dicts.
"""

__all__ = [
    "WorkbookDecodeError",
    "SheetHeaderError",
    "SheetData",
    "read_excel_file",
    "normalize_sheet",
    "read_first_sheet",
]


class WorkbookDecodeError(Exception):
    """Raised when the input bytes cannot be decoded as a workbook."""


class SheetHeaderError(Exception):
    """Raised when the configured header row does not exist."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]  # header -> raw cell value (None for empty cells)


def _na_options(keep_na_strings: Iterable[str] | None) -> dict[str, Any]:
    """Build pandas NA options that keep the given strings as literal text."""
    # pandas._libs.parsers.STR_NA_VALUES には既定のNA文字列集合が格納されている
    import pandas._libs.parsers as parsers

    keep = set(keep_na_strings or ())
    if not keep:
        return {"keep_default_na": True, "na_values": None}
    return {"keep_default_na": False, "na_values": list(parsers.STR_NA_VALUES - keep)}


def read_excel_file(
    source: Path | str | bytes | BinaryIO, keep_na_strings: Iterable[str] | None = None
) -> tuple[str, pd.DataFrame]:
    """Read the first sheet of a workbook without applying a header.

    Parameters
    ----------
    source: workbook path, raw bytes or a binary file object
    keep_na_strings: strings excluded from pandas' default NaN conversion (e.g. ['NA'])

    Raises WorkbookDecodeError for anything that is not a readable workbook.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    try:
        xls = pd.ExcelFile(source)
        if not xls.sheet_names:
            raise WorkbookDecodeError("workbook contains no sheets")
        name = str(xls.sheet_names[0])
        df = xls.parse(xls.sheet_names[0], header=None, dtype=object, **_na_options(keep_na_strings))
    except WorkbookDecodeError:
        raise
    except Exception as e:
        raise WorkbookDecodeError(str(e) or type(e).__name__) from e
    return name, df


def normalize_sheet(df: pd.DataFrame, sheet_name: str, header_row: int = 0) -> SheetData:
    """Apply the header row and build one dict per data row.

    Steps:
    1. An entirely empty sheet yields no columns and no rows
    2. Row `header_row` becomes the header; rows above it are ignored
    3. Fully empty data rows are skipped
    4. NaN / NaT cells become None
    """
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])
    if df.shape[0] <= header_row:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header at row {header_row + 1}")
    header_series = df.iloc[header_row]
    columns = [
        f"column{i + 1}" if pd.isna(c) else str(c) for i, c in enumerate(header_series.tolist())
    ]
    rows: list[dict[str, Any]] = []
    for _, raw in df.iloc[header_row + 1:].iterrows():
        if raw.isna().all():
            continue
        row_dict: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            row_dict[col] = None if pd.isna(val) else val
        rows.append(row_dict)
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_first_sheet(
    source: Path | str | bytes | BinaryIO,
    keep_na_strings: Iterable[str] | None = ("NA",),
    header_row: int = 0,
) -> SheetData:
    name, df = read_excel_file(source, keep_na_strings=keep_na_strings)
    return normalize_sheet(df, name, header_row=header_row)
