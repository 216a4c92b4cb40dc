from __future__ import annotations

import numbers
import re
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.config_models import EXCEL_EPOCH

"""Value coercion for raw spreadsheet cells.

Every function here returns a value or a documented default and never raises:
- is_empty:          True/False, the gate for every field-inclusion decision
- parse_full_date:   "YYYY-MM-DD" or None
- parse_partial_date "YYYY" / "YYYY-MM" / "YYYY-MM-DD", else the trimmed input, None if empty
- coerce_text:       trimmed string, None if empty
- clean_and_split:   list of trimmed strings, [] if empty
- parse_booleanish:  True only for a fixed set of truthy tokens, False otherwise
"""

__all__ = [
    "TRUTHY_TOKENS",
    "YEAR_RANGE",
    "SERIAL_DATE_RANGE",
    "is_empty",
    "parse_full_date",
    "serial_to_date",
    "parse_partial_date",
    "coerce_text",
    "clean_and_split",
    "parse_booleanish",
]

TRUTHY_TOKENS = frozenset({"true", "1", "1.0", "t", "yes", "y"})
_NAN_TOKEN = "nan"

# Year-first complete date, optionally followed by a time and zone ("2020-05-17T10:00:00Z")
_ISO_DATE_RE = re.compile(
    r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)
# Year, year-month or year-month-day
_PARTIAL_DATE_RE = re.compile(
    r"^(\d{4})(?:[-/](\d{1,2})(?:[-/](\d{1,2})(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?)?)?$"
)
_YEAR_TOKEN_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")
_DAY_TOKEN_RE = re.compile(r"(?<!\d)\d{1,2}(?!\d)")
_WORD_TOKEN_RE = re.compile(r"[^\W\d_]{3,}")

# Plain integers in this range are years, not serial dates
YEAR_RANGE = (1000, 9999)
# Five-digit serials only, roughly 1927 to 2173 with the default epoch
SERIAL_DATE_RANGE = (10_000, 99_999)


def is_empty(value: Any) -> bool:
    """Return True when a cell carries no data.

    Empty means: None, pandas NA/NaT, a blank or whitespace-only string, the string
    "nan" in any case, a NaN number, or an empty list/tuple/set.
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, str):
        stripped = value.strip()
        return stripped == "" or stripped.lower() == _NAN_TOKEN
    if isinstance(value, bool):
        return False
    if isinstance(value, numbers.Real):
        return value != value  # NaN
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _looks_like_full_date(text: str) -> bool:
    # one year plus a day and a month (numeric or named)
    if len(_YEAR_TOKEN_RE.findall(text)) != 1:
        return False
    small = len(_DAY_TOKEN_RE.findall(text))
    return small == 2 or (small == 1 and _WORD_TOKEN_RE.search(text) is not None)


def parse_full_date(value: Any) -> str | None:
    """Return "YYYY-MM-DD" when value is a complete calendar date, else None.

    Year-first dates are matched directly; other complete dates ("17/05/2020",
    "May 17, 2020") go through pandas, day-first.
    """
    if is_empty(value):
        return None
    if isinstance(value, datetime):  # includes pandas.Timestamp
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        return None
    text = value.strip()
    match = _ISO_DATE_RE.match(text)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3))).isoformat()
        except ValueError:
            return None
    if _PARTIAL_DATE_RE.match(text) or not _looks_like_full_date(text):
        return None
    parsed = pd.to_datetime(text, dayfirst=True, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def serial_to_date(serial: Any, epoch: date = EXCEL_EPOCH) -> str | None:
    """Convert a spreadsheet serial day number to "YYYY-MM-DD".

    Only serials within SERIAL_DATE_RANGE are converted; the time-of-day fraction
    is dropped. None for anything else.
    """
    if not _is_number(serial) or is_empty(serial):
        return None
    low, high = SERIAL_DATE_RANGE
    if not low <= serial <= high:
        return None
    moment = pd.to_datetime(serial, unit="D", origin=pd.Timestamp(epoch), errors="coerce")
    if pd.isna(moment):
        return None
    return moment.date().isoformat()


def _year_number(value: Any) -> str | None:
    if not _is_number(value) or is_empty(value) or not float(value).is_integer():
        return None
    low, high = YEAR_RANGE
    year = int(value)
    return str(year) if low <= year <= high else None


def _numeric_date(value: Any, epoch: date) -> str | None:
    """A number in a date column: a plain year, else a serial date."""
    return _year_number(value) or serial_to_date(value, epoch)


def _canonical_partial(year: str, month: str | None, day: str | None) -> str | None:
    if month is None:
        return year
    m = int(month)
    if not 1 <= m <= 12:
        return None
    if day is None:
        return f"{year}-{m:02d}"
    try:
        return date(int(year), m, int(day)).isoformat()
    except ValueError:
        return None


def parse_partial_date(value: Any, *, epoch: date = EXCEL_EPOCH) -> str | None:
    """Normalize a (possibly partial) date.

    Accepts date objects, numeric years, serial dates and strings truncated to year,
    year-month or year-month-day. Anything unrecognised comes back as its trimmed
    text; empty input gives None.
    """
    if is_empty(value):
        return None
    if isinstance(value, (datetime, date)):
        return parse_full_date(value)
    if _is_number(value):
        converted = _numeric_date(value, epoch)
        return converted if converted is not None else coerce_text(value)
    text = str(value).strip()
    match = _PARTIAL_DATE_RE.match(text)
    if match:
        canonical = _canonical_partial(match.group(1), match.group(2), match.group(3))
        if canonical is not None:
            return canonical
        return text
    full = parse_full_date(text)
    return full if full is not None else text


def coerce_text(value: Any, *, allow_date: bool = True) -> str | None:
    """Render a cell as trimmed text.

    Integer-valued floats drop their ".0" (numeric cells holding codes or ids).
    With allow_date=False a date cell is rendered verbatim instead of as an ISO
    date; identifier columns use this so they are never reinterpreted.
    """
    if is_empty(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if allow_date and isinstance(value, (datetime, date)):
        return parse_full_date(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or None


def clean_and_split(value: Any, *, date_column: bool = False, epoch: date = EXCEL_EPOCH) -> list[str]:
    """Split a multi-valued cell into a list of trimmed strings.

    A full date is never split. Otherwise commas take precedence over semicolons:
    "US,CA" -> ["US", "CA"], "US;CA" -> ["US", "CA"], "US,CA;MX" -> ["US", "CA;MX"].
    In a date column a number is a year (1980) or a serial date, and each
    piece is partial-date normalized.
    """
    if is_empty(value):
        return []
    full = parse_full_date(value)
    if full is not None:
        return [full]
    if date_column and _is_number(value):
        converted = _numeric_date(value, epoch)
        if converted is not None:
            return [converted]
    text = coerce_text(value)
    if text is None:
        return []
    if "," in text:
        pieces = text.split(",")
    elif ";" in text:
        pieces = text.split(";")
    else:
        pieces = [text]
    items = [p.strip() for p in pieces if not is_empty(p)]
    if date_column:
        return [parse_partial_date(p, epoch=epoch) or p for p in items]
    return items


def parse_booleanish(value: Any) -> bool:
    if is_empty(value):
        return False
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    return text in TRUTHY_TOKENS
