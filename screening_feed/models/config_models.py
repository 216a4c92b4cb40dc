from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

"""Config dataclasses for the spreadsheet -> JSONL converter.

The loader in screening_feed/config/loader.py builds these from YAML; everything else
only ever sees the frozen objects below.
"""

__all__ = [
    "DEFAULT_ALIAS_TYPE",
    "DEFAULT_LIST_SLOTS",
    "DEFAULT_PREVIEW_CHARS",
    "EXCEL_EPOCH",
    "ConverterConfig",
    "TransformOptions",
]

# Day zero of spreadsheet serial dates (serial 1 == 1899-12-31)
EXCEL_EPOCH = date(1899, 12, 30)
DEFAULT_LIST_SLOTS = 4
DEFAULT_ALIAS_TYPE = "Also Known As"
DEFAULT_PREVIEW_CHARS = 4000


@dataclass(frozen=True)
class TransformOptions:
    """Knobs of the row transformation.

    Passed explicitly into every transform so a row's output depends on nothing but
    the row itself, the detected columns and these options.
    """
    list_slots: int = DEFAULT_LIST_SLOTS  # "List 1".."List N" column groups
    alias_type: str = DEFAULT_ALIAS_TYPE  # type used when no per-column label exists
    alias_type_labels: dict[int, str] = field(default_factory=dict)  # alias index -> type label
    serial_date_epoch: date = EXCEL_EPOCH


@dataclass(frozen=True)
class ConverterConfig:
    """Root configuration for a conversion run."""
    output_directory: str | None = None  # None -> next to the input workbook
    log_directory: str = "./logs"
    preview_chars: int = DEFAULT_PREVIEW_CHARS
    header_row: int = 0  # 0-based row index holding the column headers
    keep_na_strings: tuple[str, ...] = ("NA",)  # NA = Namibia, not "missing"
    transform: TransformOptions = field(default_factory=TransformOptions)
