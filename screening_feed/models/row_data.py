from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model.

RowData is one spreadsheet row after header normalization: every raw header has been
mapped to its canonical key, cell values are untouched.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single input row after header normalization.

    row_number is 1-based over the data rows (the header row is not counted).
    When two raw headers share a canonical key, the later column's value is kept.
    """
    row_number: int  # 1-based data row number
    values: dict[str, Any]  # canonical key -> raw cell value

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)
