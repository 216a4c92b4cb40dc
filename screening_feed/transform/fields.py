from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .coerce import is_empty

"""The single write path into output records.

Nothing is ever stored as null, "", [] or {}: absence signals "no data".
"""

__all__ = [
    "is_blank",
    "set_if_present",
    "first_present",
]


def is_blank(value: Any) -> bool:
    if isinstance(value, Mapping):
        return len(value) == 0
    return is_empty(value)


def set_if_present(record: dict[str, Any], key: str, value: Any) -> bool:
    """Write record[key] = value unless value is blank. Returns whether it was written."""
    if is_blank(value):
        return False
    record[key] = value
    return True


def first_present(values: Mapping[str, Any], keys: tuple[str, ...]) -> tuple[str | None, Any]:
    """Return (key, value) of the first candidate column holding data, else (None, None)."""
    for key in keys:
        value = values.get(key)
        if not is_empty(value):
            return key, value
    return None, None
