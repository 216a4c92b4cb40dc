from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .coerce import coerce_text
from .entity import EntityProfile, IdentityType
from .fields import first_present

"""Identity number extraction.

Order is fixed: the tax number first, then the variant's own identifiers in the order
its EntityProfile lists them.
"""

__all__ = [
    "TAX_NUMBER_COLUMNS",
    "extract_identity_numbers",
]

TAX_NUMBER_COLUMNS = ("nationaltaxno", "taxno", "taxnumber")


def _append(numbers: list[dict[str, str]], id_type: IdentityType, raw: Any) -> None:
    # identifiers are never read as dates
    value = coerce_text(raw, allow_date=False)
    if value is not None:
        numbers.append({"type": id_type.value, "value": value})


def extract_identity_numbers(values: Mapping[str, Any], profile: EntityProfile) -> list[dict[str, str]]:
    numbers: list[dict[str, str]] = []
    _, tax = first_present(values, TAX_NUMBER_COLUMNS)
    _append(numbers, IdentityType.TAX_NO, tax)
    for columns, id_type in profile.identity_columns:
        _, raw = first_present(values, columns)
        _append(numbers, id_type, raw)
    return numbers
