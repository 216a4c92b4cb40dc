from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .coerce import coerce_text
from .fields import first_present, set_if_present

"""Postal address assembly (at most one address per record)."""

__all__ = [
    "ADDRESS_COLUMNS",
    "build_address",
]

ADDRESS_COLUMNS: dict[str, tuple[str, ...]] = {
    "line": ("addressline", "addressline1", "address"),
    "city": ("city", "town"),
    "province": ("province", "state", "county"),
    "postCode": ("postcode", "postalcode", "zipcode", "zip"),
    "countryCode": ("countrycode", "addresscountrycode"),
}

_TRAILING_ZERO_RE = re.compile(r"\.0$")


def _clean_post_code(raw: Any) -> str | None:
    text = coerce_text(raw, allow_date=False)
    if text is None:
        return None
    return _TRAILING_ZERO_RE.sub("", text) or None


def _clean_country_code(raw: Any) -> str | None:
    text = coerce_text(raw, allow_date=False)
    if text is None:
        return None
    return text.upper()[:2]


def build_address(values: Mapping[str, Any]) -> dict[str, str]:
    """Build the address sub-object; {} when no address column holds data."""
    address: dict[str, str] = {}
    for field_name, columns in ADDRESS_COLUMNS.items():
        _, raw = first_present(values, columns)
        if field_name == "postCode":
            value = _clean_post_code(raw)
        elif field_name == "countryCode":
            value = _clean_country_code(raw)
        else:
            value = coerce_text(raw, allow_date=False)
        set_if_present(address, field_name, value)
    return address
