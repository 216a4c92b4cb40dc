from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any

from ..models.row_data import RowData

"""Column normalization and the declarative column schema.

Raw headers are folded to canonical keys ("National Tax No." -> "nationaltaxno") and
classified once per batch against COLUMN_SCHEMA. The resulting DynamicColumns is the
only state shared by all rows of a batch.
"""

__all__ = [
    "ColumnRole",
    "ColumnRule",
    "COLUMN_SCHEMA",
    "IDENTIFIER_COLUMNS",
    "AliasColumn",
    "DynamicColumns",
    "normalize_column",
    "classify_column",
    "detect_columns",
    "normalize_row",
]

logger = logging.getLogger(__name__)

_QUOTE_CHARS = "\"'`‘’“”"
_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w]")


class ColumnRole(Enum):
    IDENTIFIER = "identifier"  # never parsed as a date
    ALIAS = "alias"
    DATE = "date"
    PLAIN = "plain"


@dataclass(frozen=True)
class ColumnRule:
    name: str
    pattern: re.Pattern[str]
    role: ColumnRole

    def matches(self, key: str) -> bool:
        return self.pattern.search(key) is not None


IDENTIFIER_COLUMNS = frozenset({
    "profileid",
    "clientid",
    "nationaltaxno",
    "taxno",
    "taxnumber",
    "dunsnumber",
    "legalentityidentifierlei",
    "lei",
    "nationalid",
    "drivinglicenceno",
    "drivinglicenseno",
    "socialsecurityno",
    "passportno",
})

# Evaluated in order, first match wins
COLUMN_SCHEMA: tuple[ColumnRule, ...] = (
    ColumnRule(
        "identifier",
        re.compile(r"^(?:%s)$" % "|".join(sorted(IDENTIFIER_COLUMNS))),
        ColumnRole.IDENTIFIER,
    ),
    ColumnRule("alias", re.compile(r"^aliases(\d*)$"), ColumnRole.ALIAS),
    ColumnRule(
        "date",
        re.compile(r"^dateof|date$|datearray$|^(?:since|to)list\d+$"),
        ColumnRole.DATE,
    ),
)


@lru_cache(maxsize=2048)
def _normalize_cached(header: str) -> str:
    text = header.strip().strip(_QUOTE_CHARS).strip()
    text = unicodedata.normalize("NFKC", text).lower()
    text = _WHITESPACE_RE.sub("", text)
    return _NON_WORD_RE.sub("", text)


def normalize_column(header: Any) -> str:
    """Map a raw header to its canonical lookup key.

    Surrounding quotes and whitespace are trimmed, the text is NFKC normalized and
    lower-cased, then all whitespace and non-word characters are removed.
    Idempotent: normalize_column(normalize_column(h)) == normalize_column(h).
    """
    return _normalize_cached(str(header))


def classify_column(key: str) -> ColumnRole:
    for rule in COLUMN_SCHEMA:
        if rule.matches(key):
            return rule.role
    return ColumnRole.PLAIN


@dataclass(frozen=True)
class AliasColumn:
    key: str  # canonical key, e.g. "aliases2"
    index: int | None  # numeric suffix, None for a bare "aliases" column


@dataclass(frozen=True)
class DynamicColumns:
    """Column sets detected once from the header row of a batch."""
    keys: dict[str, str] = field(default_factory=dict)  # raw header -> canonical key
    roles: dict[str, ColumnRole] = field(default_factory=dict)  # canonical key -> role
    alias_columns: tuple[AliasColumn, ...] = ()
    date_columns: frozenset[str] = frozenset()
    collisions: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def role_of(self, key: str) -> ColumnRole:
        role = self.roles.get(key)
        return role if role is not None else classify_column(key)


def detect_columns(headers: Iterable[Any]) -> DynamicColumns:
    """Classify a header row against COLUMN_SCHEMA.

    Header collisions (two raw headers with the same canonical key) are reported;
    the row normalizer resolves them by keeping the last column's value.
    """
    keys: dict[str, str] = {}
    grouped: dict[str, list[str]] = {}
    for header in headers:
        raw = str(header)
        key = normalize_column(raw)
        keys[raw] = key
        grouped.setdefault(key, []).append(raw)

    roles: dict[str, ColumnRole] = {}
    aliases: list[AliasColumn] = []
    for key in grouped:
        role = classify_column(key)
        roles[key] = role
        if role is ColumnRole.ALIAS:
            suffix = key[len("aliases"):]
            aliases.append(AliasColumn(key=key, index=int(suffix) if suffix else None))

    collisions = {k: tuple(v) for k, v in grouped.items() if len(v) > 1}
    for key, raws in collisions.items():
        logger.warning(f"header collision: {list(raws)} -> '{key}' (last column wins)")

    return DynamicColumns(
        keys=keys,
        roles=roles,
        alias_columns=tuple(aliases),
        date_columns=frozenset(k for k, r in roles.items() if r is ColumnRole.DATE),
        collisions=collisions,
    )


def normalize_row(raw: Mapping[Any, Any], row_number: int = 0) -> RowData:
    """Build the canonical-key view of one row (last value wins on collisions)."""
    values: dict[str, Any] = {}
    for header, value in raw.items():
        values[normalize_column(header)] = value
    return RowData(row_number=row_number, values=values)
