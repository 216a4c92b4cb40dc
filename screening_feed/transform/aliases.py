from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models.config_models import DEFAULT_ALIAS_TYPE
from .coerce import coerce_text
from .columns import AliasColumn
from .entity import EntityProfile
from .fields import set_if_present

__all__ = [
    "build_aliases",
]


def build_aliases(
    values: Mapping[str, Any],
    alias_columns: tuple[AliasColumn, ...],
    profile: EntityProfile,
    alias_type: str = DEFAULT_ALIAS_TYPE,
    type_labels: Mapping[int, str] | None = None,
) -> list[dict[str, str]]:
    """One alias per alias column holding a name, in header order.

    The name goes under profile.alias_name_key ("name" or "companyName"). The type is
    the label configured for the column's index, or alias_type.
    """
    aliases: list[dict[str, str]] = []
    for column in alias_columns:
        name = coerce_text(values.get(column.key), allow_date=False)
        if name is None:
            continue
        label = None
        if type_labels and column.index is not None:
            label = type_labels.get(column.index)
        entry: dict[str, str] = {}
        set_if_present(entry, profile.alias_name_key, name)
        set_if_present(entry, "type", label or alias_type)
        aliases.append(entry)
    return aliases
