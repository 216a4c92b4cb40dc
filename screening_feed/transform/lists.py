from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from ..models.config_models import DEFAULT_LIST_SLOTS, EXCEL_EPOCH
from .coerce import coerce_text, parse_booleanish, parse_partial_date
from .fields import set_if_present

"""Sanctions list membership assembly.

Slot i reads "List i", "Active List i", "Since List i" and "To List i". A slot whose
"List i" cell is empty is skipped entirely.
"""

__all__ = [
    "list_slot_keys",
    "build_list_memberships",
]


def list_slot_keys(index: int) -> tuple[str, str, str, str]:
    """Canonical keys of slot index: (list, active, since, to)."""
    return (f"list{index}", f"activelist{index}", f"sincelist{index}", f"tolist{index}")


def build_list_memberships(
    values: Mapping[str, Any],
    slots: int = DEFAULT_LIST_SLOTS,
    epoch: date = EXCEL_EPOCH,
) -> list[dict[str, Any]]:
    memberships: list[dict[str, Any]] = []
    for index in range(1, slots + 1):
        list_key, active_key, since_key, to_key = list_slot_keys(index)
        list_value = coerce_text(values.get(list_key), allow_date=False)
        if list_value is None:
            continue
        active = parse_booleanish(values.get(active_key))
        entry: dict[str, Any] = {}
        set_if_present(entry, "id", list_value)
        set_if_present(entry, "name", list_value)
        set_if_present(entry, "active", active)
        set_if_present(entry, "listActive", active)
        set_if_present(entry, "hierarchy", [{"id": list_value, "name": list_value}])
        set_if_present(entry, "since", parse_partial_date(values.get(since_key), epoch=epoch))
        set_if_present(entry, "to", parse_partial_date(values.get(to_key), epoch=epoch))
        memberships.append(entry)
    return memberships
