from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..models.config_models import TransformOptions
from .address import build_address
from .aliases import build_aliases
from .coerce import clean_and_split, coerce_text, parse_partial_date
from .columns import ColumnRole, DynamicColumns, detect_columns, normalize_row
from .entity import EntityType, Scope, profile_for
from .fields import first_present, set_if_present
from .identity import extract_identity_numbers
from .lists import build_list_memberships

"""Row -> record transformation.

transform_row is a pure function of (row, detected columns, options): no state is
carried between rows, so rows can be transformed in any order or in parallel.
"""

__all__ = [
    "FieldSpec",
    "TYPE_COLUMNS",
    "RECORD_FIELDS",
    "transform_row",
]

TYPE_COLUMNS = ("type", "entitytype", "recordtype")


@dataclass(frozen=True)
class FieldSpec:
    output: str  # key in the output record
    sources: tuple[str, ...]  # candidate canonical keys, first non-empty wins
    multi: bool = False  # list-typed (clean_and_split)
    scope: Scope = Scope.ANY


def _list_field(output: str, scope: Scope = Scope.ANY) -> FieldSpec:
    return FieldSpec(output, (output.lower(),), multi=True, scope=scope)


# Output order follows this table
RECORD_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec("type", TYPE_COLUMNS),
    FieldSpec("profileId", ("profileid",)),
    FieldSpec("clientId", ("clientid",)),
    FieldSpec("action", ("action",)),
    FieldSpec("activeStatus", ("activestatus", "status")),
    FieldSpec("name", ("name", "fullname")),
    FieldSpec("forename", ("forename", "firstname"), scope=Scope.PERSON),
    FieldSpec("middlename", ("middlename",), scope=Scope.PERSON),
    FieldSpec("surname", ("surname", "lastname"), scope=Scope.PERSON),
    FieldSpec("suffix", ("suffix",)),
    FieldSpec("gender", ("gender",), scope=Scope.PERSON),
    FieldSpec("dateOfBirth", ("dateofbirth",), scope=Scope.PERSON),
    FieldSpec("incorporationCountryCode", ("incorporationcountrycode",), scope=Scope.ORGANISATION),
    FieldSpec("dateOfIncorporation", ("dateofincorporation",), scope=Scope.ORGANISATION),
    FieldSpec("profileNotes", ("profilenotes", "notes")),
    FieldSpec("lastModifiedDate", ("lastmodifieddate",)),
    _list_field("countryOfRegistrationCode"),
    _list_field("countryOfAffiliationCode"),
    _list_field("formerlySanctionedRegionCode"),
    _list_field("sanctionedRegionCode"),
    _list_field("enhancedRiskCountryCode"),
    _list_field("dateOfRegistrationArray", Scope.ORGANISATION),
    _list_field("dateOfBirthArray", Scope.PERSON),
    _list_field("residentOfCode"),
    _list_field("citizenshipCode"),
    _list_field("domicileCodes", Scope.PERSON),
    _list_field("nationalityCodes", Scope.PERSON),
    _list_field("sources"),
    _list_field("companyUrls"),
)


def _resolve_field(
    spec: FieldSpec, values: Mapping[str, Any], columns: DynamicColumns, options: TransformOptions
) -> Any:
    key, raw = first_present(values, spec.sources)
    if key is None:
        return None
    role = columns.role_of(key)
    if spec.multi:
        return clean_and_split(
            raw, date_column=role is ColumnRole.DATE, epoch=options.serial_date_epoch
        )
    if role is ColumnRole.IDENTIFIER:
        return coerce_text(raw, allow_date=False)
    if role is ColumnRole.DATE:
        return parse_partial_date(raw, epoch=options.serial_date_epoch)
    return coerce_text(raw)


def transform_row(
    row: Mapping[Any, Any],
    columns: DynamicColumns | None = None,
    options: TransformOptions | None = None,
    row_number: int = 0,
) -> dict[str, Any]:
    """Transform one raw row (header -> cell) into one output record.

    columns defaults to detecting the row's own headers; options to TransformOptions().
    """
    if columns is None:
        columns = detect_columns(row.keys())
    if options is None:
        options = TransformOptions()

    values = normalize_row(row, row_number).values
    _, raw_type = first_present(values, TYPE_COLUMNS)
    profile = profile_for(EntityType.resolve(raw_type))

    record: dict[str, Any] = {}
    for spec in RECORD_FIELDS:
        if not profile.admits(spec.scope):
            continue
        set_if_present(record, spec.output, _resolve_field(spec, values, columns, options))

    set_if_present(record, "identityNumbers", extract_identity_numbers(values, profile))
    address = build_address(values)
    set_if_present(record, "addresses", [address] if address else [])
    set_if_present(
        record,
        "aliases",
        build_aliases(
            values,
            columns.alias_columns,
            profile,
            alias_type=options.alias_type,
            type_labels=options.alias_type_labels,
        ),
    )
    set_if_present(
        record,
        "lists",
        build_list_memberships(values, slots=options.list_slots, epoch=options.serial_date_epoch),
    )
    return record
