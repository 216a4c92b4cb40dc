from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .coerce import coerce_text

"""Entity variants and their extraction strategies.

The entity type is resolved once per row; the matching EntityProfile is then handed
to every builder instead of each builder re-testing the "type" string.
"""

__all__ = [
    "EntityType",
    "Scope",
    "IdentityType",
    "EntityProfile",
    "PROFILES",
    "profile_for",
]


class Scope(Enum):
    """Which entity variants a field applies to."""
    ANY = "any"
    PERSON = "person"
    ORGANISATION = "organisation"


class EntityType(Enum):
    PERSON = "PERSON"
    COMPANY = "COMPANY"
    ORGANISATION = "ORGANISATION"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def resolve(cls, value: Any) -> EntityType:
        text = coerce_text(value, allow_date=False)
        if text is None:
            return cls.UNKNOWN
        return _TYPE_ALIASES.get(text.upper(), cls.UNKNOWN)

    @property
    def is_person(self) -> bool:
        return self is EntityType.PERSON

    @property
    def is_organisation(self) -> bool:
        return self in (EntityType.COMPANY, EntityType.ORGANISATION)

    def admits(self, scope: Scope) -> bool:
        if scope is Scope.ANY:
            return True
        if scope is Scope.PERSON:
            return self.is_person
        return self.is_organisation


_TYPE_ALIASES = {
    "PERSON": EntityType.PERSON,
    "COMPANY": EntityType.COMPANY,
    "ORGANISATION": EntityType.ORGANISATION,
    "ORGANIZATION": EntityType.ORGANISATION,
    "ORG": EntityType.ORGANISATION,
}


class IdentityType(Enum):
    TAX_NO = "tax_no"
    DUNS = "duns"
    LEI = "lei"
    NATIONAL_ID = "national_id"
    DRIVING_LICENCE = "driving_licence"
    SSN = "ssn"
    PASSPORT_NO = "passport_no"


@dataclass(frozen=True)
class EntityProfile:
    entity_type: EntityType
    # (candidate canonical keys, identity type), in extraction order
    identity_columns: tuple[tuple[tuple[str, ...], IdentityType], ...]
    alias_name_key: str

    def admits(self, scope: Scope) -> bool:
        return self.entity_type.admits(scope)


_ORGANISATION_IDS = (
    (("dunsnumber", "duns"), IdentityType.DUNS),
    (("legalentityidentifierlei", "lei"), IdentityType.LEI),
)
_PERSON_IDS = (
    (("nationalid",), IdentityType.NATIONAL_ID),
    (("drivinglicenceno", "drivinglicenseno"), IdentityType.DRIVING_LICENCE),
    (("socialsecurityno",), IdentityType.SSN),
    (("passportno",), IdentityType.PASSPORT_NO),
)

PROFILES: dict[EntityType, EntityProfile] = {
    EntityType.PERSON: EntityProfile(EntityType.PERSON, _PERSON_IDS, "name"),
    EntityType.COMPANY: EntityProfile(EntityType.COMPANY, _ORGANISATION_IDS, "companyName"),
    EntityType.ORGANISATION: EntityProfile(EntityType.ORGANISATION, _ORGANISATION_IDS, "companyName"),
    EntityType.UNKNOWN: EntityProfile(EntityType.UNKNOWN, (), "name"),
}


def profile_for(entity_type: EntityType) -> EntityProfile:
    return PROFILES[entity_type]
