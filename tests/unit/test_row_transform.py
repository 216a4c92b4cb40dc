from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

from screening_feed.models.config_models import TransformOptions
from screening_feed.transform.columns import detect_columns
from screening_feed.transform.row import RECORD_FIELDS, transform_row


def _assert_sparse(value: Any, path: str = "record") -> None:
    """No key anywhere maps to None, "", [] or {}."""
    if isinstance(value, dict):
        assert value, f"{path} is an empty object"
        for k, v in value.items():
            assert v is not None and v != "" and v != [] and v != {}, f"{path}.{k} is empty"
            _assert_sparse(v, f"{path}.{k}")
    elif isinstance(value, list):
        assert value, f"{path} is an empty list"
        for i, item in enumerate(value):
            _assert_sparse(item, f"{path}[{i}]")


def test_person_end_to_end(person_row):
    record = transform_row(person_row)
    assert record == {
        "type": "PERSON",
        "profileId": "1",
        "name": "Jane Doe",
        "identityNumbers": [
            {"type": "tax_no", "value": "TX1"},
            {"type": "passport_no", "value": "P1"},
        ],
        "addresses": [{"city": "London", "countryCode": "GB"}],
    }


def test_company_record(company_row):
    record = transform_row(company_row)
    assert record["type"] == "COMPANY"
    assert record["profileId"] == "77"
    assert record["identityNumbers"] == [
        {"type": "tax_no", "value": "GB123"},
        {"type": "duns", "value": "123456789"},
        {"type": "lei", "value": "5493001KJTIIGC8Y1R12"},
    ]
    assert record["incorporationCountryCode"] == "GB"
    assert record["dateOfIncorporation"] == "1999-04"
    assert record["aliases"] == [
        {"companyName": "Acme Ltd", "type": "Also Known As"},
        {"companyName": "Acme Holdings", "type": "Also Known As"},
    ]
    assert record["lists"] == [
        {
            "id": "OFAC SDN",
            "name": "OFAC SDN",
            "active": True,
            "listActive": True,
            "hierarchy": [{"id": "OFAC SDN", "name": "OFAC SDN"}],
            "since": "2019-02-01",
        }
    ]


def test_type_conditionality_company(company_row):
    record = transform_row(company_row)
    id_types = {n["type"] for n in record["identityNumbers"]}
    assert not id_types & {"national_id", "ssn", "passport_no", "driving_licence"}
    assert "gender" not in record
    assert "dateOfBirth" not in record


def test_type_conditionality_person():
    row = {
        "type": "PERSON",
        "name": "John Smith",
        "Duns Number": "123",
        "Legal Entity Identifier (LEI)": "LEI",
        "incorporationCountryCode": "GB",
        "dateOfIncorporation": "2001",
        "gender": "Male",
        "dateOfBirth": "1970-01",
        "nationalityCodes": "GB;IE",
        "domicileCodes": "FR",
    }
    record = transform_row(row)
    assert "identityNumbers" not in record
    assert "incorporationCountryCode" not in record
    assert "dateOfIncorporation" not in record
    assert record["gender"] == "Male"
    assert record["dateOfBirth"] == "1970-01"
    assert record["nationalityCodes"] == ["GB", "IE"]
    assert record["domicileCodes"] == ["FR"]


def test_list_fields_and_dates():
    row = {
        "type": "Person",
        "countryOfRegistrationCode": "US,CA",
        "citizenshipCode": "US;CA",
        "sources": "https://a.example, https://b.example",
        "dateOfBirthArray": 25569,
        "lastModifiedDate": datetime(2024, 3, 1, 12, 0),
        "profileNotes": "  needs review ",
    }
    record = transform_row(row)
    assert record["countryOfRegistrationCode"] == ["US", "CA"]
    assert record["citizenshipCode"] == ["US", "CA"]
    assert record["sources"] == ["https://a.example", "https://b.example"]
    assert record["dateOfBirthArray"] == ["1970-01-01"]
    assert record["lastModifiedDate"] == "2024-03-01"
    assert record["profileNotes"] == "needs review"


def test_identifier_column_never_date():
    row = {"type": "PERSON", "profileId": datetime(2020, 1, 1)}
    assert transform_row(row)["profileId"] == "2020-01-01 00:00:00"


def test_unknown_type_keeps_raw_type_and_tax_only():
    row = {"type": "Vessel", "National Tax No.": "T1", "Passport No.": "P1", "gender": "F", "Aliases1": "Ship"}
    record = transform_row(row)
    assert record == {
        "type": "Vessel",
        "identityNumbers": [{"type": "tax_no", "value": "T1"}],
        "aliases": [{"name": "Ship", "type": "Also Known As"}],
    }


def test_empty_row_gives_empty_record():
    assert transform_row({"type": None, "name": "nan", "List 1": " "}) == {}


def test_sparsity_and_idempotence(person_row, company_row):
    for row in (person_row, company_row):
        columns = detect_columns(row.keys())
        first = transform_row(row, columns)
        second = transform_row(row, columns)
        _assert_sparse(first)
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_options_are_applied():
    row = {"type": "PERSON", "Aliases2": "JD", "List 5": "EXTRA", "dateOfBirth": 43967}
    options = TransformOptions(
        list_slots=5,
        alias_type="AKA",
        alias_type_labels={2: "Low Quality AKA"},
        serial_date_epoch=date(1899, 12, 31),
    )
    record = transform_row(row, options=options)
    assert record["aliases"] == [{"name": "JD", "type": "Low Quality AKA"}]
    assert [m["id"] for m in record["lists"]] == ["EXTRA"]
    assert record["dateOfBirth"] == "2020-05-17"


def test_record_fields_have_unique_outputs():
    outputs = [spec.output for spec in RECORD_FIELDS]
    assert len(outputs) == len(set(outputs))


def test_numeric_years_stay_years():
    row = {"type": "PERSON", "name": "X", "dateOfBirth": 1980, "List 1": "UN", "Since List 1": 2015}
    record = transform_row(row)
    assert record["dateOfBirth"] == "1980"
    assert record["lists"][0]["since"] == "2015"
