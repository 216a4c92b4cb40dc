# Shared pytest fixtures
from __future__ import annotations
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from screening_feed.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SCREENING_FEED_CONFIG", raising=False)
        monkeypatch.delenv("SCREENING_FEED_OUTPUT_DIR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """output_directory: ./out
log_directory: ./logs
preview_chars: 200
keep_na_strings: [NA]
transform:
  list_slots: 4
  alias_type: Also Known As
  alias_type_labels:
    2: Formerly Known As
  serial_date_epoch: 1899-12-30
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "convert.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    """Write rows (first entry = header row) to an .xlsx, one sheet per entry."""
    def _make(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def person_row() -> dict[str, Any]:
    return {
        "type": "PERSON",
        "profileId": "1",
        "name": "Jane Doe",
        "National Tax No.": "TX1",
        "Passport No.": "P1",
        "city": "London",
        "countryCode": "gb",
    }


@pytest.fixture()
def company_row() -> dict[str, Any]:
    return {
        "type": "COMPANY",
        "profileId": 77,
        "name": "Acme Trading Ltd",
        "National Tax No.": "GB123",
        "Duns Number": 123456789.0,
        "Legal Entity Identifier (LEI)": "5493001KJTIIGC8Y1R12",
        "National ID": "SHOULD-NOT-APPEAR",
        "Passport No.\t": "SHOULD-NOT-APPEAR",
        "gender": "Male",
        "incorporationCountryCode": "GB",
        "dateOfIncorporation": "1999-04",
        "Aliases1": "Acme Ltd",
        "Aliases2": "Acme Holdings",
        "List 1": "OFAC SDN",
        "Active List 1": "TRUE",
        "Since List 1": "2019-02-01",
    }


@pytest.fixture()
def rows_to_sheet() -> Callable[[list[dict[str, Any]]], list[list[Any]]]:
    """Turn row dicts into header + value lists (header = union of keys, first seen order)."""
    def _convert(rows: list[dict[str, Any]]) -> list[list[Any]]:
        header = list(dict.fromkeys(k for row in rows for k in row))
        return [header] + [[row.get(h) for h in header] for row in rows]
    return _convert
