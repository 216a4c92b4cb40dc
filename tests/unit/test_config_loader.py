from __future__ import annotations
import pytest
from datetime import date
from pathlib import Path
from screening_feed.config.loader import load_config, ConfigError
from screening_feed.models.config_models import ConverterConfig, TransformOptions


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.output_directory == "./out"
    assert cfg.log_directory == "./logs"
    assert cfg.preview_chars == 200
    assert cfg.keep_na_strings == ("NA",)
    assert cfg.transform.list_slots == 4
    assert cfg.transform.alias_type_labels == {2: "Formerly Known As"}
    assert cfg.transform.serial_date_epoch == date(1899, 12, 30)


def test_load_config_defaults_for_empty_file(temp_workdir: Path):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == ConverterConfig()


def test_load_config_partial_transform(temp_workdir: Path):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text("transform:\n  list_slots: 6\n  serial_date_epoch: '1899-12-31'\n", encoding="utf-8")
    cfg = load_config(p)
    assert cfg.transform == TransformOptions(list_slots=6, serial_date_epoch=date(1899, 12, 31))
    assert cfg.output_directory is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text("output_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p)


def test_load_config_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "preview_chars: many\n",
        "unknown_key: 1\n",
        "transform:\n  list_slots: -1\n",
        "transform:\n  alias_typo: x\n",
        "keep_na_strings: NA\n",
    ],
)
def test_load_config_schema_violation(temp_workdir: Path, body: str):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(p)


@pytest.mark.parametrize("epoch", ["'not a date'", "12345"])
def test_load_config_invalid_epoch(temp_workdir: Path, epoch: str):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text(f"transform:\n  serial_date_epoch: {epoch}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="serial_date_epoch"):
        load_config(p)


def test_load_config_alias_label_keys_must_be_numbers(temp_workdir: Path):
    p = temp_workdir / "config" / "convert.yml"
    p.write_text("transform:\n  alias_type_labels:\n    second: Formerly Known As\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="alias_type_labels"):
        load_config(p)


def test_example_config_is_valid():
    example = Path(__file__).resolve().parents[2] / "config" / "convert.example.yml"
    cfg = load_config(example)
    assert cfg.transform.alias_type == "Also Known As"
