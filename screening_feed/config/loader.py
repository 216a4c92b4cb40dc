from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ALIAS_TYPE,
    DEFAULT_LIST_SLOTS,
    DEFAULT_PREVIEW_CHARS,
    EXCEL_EPOCH,
    ConverterConfig,
    TransformOptions,
)

"""Config loader.

Responsibilities:
- Load YAML (config/convert.yml by default)
- Validate against the bundled config_schema.json
- Apply defaults and build the frozen ConverterConfig
"""

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "ConfigError",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/convert.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the data fails
            validation (wrong types, unknown keys, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_epoch(raw: Any) -> date:
    # YAML は 1899-12-30 を date として読み込む
    if raw is None:
        return EXCEL_EPOCH
    if isinstance(raw, date):
        return raw
    if isinstance(raw, str):
        try:
            return date.fromisoformat(raw.strip())
        except ValueError as e:
            raise ConfigError(f"invalid serial_date_epoch: {raw!r}") from e
    raise ConfigError(f"invalid serial_date_epoch: {raw!r}")


def _parse_alias_labels(raw: dict[Any, Any] | None) -> dict[int, str]:
    labels: dict[int, str] = {}
    for key, label in (raw or {}).items():
        try:
            labels[int(key)] = label
        except (TypeError, ValueError) as e:
            raise ConfigError(f"alias_type_labels keys must be alias numbers, got {key!r}") from e
    return labels


def _build_transform_options(raw: dict[str, Any]) -> TransformOptions:
    return TransformOptions(
        list_slots=raw.get("list_slots", DEFAULT_LIST_SLOTS),
        alias_type=raw.get("alias_type", DEFAULT_ALIAS_TYPE),
        alias_type_labels=_parse_alias_labels(raw.get("alias_type_labels")),
        serial_date_epoch=_parse_epoch(raw.get("serial_date_epoch")),
    )


def load_config(path: Path) -> ConverterConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    return ConverterConfig(
        output_directory=data.get("output_directory"),
        log_directory=data.get("log_directory", "./logs"),
        preview_chars=data.get("preview_chars", DEFAULT_PREVIEW_CHARS),
        header_row=data.get("header_row", 0),
        keep_na_strings=tuple(data.get("keep_na_strings", ("NA",))),
        transform=_build_transform_options(data.get("transform") or {}),
    )
