from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..errors import ConfigError
from ..models.config_models import DecodeSettings, LoaderConfig

"""Config loader.

Responsibilities:
- Load YAML config (default: config/sheetmap.yml)
- Validate against the bundled JSON schema (additionalProperties: false)
- Apply defaults (strict decoding, keep_titles=false, all sheets)
- Apply environment overrides for the decode switches
"""

__all__ = [
    "ConfigError",
    "SCHEMA_PATH",
    "DEFAULT_CONFIG_PATH",
    "ENV_ERROR_CELL_HANDLING",
    "ENV_FORMULA_CELL_HANDLING",
    "load_config",
    "apply_env_overrides",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/sheetmap.yml")

ENV_ERROR_CELL_HANDLING = "SHEETMAP_ERROR_CELL_HANDLING"
ENV_FORMULA_CELL_HANDLING = "SHEETMAP_FORMULA_CELL_HANDLING"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing or not valid JSON, or the config data
            fails validation (unknown keys, wrong types, unknown enum values).
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


def load_config(path: Path) -> LoaderConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    decode_raw = data.get("decode", {})
    decode = DecodeSettings(
        error_cell_handling=decode_raw.get("error_cell_handling", "error"),
        formula_cell_handling=decode_raw.get("formula_cell_handling", "error"),
    )
    sheets = data.get("target_sheets")
    return LoaderConfig(
        decode=decode,
        keep_titles=data.get("keep_titles", False),
        target_sheets=tuple(sheets) if sheets is not None else None,
        error_log_dir=Path(data.get("error_log_dir", "./logs")),
    )


def apply_env_overrides(config: LoaderConfig, environ: Mapping[str, str] | None = None) -> LoaderConfig:
    """Environment variables win over the YAML decode section.

    Unknown values raise ConfigError (same policy as the YAML file).
    """
    env = os.environ if environ is None else environ
    decode = config.decode
    error_handling = env.get(ENV_ERROR_CELL_HANDLING)
    formula_handling = env.get(ENV_FORMULA_CELL_HANDLING)
    if error_handling:
        decode = replace(decode, error_cell_handling=error_handling)
    if formula_handling:
        decode = replace(decode, formula_cell_handling=formula_handling)
    return replace(config, decode=decode)
