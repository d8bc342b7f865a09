from __future__ import annotations

from pathlib import Path

import pytest

from sheetmap.config.loader import ConfigError, apply_env_overrides, load_config
from sheetmap.models.config_models import (
    DecodeSettings,
    ErrorCellHandling,
    FormulaCellHandling,
    LoaderConfig,
)


def test_load_config_success(write_config: Path):
    """Test loading a complete config file."""
    cfg = load_config(write_config)
    assert cfg.decode.error_cell_handling is ErrorCellHandling.AS_NUMBER
    assert cfg.decode.formula_cell_handling is FormulaCellHandling.ERROR
    assert cfg.keep_titles is False
    assert cfg.target_sheets == ("People",)
    assert cfg.error_log_dir == Path("./logs")


def test_load_config_defaults(temp_workdir: Path):
    """Missing keys fall back to the strict defaults."""
    path = temp_workdir / "config" / "empty.yml"
    path.write_text("", encoding="utf-8")
    cfg = load_config(path)
    assert cfg == LoaderConfig()
    assert cfg.decode == DecodeSettings()


def test_load_config_missing_file(temp_workdir: Path):
    """Test ConfigError for a missing file."""
    with pytest.raises(ConfigError):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(write_config: Path):
    """Test ConfigError for unparsable YAML."""
    write_config.write_text("decode: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_load_config_unknown_handling_value(write_config: Path):
    """Unknown handling values fail schema validation."""
    text = write_config.read_text(encoding="utf-8").replace("as_number", "ignore")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    """Test that unknown top-level keys are rejected."""
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_non_mapping_root(write_config: Path):
    """A YAML list at the root is not a config."""
    write_config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_env_overrides_win():
    """Environment values replace the file's decode settings."""
    cfg = apply_env_overrides(
        LoaderConfig(),
        {"SHEETMAP_ERROR_CELL_HANDLING": "as_number", "SHEETMAP_FORMULA_CELL_HANDLING": "as_string"},
    )
    assert cfg.decode == DecodeSettings.permissive()


def test_env_overrides_absent_keep_config():
    """Test that the config is unchanged when no override is set."""
    cfg = LoaderConfig(decode=DecodeSettings.permissive())
    assert apply_env_overrides(cfg, {}) == cfg


def test_env_override_unknown_value_fails_fast():
    """Test ConfigError for an unknown override value."""
    with pytest.raises(ConfigError):
        apply_env_overrides(LoaderConfig(), {"SHEETMAP_ERROR_CELL_HANDLING": "whatever"})
