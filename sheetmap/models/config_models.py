from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import ConfigError

"""Config dataclasses for the spreadsheet loader.

DecodeSettings replaces process-wide switches: it is threaded explicitly into
the cell decoder. Unrecognized handling values fail fast with ConfigError
instead of silently behaving like the strict default.
"""

__all__ = [
    "ErrorCellHandling",
    "FormulaCellHandling",
    "DecodeSettings",
    "LoaderConfig",
]


class ErrorCellHandling(Enum):
    AS_NUMBER = "as_number"  # numeric error code passed through as a Number
    ERROR = "error"  # raise ErrorCell


class FormulaCellHandling(Enum):
    AS_STRING = "as_string"  # formula text passed through as Text
    ERROR = "error"  # raise FormulaCell


def _coerce(enum_cls: type[Enum], value: Any, name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower().replace("-", "_")
        for member in enum_cls:
            if member.value == normalized:
                return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise ConfigError(f"invalid {name}: {value!r} (expected one of: {allowed})")


@dataclass(frozen=True)
class DecodeSettings:
    """Cell decoding policy (set once per batch). Strict by default."""
    error_cell_handling: ErrorCellHandling = ErrorCellHandling.ERROR
    formula_cell_handling: FormulaCellHandling = FormulaCellHandling.ERROR

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "error_cell_handling",
            _coerce(ErrorCellHandling, self.error_cell_handling, "error_cell_handling"),
        )
        object.__setattr__(
            self, "formula_cell_handling",
            _coerce(FormulaCellHandling, self.formula_cell_handling, "formula_cell_handling"),
        )

    @staticmethod
    def permissive() -> DecodeSettings:
        return DecodeSettings(ErrorCellHandling.AS_NUMBER, FormulaCellHandling.AS_STRING)


@dataclass(frozen=True)
class LoaderConfig:
    """Root configuration for batch loading (config/sheetmap.yml)."""
    decode: DecodeSettings = field(default_factory=DecodeSettings)
    keep_titles: bool = False  # keep the first row when mapifying
    target_sheets: tuple[str, ...] | None = None  # None -> all sheets
    error_log_dir: Path = Path("./logs")
