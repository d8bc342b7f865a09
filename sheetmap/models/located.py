from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from .origin import Origin

"""Located[T]: a value paired with its Origin, plus the CellValue vocabulary.

CellValue is the closed set of plain Python values the decoder produces:
None (empty), bool, str, int, float and UTC datetime.
"""

__all__ = [
    "CellValue",
    "CellKind",
    "DecodeFailure",
    "Located",
    "kind_of",
    "realize",
    "unwrap",
]

T = TypeVar("T")

CellValue = bool | str | int | float | datetime | None
# DecodeFailure (below) is the "decode failure" member of the loaded grid


class CellKind(Enum):
    EMPTY = "empty"
    BOOLEAN = "boolean"
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    DATETIME = "datetime"


def kind_of(value: Any) -> CellKind | None:
    """Classify a bare value; returns None for anything outside CellValue."""
    # bool before int: bool is an int subclass
    if value is None:
        return CellKind.EMPTY
    if isinstance(value, bool):
        return CellKind.BOOLEAN
    if isinstance(value, str):
        return CellKind.TEXT
    if isinstance(value, int):
        return CellKind.INTEGER
    if isinstance(value, float):
        return CellKind.NUMBER
    if isinstance(value, datetime):
        return CellKind.DATETIME
    return None


@dataclass(frozen=True)
class Located(Generic[T]):
    """A value tagged with where it came from."""
    value: T
    origin: Origin | None

    def unwrap(self) -> T:
        return self.value

    def with_value(self, value: Any) -> Located[Any]:
        """Same origin, new value (used by validators that transform)."""
        return replace(self, value=value)


def unwrap(data: Any) -> Any:
    """Strip provenance from a Located; bare values pass through."""
    if isinstance(data, Located):
        return data.value
    return data


@dataclass(frozen=True)
class DecodeFailure:
    """A cell that could not be decoded under the active DecodeSettings.

    Stored in the grid in place of a value; raised when the cell is consumed
    (mapify, read_position, unwrap_sheet) so the failure surfaces with the
    row/sheet context of the consumer.
    """
    error: Exception

    def raise_error(self) -> None:
        raise self.error


def realize(data: Any) -> Any:
    """Like unwrap, but raises the stored error of a DecodeFailure."""
    value = unwrap(data)
    if isinstance(value, DecodeFailure):
        value.raise_error()
    return value
