from __future__ import annotations

import math
from dataclasses import replace
from datetime import UTC, date, datetime, time, timedelta
from typing import Any

from openpyxl.utils.datetime import WINDOWS_EPOCH, from_excel

from ..errors import ErrorCell, FormulaCell, UnknownCellType
from ..excel.raw import CellType, RawCell
from ..models.config_models import DecodeSettings, ErrorCellHandling, FormulaCellHandling
from ..models.located import CellValue, Located
from ..models.origin import Granularity, Origin

"""Cell decoder: one raw cell -> Located[CellValue].

Policy:
- missing / none / blank -> None
- boolean / string -> bool / str
- numeric -> int when the value has no fractional part (and fits in 64 bits),
  float otherwise; date-formatted numerics -> UTC datetime
- error / formula -> governed by DecodeSettings (strict by default)
- anything else -> UnknownCellType
"""

__all__ = [
    "INT64_MIN",
    "INT64_MAX",
    "canonical_number",
    "to_utc_datetime",
    "decode_cell",
]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_STRICT = DecodeSettings()


def canonical_number(value: int | float) -> int | float:
    """4.0 -> 4; 4.5 -> 4.5. Values outside the int64 range stay float."""
    if isinstance(value, int):
        return value if INT64_MIN <= value <= INT64_MAX else float(value)
    if math.isfinite(value) and value.is_integer() and INT64_MIN <= value <= INT64_MAX:
        return int(value)
    return value


def to_utc_datetime(value: Any) -> datetime:
    """Normalize a date-ish raw value to an aware UTC datetime.

    Naive datetimes are taken as UTC; date-only values become midnight UTC;
    time-only values and durations are anchored on the spreadsheet epoch; numbers are
    spreadsheet serials.

    Raises:
        TypeError: value is not date-like
    """
    if isinstance(value, bool):
        raise TypeError(f"not a date value: {value!r}")
    if isinstance(value, (int, float)):
        value = from_excel(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    if isinstance(value, date):
        return datetime.combine(value, time(0), tzinfo=UTC)
    if isinstance(value, time):
        return datetime.combine(WINDOWS_EPOCH.date(), value.replace(tzinfo=None), tzinfo=UTC)
    if isinstance(value, timedelta):
        # duration formats ([h]:mm) count from the epoch like any serial
        return (WINDOWS_EPOCH + value).replace(tzinfo=UTC)
    raise TypeError(f"not a date value: {value!r}")


def _decode_value(origin: Origin, cell: RawCell | None, settings: DecodeSettings) -> CellValue:
    if cell is None:
        return None
    cell_type = cell.cell_type
    if not isinstance(cell_type, CellType):
        raise UnknownCellType(f"unknown cell type: {cell_type!r}", origin=origin)

    if cell_type in (CellType.NONE, CellType.BLANK):
        return None
    if cell_type is CellType.ERROR:
        if not isinstance(cell.value, int):
            # no stored numeric code (#SPILL!, #CALC!, ...)
            raise ErrorCell(f"error cell ({cell.value}) has no numeric code", origin=origin)
        if settings.error_cell_handling is ErrorCellHandling.AS_NUMBER:
            return float(cell.value)
        raise ErrorCell(f"error cell (code {cell.value})", origin=origin)
    if cell_type is CellType.FORMULA:
        if settings.formula_cell_handling is FormulaCellHandling.AS_STRING:
            return str(cell.value)
        raise FormulaCell(f"formula cell: ={cell.value}", origin=origin)
    if cell_type is CellType.BOOLEAN:
        return bool(cell.value)
    if cell_type is CellType.STRING:
        return str(cell.value)
    if cell_type is CellType.NUMERIC:
        if isinstance(cell.value, bool) or not isinstance(cell.value, (int, float)):
            raise UnknownCellType(f"numeric cell holds {type(cell.value).__name__}", origin=origin)
        return canonical_number(cell.value)
    if cell_type is CellType.DATE:
        try:
            return to_utc_datetime(cell.value)
        except (TypeError, ValueError, OverflowError) as e:
            raise UnknownCellType(f"date cell holds {cell.value!r}", origin=origin) from e
    raise UnknownCellType(f"unhandled cell type: {cell_type!r}", origin=origin)  # pragma: no cover


def decode_cell(
    origin: Origin, cell: RawCell | None, settings: DecodeSettings | None = None
) -> Located[CellValue]:
    """Decode one raw cell; never mutates it.

    Raises:
        ErrorCell / FormulaCell: the settings forbid passthrough
        UnknownCellType: collaborator contract violation
    """
    cell_origin = replace(origin, granularity=Granularity.CELL)
    value = _decode_value(cell_origin, cell, settings or _STRICT)
    return Located(value, cell_origin)
