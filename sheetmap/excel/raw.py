from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Protocol

"""Raw grid interface consumed by the decoder.

A workbook is an ordered sequence of (sheet_name, sheet); sheets expose a row
count and optional rows; rows expose the last populated column and optional
cells. Cells carry a type tag and the matching raw value:

- FORMULA: value is the formula text
- ERROR: value is the numeric error code, or the error text when it has none
- DATE: value is a spreadsheet serial number, date, time, datetime or duration
"""

__all__ = [
    "CellType",
    "RawCell",
    "RawRow",
    "RawSheet",
    "RawWorkbook",
    "GridRow",
    "GridSheet",
    "GridWorkbook",
    "raw_cell_for",
    "grid_from_rows",
]


class CellType(Enum):
    NONE = "none"
    BLANK = "blank"
    BOOLEAN = "boolean"
    STRING = "string"
    NUMERIC = "numeric"
    DATE = "date"  # date-formatted numeric
    FORMULA = "formula"
    ERROR = "error"


@dataclass(frozen=True)
class RawCell:
    cell_type: Any  # CellType; anything else is a collaborator contract violation
    value: Any = None


class RawRow(Protocol):
    def last_cell_index(self) -> int:
        """Index one past the last populated column (0 for an empty row)."""
        ...

    def cell(self, column_index: int) -> RawCell | None: ...


class RawSheet(Protocol):
    def row_count(self) -> int: ...

    def row(self, row_index: int) -> RawRow | None: ...


class RawWorkbook(Protocol):
    def sheets(self) -> Iterator[tuple[str, RawSheet]]: ...


@dataclass
class GridRow:
    cells: list[RawCell | None] = field(default_factory=list)

    def last_cell_index(self) -> int:
        return len(self.cells)

    def cell(self, column_index: int) -> RawCell | None:
        if 0 <= column_index < len(self.cells):
            return self.cells[column_index]
        return None


@dataclass
class GridSheet:
    rows: list[GridRow | None] = field(default_factory=list)

    def row_count(self) -> int:
        return len(self.rows)

    def row(self, row_index: int) -> GridRow | None:
        if 0 <= row_index < len(self.rows):
            return self.rows[row_index]
        return None


@dataclass
class GridWorkbook:
    """In-memory workbook; sheet order is insertion order."""
    named_sheets: list[tuple[str, GridSheet]] = field(default_factory=list)

    def sheets(self) -> Iterator[tuple[str, GridSheet]]:
        return iter(self.named_sheets)

    def add_sheet(self, name: str, sheet: GridSheet) -> None:
        self.named_sheets.append((name, sheet))


def raw_cell_for(value: Any) -> RawCell | None:
    """Tag a plain Python value the way a reader would report it."""
    if value is None:
        return None
    if isinstance(value, RawCell):
        return value
    if isinstance(value, bool):
        return RawCell(CellType.BOOLEAN, value)
    if isinstance(value, (int, float)):
        return RawCell(CellType.NUMERIC, value)
    if isinstance(value, str):
        if value == "":
            return RawCell(CellType.BLANK)
        return RawCell(CellType.STRING, value)
    if isinstance(value, (datetime, date, time)):
        return RawCell(CellType.DATE, value)
    raise TypeError(f"cannot tag value of type {type(value).__name__}: {value!r}")


def grid_from_rows(sheets: dict[str, Sequence[Sequence[Any]]]) -> GridWorkbook:
    """Build an in-memory workbook from ``{sheet_name: [[value, ...], ...]}``.

    Plain values are tagged with raw_cell_for; RawCell instances pass through,
    which allows formula/error cells to be expressed directly.
    """
    workbook = GridWorkbook()
    for name, rows in sheets.items():
        grid_rows: list[GridRow | None] = [GridRow([raw_cell_for(v) for v in row]) for row in rows]
        workbook.add_sheet(name, GridSheet(grid_rows))
    return workbook
