from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Protocol

import openpyxl
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

"""Write-direction collaborator.

The export path creates rows and cells by 0-based index and calls one setter per
value variant. Datetimes arrive here already normalized to naive UTC.
"""

__all__ = [
    "CellWriter",
    "RowWriter",
    "SheetWriter",
    "OpenpyxlCellWriter",
    "OpenpyxlRowWriter",
    "OpenpyxlSheetWriter",
    "new_workbook",
    "save_workbook",
]


class CellWriter(Protocol):
    def set_blank(self) -> None: ...

    def set_text(self, value: str) -> None: ...

    def set_number(self, value: int | float) -> None: ...

    def set_boolean(self, value: bool) -> None: ...

    def set_datetime(self, value: datetime) -> None: ...


class RowWriter(Protocol):
    def create_cell(self, column_index: int) -> CellWriter: ...


class SheetWriter(Protocol):
    def create_row(self, row_index: int) -> RowWriter: ...


class OpenpyxlCellWriter:
    def __init__(self, worksheet: Worksheet, row: int, column: int) -> None:
        # openpyxl coordinates are 1-based
        self._cell = worksheet.cell(row=row + 1, column=column + 1)

    def set_blank(self) -> None:
        self._cell.value = None

    def set_text(self, value: str) -> None:
        self._cell.value = value

    def set_number(self, value: int | float) -> None:
        self._cell.value = value

    def set_boolean(self, value: bool) -> None:
        self._cell.value = value

    def set_datetime(self, value: datetime) -> None:
        self._cell.value = value


class OpenpyxlRowWriter:
    def __init__(self, worksheet: Worksheet, row: int) -> None:
        self._worksheet = worksheet
        self._row = row

    def create_cell(self, column_index: int) -> OpenpyxlCellWriter:
        return OpenpyxlCellWriter(self._worksheet, self._row, column_index)


class OpenpyxlSheetWriter:
    def __init__(self, worksheet: Worksheet) -> None:
        self.worksheet = worksheet

    @property
    def title(self) -> str:
        return self.worksheet.title

    def create_row(self, row_index: int) -> OpenpyxlRowWriter:
        return OpenpyxlRowWriter(self.worksheet, row_index)


def new_workbook(sheet_names: list[str]) -> tuple[Workbook, list[OpenpyxlSheetWriter]]:
    """Empty workbook with the given sheets (in order)."""
    workbook = openpyxl.Workbook()
    default = workbook.active
    writers: list[OpenpyxlSheetWriter] = []
    for name in sheet_names:
        writers.append(OpenpyxlSheetWriter(workbook.create_sheet(title=name)))
    if sheet_names and default is not None:
        workbook.remove(default)
    return workbook, writers


def save_workbook(workbook: Workbook, path: Path) -> Path:
    workbook.save(path)
    return path
