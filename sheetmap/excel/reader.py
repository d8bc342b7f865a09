from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import openpyxl
import pandas as pd
from openpyxl.cell.cell import Cell
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .raw import CellType, GridRow, GridSheet, GridWorkbook, RawCell, raw_cell_for

"""Spreadsheet readers producing the raw grid.

Two collaborators:
- openpyxl (``open_workbook``): full cell typing, including formula and error
  cells. Used by ``load_workbook_file``.
- pandas (``read_excel_frames`` + ``workbook_from_frames``): header-less
  DataFrames turned into a raw grid. pandas resolves formulas to cached values
  and has no error-cell tag, so this path only ever yields plain values.
"""

__all__ = [
    "ERROR_CODES",
    "OpenpyxlRow",
    "OpenpyxlSheet",
    "OpenpyxlWorkbook",
    "open_workbook",
    "read_excel_frames",
    "workbook_from_frames",
]

logger = logging.getLogger(__name__)

# Numeric error codes as stored in the binary formats. Newer errors (#SPILL!,
# #CALC!, ...) have none and are passed on as their text.
ERROR_CODES: dict[str, int] = {
    "#NULL!": 0x00,
    "#DIV/0!": 0x07,
    "#VALUE!": 0x0F,
    "#REF!": 0x17,
    "#NAME?": 0x1D,
    "#NUM!": 0x24,
    "#N/A": 0x2A,
    "#GETTING_DATA": 0x2B,
}

# openpyxl data_type codes
_STRING_TYPES = {"s", "inlineStr", "str"}


def _raw_cell(cell: Cell) -> RawCell:
    value = cell.value
    data_type = cell.data_type
    if data_type == "f":
        text = value.text if hasattr(value, "text") else str(value)  # ArrayFormula
        return RawCell(CellType.FORMULA, text[1:] if text.startswith("=") else text)
    if value is None:
        return RawCell(CellType.BLANK)
    if data_type == "e":
        return RawCell(CellType.ERROR, ERROR_CODES.get(str(value), str(value)))
    if data_type == "b":
        return RawCell(CellType.BOOLEAN, bool(value))
    if cell.is_date or data_type == "d":
        return RawCell(CellType.DATE, value)
    if data_type == "n":
        return RawCell(CellType.NUMERIC, value)
    if data_type in _STRING_TYPES:
        return RawCell(CellType.STRING, str(value))
    return RawCell(data_type, value)


@dataclass
class OpenpyxlRow:
    cells: tuple[Cell, ...]

    def last_cell_index(self) -> int:
        last = len(self.cells)
        while last > 0 and self.cells[last - 1].value is None:
            last -= 1
        return last

    def cell(self, column_index: int) -> RawCell | None:
        if 0 <= column_index < len(self.cells):
            return _raw_cell(self.cells[column_index])
        return None


class OpenpyxlSheet:
    def __init__(self, worksheet: Worksheet) -> None:
        self._rows = [OpenpyxlRow(tuple(r)) for r in worksheet.iter_rows()]

    def row_count(self) -> int:
        return len(self._rows)

    def row(self, row_index: int) -> OpenpyxlRow | None:
        if 0 <= row_index < len(self._rows):
            return self._rows[row_index]
        return None


class OpenpyxlWorkbook:
    def __init__(self, workbook: Workbook, target_sheets: Iterable[str] | None = None) -> None:
        self._workbook = workbook
        self._targets = set(target_sheets) if target_sheets is not None else None

    def sheets(self) -> Iterator[tuple[str, OpenpyxlSheet]]:
        for worksheet in self._workbook.worksheets:
            if self._targets is not None and worksheet.title not in self._targets:
                logger.debug("skipping sheet %s (not targeted)", worksheet.title)
                continue
            yield worksheet.title, OpenpyxlSheet(worksheet)


@contextmanager
def open_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> Iterator[OpenpyxlWorkbook]:
    """Open a workbook for raw cell access; always closed on exit.

    Formulas are kept as formulas (``data_only=False``) so the decoder can
    apply the formula-cell policy.
    """
    try:
        workbook = openpyxl.load_workbook(path, data_only=False)
    except KeyError as e:
        # zip archive without the workbook parts
        raise InvalidFileException(f"not a workbook archive (missing {e})") from e
    try:
        yield OpenpyxlWorkbook(workbook, target_sheets)
    finally:
        workbook.close()


def read_excel_frames(
    path: Path, target_sheets: Iterable[str] | None = None, keep_na_strings: list[str] | None = None
) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning header-less DataFrames keyed by sheet name.

    Parameters
    ----------
    path: Excel file path
    target_sheets: restrict to these sheet names (None -> all sheets)
    keep_na_strings: strings excluded from pandas' default NaN conversion (e.g. ['NA'])
    """
    import pandas._libs.parsers as parsers

    if keep_na_strings:
        na_values = list(parsers.STR_NA_VALUES - set(keep_na_strings))
        keep_default_na = False
    else:
        na_values = None
        keep_default_na = True

    targets = set(target_sheets) if target_sheets is not None else None
    dfs: dict[str, pd.DataFrame] = {}
    with pd.ExcelFile(path) as xls:
        for name in xls.sheet_names:
            if targets is not None and str(name) not in targets:
                continue
            df = xls.parse(name, header=None, keep_default_na=keep_default_na, na_values=na_values)
            dfs[str(name)] = df
    return dfs


def _python_value(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def workbook_from_frames(frames: dict[str, pd.DataFrame]) -> GridWorkbook:
    """Raw grid from header-less DataFrames (sheet order = dict order)."""
    workbook = GridWorkbook()
    for name, df in frames.items():
        rows: list[GridRow | None] = []
        for raw in df.itertuples(index=False, name=None):
            cells = [raw_cell_for(_python_value(v)) for v in raw]
            rows.append(GridRow(cells))
        workbook.add_sheet(name, GridSheet(rows))
    return workbook
