from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from ..errors import ErrorCell, FormulaCell
from ..excel.raw import RawRow, RawSheet, RawWorkbook
from ..excel.reader import open_workbook
from ..models.config_models import DecodeSettings
from ..models.located import DecodeFailure, Located, realize, unwrap
from ..models.origin import Granularity, Origin
from .decoder import decode_cell

"""Grid normalizer: row/sheet/workbook walkers and trimming helpers.

Loaded grids are nested Located lists:
    Located[list[Located[list[Located[list[Located[CellValue]]]]]]]
    workbook      sheets          rows           cells

Error and formula cells rejected by the DecodeSettings are kept in the grid as
DecodeFailure values and raised by whoever consumes them. UnknownCellType is a
collaborator contract violation and aborts the load immediately.
"""

__all__ = [
    "is_empty",
    "is_blank_row",
    "trim_trailing",
    "data_rows",
    "load_row",
    "load_sheet",
    "load_workbook",
    "load_workbook_file",
    "sheet_by_name",
    "unwrap_row",
    "unwrap_sheet",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_empty(data: Any) -> bool:
    return unwrap(data) is None


def is_blank_row(row: Any) -> bool:
    """True if the row is empty or every cell is absent/empty."""
    cells = unwrap(row)
    return not cells or all(is_empty(c) for c in cells)


def trim_trailing(predicate: Callable[[T], bool], sequence: Iterable[T]) -> list[T]:
    """Drop elements from the end while ``predicate`` holds; order is kept."""
    items = list(sequence)
    end = len(items)
    while end > 0 and predicate(items[end - 1]):
        end -= 1
    return items[:end]


def data_rows(sheet: Any, keep_titles: bool = False) -> list[Any]:
    """Rows below the title row (all rows with ``keep_titles``), trailing blank rows trimmed."""
    rows = list(unwrap(sheet))
    if not keep_titles:
        rows = rows[1:]
    return trim_trailing(is_blank_row, rows)


def _decode(origin: Origin, raw_row: RawRow, index: int, settings: DecodeSettings) -> Located[Any]:
    cell_origin = origin.at_cell(index)
    try:
        return decode_cell(cell_origin, raw_row.cell(index), settings)
    except (ErrorCell, FormulaCell) as e:
        return Located(DecodeFailure(e), e.origin)


def load_row(origin: Origin, raw_row: RawRow | None, settings: DecodeSettings | None = None) -> Located[list[Located[Any]]]:
    """Decode every cell up to the row's last populated column.

    ``origin`` must already carry the row index.
    """
    settings = settings or DecodeSettings()
    row_origin = origin.coarsen(Granularity.ROW)
    if raw_row is None:
        return Located([], row_origin)
    cells = [_decode(row_origin, raw_row, i, settings) for i in range(raw_row.last_cell_index())]
    return Located(cells, row_origin)


def load_sheet(origin: Origin, raw_sheet: RawSheet, settings: DecodeSettings | None = None) -> Located[list[Located[list[Located[Any]]]]]:
    """``origin`` must already carry the sheet name."""
    settings = settings or DecodeSettings()
    sheet_origin = origin.coarsen(Granularity.SHEET)
    rows = [load_row(sheet_origin.at_row(i), raw_sheet.row(i), settings) for i in range(raw_sheet.row_count())]
    logger.debug("loaded sheet %s rows=%d", sheet_origin.sheet_name, len(rows))
    return Located(rows, sheet_origin)


def load_workbook(
    origin: Origin,
    raw_workbook: RawWorkbook,
    settings: DecodeSettings | None = None,
    sheets: Iterable[str] | None = None,
) -> Located[list[Located[Any]]]:
    """Decode all (or the named) sheets, in workbook order."""
    settings = settings or DecodeSettings()
    targets = set(sheets) if sheets is not None else None
    book_origin = origin.coarsen(Granularity.WORKBOOK)
    loaded = []
    for name, raw_sheet in raw_workbook.sheets():
        if targets is not None and name not in targets:
            continue
        loaded.append(load_sheet(book_origin.at_sheet(name), raw_sheet, settings))
    return Located(loaded, book_origin)


def load_workbook_file(
    path: Path | str,
    settings: DecodeSettings | None = None,
    sheets: Iterable[str] | None = None,
) -> Located[list[Located[Any]]]:
    """Open, decode and close a spreadsheet file (closed even on failure)."""
    path = Path(path)
    targets = list(sheets) if sheets is not None else None
    logger.debug("loading workbook %s", path)
    with open_workbook(path, target_sheets=targets) as raw:
        return load_workbook(Origin.for_file(str(path)), raw, settings, targets)


def sheet_by_name(workbook: Any, name: str) -> Located[Any]:
    for sheet in unwrap(workbook):
        if sheet.origin is not None and sheet.origin.sheet_name == name:
            return sheet
    raise KeyError(name)


def unwrap_row(row: Any) -> list[Any]:
    """Bare cell values; raises the stored error of a DecodeFailure cell."""
    return [realize(c) for c in unwrap(row)]


def unwrap_sheet(sheet: Any) -> list[list[Any]]:
    return [unwrap_row(r) for r in unwrap(sheet)]
