from __future__ import annotations

import logging
from typing import Any

from ..errors import FailedRowMapify, FailedSheetMapify
from ..models.column_spec import REST, ColumnSpec
from ..models.located import Located, realize, unwrap
from ..models.origin import Granularity, Origin
from .decoder import decode_cell
from .grid import data_rows, is_empty, trim_trailing

"""Mapify: a loaded sheet -> ordered, validated records.

Steps:
1. Structural check of the ColumnSpec (fail fast, before any row)
2. Drop the title row unless ``keep_titles``
3. Trim trailing blank rows
4. Drop rows any skip checker accepts (silently)
5. Build one record per row; missing trailing columns validate as empty cells
6. Row failures are wrapped in FailedRowMapify, then FailedSheetMapify

Processing stops at the first failing row. Row and column order are never
changed.
"""

__all__ = [
    "mapify",
    "mapify_row",
    "unwrap_record",
    "unwrap_records",
]

logger = logging.getLogger(__name__)


def _cell_at(cells: list[Located[Any]], index: int, row_origin: Origin | None) -> Located[Any]:
    if index < len(cells):
        cell = cells[index]
        realize(cell)  # raises a stored decode failure
        return cell
    origin = (row_origin or Origin()).at_cell(index)
    return decode_cell(origin, None)


def mapify_row(row: Located[list[Located[Any]]], columns: ColumnSpec) -> Located[dict[Any, Any]]:
    """Build one record from a loaded row (no wrapping of failures)."""
    cells = trim_trailing(is_empty, unwrap(row))
    record: dict[Any, Any] = {}
    for i, key in enumerate(columns.ordering):
        validate = columns.validators[key]
        record[key] = validate(_cell_at(cells, i, row.origin))

    rest_validators = columns.rest_validators
    if rest_validators is not None:
        extra = trim_trailing(is_empty, cells[len(columns.ordering):])
        validated = []
        for cell in extra:
            realize(cell)
            validated.append(rest_validators.cell_validator(cell))
        record[REST] = rest_validators.all_validator(validated)
    return Located(record, row.origin)


def mapify(sheet: Located[list[Any]], columns: ColumnSpec, keep_titles: bool = False) -> Located[list[Located[dict[Any, Any]]]]:
    """Turn a loaded sheet into a Located list of Located records.

    Raises:
        InvalidColumnSpec: the ColumnSpec is structurally invalid
        FailedSheetMapify: a row failed; its cause is a FailedRowMapify whose
            cause is the original failure (decode or validation)
    """
    columns.check()
    sheet_origin = sheet.origin.coarsen(Granularity.SHEET) if sheet.origin is not None else None

    rows = data_rows(sheet, keep_titles)

    records: list[Located[dict[Any, Any]]] = []
    try:
        for row in rows:
            if columns.should_skip([unwrap(c) for c in unwrap(row)]):
                logger.debug("skipping row %s", row.origin)
                continue
            try:
                records.append(mapify_row(row, columns))
            except Exception as e:
                row_origin = row.origin.coarsen(Granularity.ROW) if row.origin is not None else sheet_origin
                raise FailedRowMapify("failed to mapify row", origin=row_origin) from e
    except Exception as e:
        raise FailedSheetMapify("failed to mapify sheet", origin=sheet_origin) from e

    logger.debug("mapified sheet %s records=%d", sheet_origin, len(records))
    return Located(records, sheet_origin)


def unwrap_record(record: Any) -> dict[Any, Any]:
    """Strip provenance from one record; the rest list is unwrapped element-wise."""
    fields = {key: unwrap(value) for key, value in unwrap(record).items()}
    if REST in fields:
        fields[REST] = [unwrap(v) for v in fields[REST]]
    return fields


def unwrap_records(records: Any) -> list[dict[Any, Any]]:
    return [unwrap_record(r) for r in unwrap(records)]
