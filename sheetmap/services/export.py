from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, time
from typing import Any

from ..errors import UnsupportedValueError
from ..excel.writer import CellWriter, RowWriter, SheetWriter
from ..models.column_spec import REST, ColumnSpec
from ..models.located import CellKind, Located, kind_of, realize

"""Export path: records -> rows of typed cells.

Counterpart of mapify. Each ColumnSpec validator is applied to the record field
before writing, so the same spec guards both directions. Datetimes are written
as naive UTC; date-only values are written at 12:00 UTC (an approximation, not
timezone handling).
"""

__all__ = [
    "write_cell",
    "write_row",
    "write_record",
    "write_table",
]

logger = logging.getLogger(__name__)


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.replace(tzinfo=None)


def write_cell(cell: CellWriter, data: Any) -> None:
    value = realize(data)
    if isinstance(value, date) and not isinstance(value, datetime):
        cell.set_datetime(datetime.combine(value, time(12, 0)))
        return
    kind = kind_of(value)
    if kind is CellKind.EMPTY:
        cell.set_blank()
    elif kind is CellKind.BOOLEAN:
        cell.set_boolean(value)
    elif kind is CellKind.TEXT:
        cell.set_text(value)
    elif kind in (CellKind.INTEGER, CellKind.NUMBER):
        cell.set_number(value)
    elif kind is CellKind.DATETIME:
        cell.set_datetime(_to_naive_utc(value))
    else:
        origin = data.origin if isinstance(data, Located) else None
        raise UnsupportedValueError(f"cannot write value of type {type(value).__name__}", origin=origin)


def write_row(row: RowWriter, values: Iterable[Any], start: int = 0) -> int:
    """Write values to new cells at increasing column index; returns the next index."""
    i = start
    for value in values:
        write_cell(row.create_cell(i), value)
        i += 1
    return i


def _located(value: Any) -> Located[Any]:
    return value if isinstance(value, Located) else Located(value, None)


def write_record(row: RowWriter, record: Any, columns: ColumnSpec) -> None:
    """Validate/format each ``ordering`` field and write it; then the rest columns."""
    columns.check()
    fields = realize(record)
    values = [columns.validators[key](_located(fields.get(key))) for key in columns.ordering]
    next_index = write_row(row, values)

    rest_validators = columns.rest_validators
    if rest_validators is not None:
        rest = [_located(v) for v in (fields.get(REST) or [])]
        checked = rest_validators.all_validator(rest)
        write_row(row, (rest_validators.cell_validator(v) for v in checked), start=next_index)


def write_table(
    sheet: SheetWriter,
    records: Any,
    columns: ColumnSpec,
    titles: Sequence[Any] | None = None,
) -> int:
    """Optional title row, then one row per record in order; returns rows written."""
    row_index = 0
    if titles is not None:
        write_row(sheet.create_row(row_index), titles)
        row_index += 1
    for record in realize(records):
        write_record(sheet.create_row(row_index), record, columns)
        row_index += 1
    logger.debug("wrote %d rows", row_index)
    return row_index
