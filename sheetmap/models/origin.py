from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

"""Origin descriptor: where a decoded value came from.

Origins are only ever copied and refined/coarsened, never mutated. The display
form is spreadsheet-style, e.g. ``Sheet1:B17``.
"""

__all__ = [
    "OriginKind",
    "Granularity",
    "Origin",
    "column_name",
    "row_col_str",
    "format_origin",
]

LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
UNKNOWN_COLUMN = "_"


class OriginKind(Enum):
    """Source kinds. Only spreadsheet files exist for now."""
    SPREADSHEET_FILE = "spreadsheet_file"


class Granularity(Enum):
    """Traversal level that produced a value."""
    CELL = "cell"
    ROW = "row"
    SHEET = "sheet"
    WORKBOOK = "workbook"


def column_name(column_index: int | None) -> str:
    """Render a 0-based column index as spreadsheet letters.

    Bijective base-26 (no zero digit): 0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ.
    Negative or unknown indices render as ``_``.
    """
    if column_index is None or column_index < 0:
        return UNKNOWN_COLUMN
    n = column_index + 1
    letters: list[str] = []
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(LETTERS[rem])
    return "".join(reversed(letters))


def row_col_str(row_index: int | None, column_index: int | None) -> str:
    """``B17`` style coordinates; row is rendered 1-based, unknown row as ``_``."""
    row = UNKNOWN_COLUMN if row_index is None else str(row_index + 1)
    return f"{column_name(column_index)}{row}"


@dataclass(frozen=True)
class Origin:
    """Immutable provenance descriptor attached to every Located value."""
    file_name: str | None = None
    sheet_name: str | None = None
    row_index: int | None = None  # 0-based
    column_index: int | None = None  # 0-based
    granularity: Granularity = Granularity.WORKBOOK
    kind: OriginKind = OriginKind.SPREADSHEET_FILE

    @staticmethod
    def for_file(file_name: str) -> Origin:
        return Origin(file_name=file_name, granularity=Granularity.WORKBOOK)

    def at_sheet(self, sheet_name: str) -> Origin:
        return replace(self, sheet_name=sheet_name, row_index=None, column_index=None,
                       granularity=Granularity.SHEET)

    def at_row(self, row_index: int) -> Origin:
        return replace(self, row_index=row_index, column_index=None, granularity=Granularity.ROW)

    def at_cell(self, column_index: int) -> Origin:
        return replace(self, column_index=column_index, granularity=Granularity.CELL)

    def coarsen(self, granularity: Granularity) -> Origin:
        """Drop coordinates finer than ``granularity``."""
        if granularity is Granularity.CELL:
            return self
        if granularity is Granularity.ROW:
            return replace(self, column_index=None, granularity=granularity)
        if granularity is Granularity.SHEET:
            return replace(self, row_index=None, column_index=None, granularity=granularity)
        return replace(self, sheet_name=None, row_index=None, column_index=None,
                       granularity=granularity)

    def __str__(self) -> str:
        return format_origin(self)


def format_origin(origin: Origin | None) -> str:
    """Render an origin for error messages; ``None`` renders as ``""``."""
    if origin is None:
        return ""
    if origin.kind is OriginKind.SPREADSHEET_FILE:
        if origin.sheet_name is None:
            return origin.file_name or ""
        if origin.row_index is None and origin.column_index is None:
            return origin.sheet_name
        return f"{origin.sheet_name}:{row_col_str(origin.row_index, origin.column_index)}"
    return ""  # pragma: no cover
