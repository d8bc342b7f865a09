"""sheetmap: spreadsheet grids -> validated, provenance-tagged records.

Read path: raw grid -> cell decoder -> grid normalizer -> mapify -> records.
Write path: records -> export -> row writer.
"""

from .errors import (
    ErrorCell,
    ExtractorProtocolError,
    FailedRowMapify,
    FailedSheetMapify,
    FormulaCell,
    InvalidColumnSpec,
    SpreadsheetError,
    UnknownCellType,
    ValidationFailure,
)
from .models.column_spec import REST, ColumnSpec, RestValidators
from .models.located import Located, unwrap
from .models.origin import Granularity, Origin, column_name

__all__ = [
    "ColumnSpec",
    "ErrorCell",
    "ExtractorProtocolError",
    "FailedRowMapify",
    "FailedSheetMapify",
    "FormulaCell",
    "Granularity",
    "InvalidColumnSpec",
    "Located",
    "Origin",
    "REST",
    "RestValidators",
    "SpreadsheetError",
    "UnknownCellType",
    "ValidationFailure",
    "column_name",
    "unwrap",
]
