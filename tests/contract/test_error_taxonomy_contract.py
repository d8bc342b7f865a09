from __future__ import annotations

import pytest

from sheetmap.errors import (
    ErrorCell,
    ExtractorProtocolError,
    FailedRowMapify,
    FailedSheetMapify,
    FormulaCell,
    InvalidColumnSpec,
    SpreadsheetError,
    UnknownCellType,
    UnsupportedValueError,
    ValidationFailure,
)

"""Error kinds are part of the error log format; keep them stable."""

KINDS = {
    ErrorCell: "ERROR_CELL",
    FormulaCell: "FORMULA_CELL",
    UnknownCellType: "UNKNOWN_CELL_TYPE",
    ValidationFailure: "VALIDATION_FAILURE",
    FailedRowMapify: "FAILED_ROW_MAPIFY",
    FailedSheetMapify: "FAILED_SHEET_MAPIFY",
    InvalidColumnSpec: "INVALID_COLUMN_SPEC",
    ExtractorProtocolError: "EXTRACTOR_PROTOCOL",
    UnsupportedValueError: "UNSUPPORTED_VALUE",
}


@pytest.mark.parametrize("cls, kind", KINDS.items())
def test_kinds_are_stable(cls, kind):
    """Error kinds written to the error log must not change."""
    assert cls.kind == kind
    assert issubclass(cls, SpreadsheetError)


def test_message_without_origin_has_no_prefix():
    """Test that an error without origin renders as its bare message."""
    assert str(ValidationFailure("bad value")) == "bad value"
    assert ValidationFailure("bad value").location == ""
