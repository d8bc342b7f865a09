from __future__ import annotations

from typing import Any

from .models.origin import Origin, format_origin

"""Error taxonomy for decode / mapify / extractor failures.

Every error carries the Origin of the value being processed (or a coarsened
one when the failure spans several cells) and a stable UPPER_SNAKE ``kind``.
Wrapping errors chain the original failure through ``__cause__``.
"""

__all__ = [
    "SpreadsheetError",
    "ErrorCell",
    "FormulaCell",
    "UnknownCellType",
    "ValidationFailure",
    "FailedRowMapify",
    "FailedSheetMapify",
    "InvalidColumnSpec",
    "ExtractorProtocolError",
    "UnsupportedValueError",
    "ConfigError",
    "root_cause",
    "location",
    "describe",
]


class SpreadsheetError(Exception):
    """Base class. ``origin`` may be None when no location is determinable."""
    kind = "SPREADSHEET_ERROR"

    def __init__(self, message: str, origin: Origin | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.origin = origin

    @property
    def location(self) -> str:
        return format_origin(self.origin)

    def __str__(self) -> str:
        loc = self.location
        return f"{loc} {self.message}" if loc else self.message


class ErrorCell(SpreadsheetError):
    kind = "ERROR_CELL"


class FormulaCell(SpreadsheetError):
    kind = "FORMULA_CELL"


class UnknownCellType(SpreadsheetError):
    """Collaborator handed over a cell kind outside the closed set. Not recoverable."""
    kind = "UNKNOWN_CELL_TYPE"


class ValidationFailure(SpreadsheetError):
    kind = "VALIDATION_FAILURE"


class FailedRowMapify(SpreadsheetError):
    kind = "FAILED_ROW_MAPIFY"


class FailedSheetMapify(SpreadsheetError):
    kind = "FAILED_SHEET_MAPIFY"


class InvalidColumnSpec(SpreadsheetError):
    kind = "INVALID_COLUMN_SPEC"


class UnsupportedValueError(SpreadsheetError):
    """A value outside CellValue reached the writer."""
    kind = "UNSUPPORTED_VALUE"


class ExtractorProtocolError(SpreadsheetError):
    """An extractor returned a state whose message is not FOUND."""
    kind = "EXTRACTOR_PROTOCOL"

    def __init__(self, message: str, extractor: Any, state: Any) -> None:
        super().__init__(message, origin=None)
        self.extractor = extractor
        self.state = state


def root_cause(exc: BaseException) -> BaseException:
    """Innermost exception of the ``__cause__`` chain."""
    current = exc
    while current.__cause__ is not None:
        current = current.__cause__
    return current


def location(exc: BaseException) -> str:
    """Most precise location string available along the cause chain."""
    current: BaseException | None = exc
    best = ""
    while current is not None:
        if isinstance(current, SpreadsheetError) and current.origin is not None:
            best = current.location
        current = current.__cause__
    return best


class ConfigError(Exception):
    """Invalid or unreadable configuration (decode settings, YAML file)."""


def describe(exc: BaseException) -> str:
    """One line for display: most precise location + root cause message."""
    cause = root_cause(exc)
    message = cause.message if isinstance(cause, SpreadsheetError) else str(cause)
    loc = location(exc)
    return f"{loc}: {message}" if loc else message
