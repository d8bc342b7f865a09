from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from ..errors import SpreadsheetError, location, root_cause

"""ErrorRecord model for error logging.

One record per failed load/mapify, pointing at the root cause. ``cell`` is the
display location (``Sheet1:B3``); it is ``""`` when no location is known.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: spreadsheet file being processed
        sheet: sheet name, "" for workbook-level failures
        cell: rendered origin of the root cause (e.g. "Sheet1:B3")
        error_type: root cause kind in UPPER_SNAKE_CASE format
        message: root cause message
    """
    timestamp: str
    file: str
    sheet: str
    cell: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, cell: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            cell=cell,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_exception(file: str, exc: BaseException) -> ErrorRecord:
        """Describe the root cause of a (possibly wrapped) failure."""
        cause = root_cause(exc)
        sheet = ""
        current: BaseException | None = exc
        while current is not None:
            if isinstance(current, SpreadsheetError) and current.origin is not None:
                sheet = current.origin.sheet_name or sheet
            current = current.__cause__
        if isinstance(cause, SpreadsheetError):
            error_type, message = cause.kind, cause.message
        else:
            error_type, message = type(cause).__name__.upper(), str(cause)
        return ErrorRecord.create(file, sheet, location(exc), error_type, message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
