from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for batch workbook checks.

Aggregated by services.orchestrator and rendered by services.summary.
"""

__all__ = [
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    sheets: int  # sheets loaded
    rows: int  # non-blank data rows across loaded sheets
    elapsed_seconds: float
    error: str | None = None  # display line of the root cause


@dataclass(frozen=True)
class ProcessingResult:
    success_files: int
    failed_files: int
    total_sheets: int
    total_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
