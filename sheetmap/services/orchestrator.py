from __future__ import annotations

import logging
import time
import zipfile
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from openpyxl.utils.exceptions import InvalidFileException

from ..errors import SpreadsheetError, describe
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import LoaderConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import FileStat, ProcessingResult
from .grid import data_rows, is_blank_row, load_workbook_file, unwrap_sheet
from .progress import ProgressTracker

"""Batch orchestration: load every workbook, surface the first failure per file.

Each file is loaded with the configured DecodeSettings and every cell is
realized, so error/formula cells rejected by the settings fail the file with a
located root cause. Failures are logged, appended to the error log and counted;
they never stop the batch.
"""

__all__ = [
    "WORKBOOK_SUFFIXES",
    "ProcessingError",
    "scan_workbooks",
    "check_workbook",
    "process_all",
]

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}

# Failures that concern a single file; anything else is a bug and propagates.
_FILE_ERRORS = (SpreadsheetError, OSError, zipfile.BadZipFile, InvalidFileException)


class ProcessingError(Exception):
    """Fatal batch error (bad input paths)."""


def scan_workbooks(paths: Iterable[Path]) -> list[Path]:
    """Expand directories (non-recursive) into workbook files; files pass through.

    Raises:
        ProcessingError: a path does not exist
    """
    found: list[Path] = []
    for path in paths:
        if not path.exists():
            raise ProcessingError(f"path not found: {path}")
        if path.is_dir():
            try:
                found.extend(sorted(p for p in path.iterdir() if p.is_file() and p.suffix in WORKBOOK_SUFFIXES))
            except OSError as e:
                raise ProcessingError(f"error reading directory {path}: {e}") from e
        else:
            found.append(path)
    return found


def check_workbook(path: Path, config: LoaderConfig) -> FileStat:
    """Load and fully realize one workbook; rows counts data rows (see ``keep_titles``).

    Raises:
        SpreadsheetError: first undecodable cell (location attached)
    """
    started = time.perf_counter()
    workbook = load_workbook_file(path, config.decode, config.target_sheets)
    sheets = workbook.value
    rows = 0
    for sheet in sheets:
        unwrap_sheet(sheet)
        rows += sum(1 for r in data_rows(sheet, config.keep_titles) if not is_blank_row(r))
    return FileStat(
        file_name=path.name,
        status="success",
        sheets=len(sheets),
        rows=rows,
        elapsed_seconds=time.perf_counter() - started,
    )


def process_all(
    paths: Iterable[Path], config: LoaderConfig, error_log: ErrorLogBuffer | None = None
) -> ProcessingResult:
    start_time = datetime.now(UTC)
    files = scan_workbooks(paths)
    if error_log is None:
        error_log = ErrorLogBuffer(config.error_log_dir)

    stats: list[FileStat] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            started = time.perf_counter()
            try:
                stat = check_workbook(path, config)
            except _FILE_ERRORS as e:
                message = describe(e)
                logger.error(f"{path.name}: {message}")
                error_log.append(ErrorRecord.from_exception(path.name, e))
                stat = FileStat(
                    file_name=path.name,
                    status="failed",
                    sheets=0,
                    rows=0,
                    elapsed_seconds=time.perf_counter() - started,
                    error=message,
                )
            else:
                logger.info(f"{path.name}: sheets={stat.sheets} rows={stat.rows}")
            stats.append(stat)
            progress.finish_file(stat)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    ok = [s for s in stats if s.status == "success"]
    return ProcessingResult(
        success_files=len(ok),
        failed_files=len(stats) - len(ok),
        total_sheets=sum(s.sheets for s in ok),
        total_rows=sum(s.rows for s in ok),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=stats,
    )
