from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} sheets={sheets}
    rows={rows} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2023, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2023, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_sheets=2, total_rows=10,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 sheets=2 rows=10 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"sheets={result.total_sheets} "
        f"rows={result.total_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
