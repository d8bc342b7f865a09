from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm

from ..models.processing_result import FileStat

"""Per-file progress bar for batch checks (tqdm, TTY only).

Pipes and CI get no bar; the per-file log lines carry the same information.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Counts checked workbooks; the postfix shows ok/failed files and rows so far."""

    def __init__(self, total_files: int, *, enabled: bool | None = None) -> None:
        self.total_files = total_files
        self.ok = 0
        self.failed = 0
        self.rows = 0
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.bar: Any | None = None
        if self.enabled:
            self.bar = tqdm(total=total_files, desc="workbooks", unit="file", ascii=True, ncols=80)

    def start_file(self, path: Path) -> None:
        if self.bar is not None:
            self.bar.set_description(path.name[:24])

    def finish_file(self, stat: FileStat) -> None:
        if stat.status == "success":
            self.ok += 1
            self.rows += stat.rows
        else:
            self.failed += 1
        if self.bar is not None:
            self.bar.set_postfix(ok=self.ok, failed=self.failed, rows=self.rows, refresh=False)
            self.bar.update(1)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
