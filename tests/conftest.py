# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import openpyxl
import pytest

from sheetmap.excel.raw import grid_from_rows
from sheetmap.logging.init import reset_logging
from sheetmap.models.origin import Origin
from sheetmap.services.grid import load_workbook


@pytest.fixture(autouse=True)
def _reset_logger():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def load_grid() -> Callable[..., Any]:
    """Load ``{sheet: [[values]]}`` through the decoder as file 'test.xlsx'."""
    def _load(sheets: dict[str, list[list[Any]]], settings=None):
        return load_workbook(Origin.for_file("test.xlsx"), grid_from_rows(sheets), settings)
    return _load


@pytest.fixture()
def make_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Write ``{sheet: [[values]]}`` to an .xlsx with openpyxl.

    Strings like "#DIV/0!" become error cells and "=..." formula cells,
    following openpyxl's own value binding.
    """
    def _make(name: str, sheets: dict[str, list[list[Any]]]) -> Path:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for sheet_name, rows in sheets.items():
            ws = wb.create_sheet(sheet_name)
            for r, row in enumerate(rows, start=1):
                for c, value in enumerate(row, start=1):
                    if value is not None:
                        ws.cell(row=r, column=c, value=value)
        path = tmp_path / name
        wb.save(path)
        return path
    return _make


@pytest.fixture()
def sample_config_yaml() -> str:
    return """decode:
  error_cell_handling: as_number
  formula_cell_handling: error
keep_titles: false
target_sheets: [People]
error_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetmap.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
