from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import openpyxl
import pandas as pd
import pytest
from openpyxl.utils.exceptions import InvalidFileException

from sheetmap.excel.raw import CellType, RawCell
from sheetmap.excel.reader import ERROR_CODES, _raw_cell, open_workbook, read_excel_frames, workbook_from_frames
from sheetmap.models.origin import Origin
from sheetmap.services.grid import load_workbook, unwrap_sheet


def _make_excel(tmp_path: Path, name: str, sheets: dict[str, list[list[object]]]) -> Path:
    p = tmp_path / name
    with pd.ExcelWriter(p) as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return p


def test_open_workbook_cell_types(make_xlsx):
    """Test the openpyxl data_type to CellType mapping."""
    path = make_xlsx("types.xlsx", {
        "S": [["text", 1.5, 4, True, datetime(2020, 1, 2, 3, 4), "=1+1", "#DIV/0!", None, "tail"]],
    })
    with open_workbook(path) as wb:
        sheets = list(wb.sheets())
        assert [name for name, _ in sheets] == ["S"]
        row = sheets[0][1].row(0)
        types = [row.cell(i).cell_type for i in range(row.last_cell_index())]
    assert types == [
        CellType.STRING, CellType.NUMERIC, CellType.NUMERIC, CellType.BOOLEAN, CellType.DATE,
        CellType.FORMULA, CellType.ERROR, CellType.BLANK, CellType.STRING,
    ]


def test_open_workbook_formula_text_and_error_code(make_xlsx):
    """Formula text loses its "=", error text becomes its code."""
    path = make_xlsx("fe.xlsx", {"S": [["=SUM(A2:A3)", "#N/A"]]})
    with open_workbook(path) as wb:
        row = next(wb.sheets())[1].row(0)
        assert row.cell(0).value == "SUM(A2:A3)"
        assert row.cell(1).value == ERROR_CODES["#N/A"] == 42


def test_open_workbook_target_sheets(make_xlsx):
    """Test that target_sheets filters the sheets yielded."""
    path = make_xlsx("multi.xlsx", {"A": [[1]], "B": [[2]]})
    with open_workbook(path, target_sheets=["B"]) as wb:
        assert [name for name, _ in wb.sheets()] == ["B"]


def test_open_workbook_row_bounds(make_xlsx):
    """Test row count, last populated column and out-of-range access."""
    path = make_xlsx("short.xlsx", {"S": [["a", "b", "c"], ["x"]]})
    with open_workbook(path) as wb:
        sheet = next(wb.sheets())[1]
        assert sheet.row_count() == 2
        assert sheet.row(1).last_cell_index() == 1
        assert sheet.row(5) is None
        assert sheet.row(0).cell(10) is None


def test_read_frames_and_decode(tmp_path: Path):
    """Test that pandas frames decode like openpyxl cells."""
    excel = _make_excel(tmp_path, "people.xlsx", {
        "People": [["id", "name", "joined"], [1, "Ann", datetime(2020, 1, 1)], [2, None, None]],
    })
    frames = read_excel_frames(excel)
    workbook = load_workbook(Origin.for_file("people.xlsx"), workbook_from_frames(frames))
    rows = unwrap_sheet(workbook.value[0])
    assert rows[0] == ["id", "name", "joined"]
    assert rows[1] == [1, "Ann", datetime(2020, 1, 1, tzinfo=UTC)]
    assert type(rows[1][0]) is int
    assert rows[2] == [2, None, None]


def test_read_frames_keep_na_strings(tmp_path: Path):
    """Strings listed in keep_na_strings stay text."""
    excel = _make_excel(tmp_path, "na.xlsx", {"S": [["code"], ["NA"], ["N/A"]]})
    default = workbook_from_frames(read_excel_frames(excel))
    kept = workbook_from_frames(read_excel_frames(excel, keep_na_strings=["NA"]))
    origin = Origin.for_file("na.xlsx")
    assert unwrap_sheet(load_workbook(origin, default).value[0]) == [["code"], [None], [None]]
    assert unwrap_sheet(load_workbook(origin, kept).value[0]) == [["code"], ["NA"], [None]]


def test_read_frames_target_sheets(tmp_path: Path):
    """Only the requested sheets are read."""
    excel = _make_excel(tmp_path, "multi.xlsx", {"A": [["T"], [1]], "B": [["T"], [2]]})
    assert set(read_excel_frames(excel)) == {"A", "B"}
    assert set(read_excel_frames(excel, target_sheets=["B"])) == {"B"}


@pytest.mark.parametrize("text, expected", [("#GETTING_DATA", 43), ("#SPILL!", "#SPILL!"), ("#CALC!", "#CALC!")])
def test_error_text_without_numeric_code_is_kept(text, expected):
    """Errors missing from ERROR_CODES carry their text, never a made-up code."""
    cell = openpyxl.Workbook().active.cell(row=1, column=1, value=text)
    cell.data_type = "e"
    assert _raw_cell(cell) == RawCell(CellType.ERROR, expected)


def test_open_workbook_rejects_zip_without_workbook_parts(tmp_path: Path):
    """openpyxl's KeyError for a missing archive part becomes InvalidFileException."""
    import zipfile

    fake = tmp_path / "fake.xlsx"
    with zipfile.ZipFile(fake, "w") as archive:
        archive.writestr("readme.txt", "hello")
    with pytest.raises(InvalidFileException, match="not a workbook archive"):
        with open_workbook(fake):
            pass
