from __future__ import annotations

import pytest

from sheetmap.models.located import Located, unwrap
from sheetmap.models.origin import Granularity, Origin, column_name, format_origin, row_col_str

"""Unit tests for Origin formatting and refinement."""


@pytest.mark.parametrize(
    "index, expected",
    [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA"), (16383, "XFD")],
)
def test_column_name_letters(index, expected):
    """Test bijective base-26 column letters."""
    assert column_name(index) == expected


@pytest.mark.parametrize("index", [-1, -26, None])
def test_column_name_unknown(index):
    """Negative or missing columns render "_"."""
    assert column_name(index) == "_"


def test_column_name_is_injective_over_first_thousands():
    """Test that no two columns share letters."""
    names = [column_name(i) for i in range(5000)]
    assert len(set(names)) == len(names)


def test_row_col_str_is_one_based():
    """Rows render one-based."""
    assert row_col_str(16, 1) == "B17"
    assert row_col_str(0, None) == "_1"


def test_format_origin_cell():
    """Test rendering of a cell origin."""
    origin = Origin.for_file("book.xlsx").at_sheet("Sheet1").at_row(2).at_cell(1)
    assert origin.granularity is Granularity.CELL
    assert format_origin(origin) == "Sheet1:B3"
    assert str(origin) == "Sheet1:B3"


def test_format_origin_row_and_sheet():
    """Test rendering of row and sheet origins."""
    row = Origin.for_file("book.xlsx").at_sheet("Data").at_row(9)
    assert format_origin(row) == "Data:_10"
    assert format_origin(row.coarsen(Granularity.SHEET)) == "Data"


def test_format_origin_none_and_workbook():
    """No origin renders empty, a workbook origin as its file."""
    assert format_origin(None) == ""
    assert format_origin(Origin.for_file("book.xlsx")) == "book.xlsx"


def test_coarsen_drops_finer_coordinates():
    """Test that coarsening clears finer coordinates."""
    cell = Origin.for_file("f.xlsx").at_sheet("S").at_row(3).at_cell(4)
    row = cell.coarsen(Granularity.ROW)
    assert (row.row_index, row.column_index, row.granularity) == (3, None, Granularity.ROW)
    sheet = cell.coarsen(Granularity.SHEET)
    assert (sheet.sheet_name, sheet.row_index) == ("S", None)
    book = cell.coarsen(Granularity.WORKBOOK)
    assert (book.file_name, book.sheet_name) == ("f.xlsx", None)
    # original is untouched
    assert cell.column_index == 4


def test_located_unwrap():
    """unwrap accepts Located and bare values."""
    data = Located(42, Origin.for_file("f.xlsx"))
    assert data.unwrap() == 42
    assert unwrap(data) == 42
    assert unwrap("bare") == "bare"
    assert data.with_value(43).origin is data.origin
