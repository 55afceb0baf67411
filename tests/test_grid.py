# tests/test_grid.py

import pytest

from core.grading_schema import derive_schema
from core.grid import GridState


def test_new_grid_has_an_empty_cell_per_student_and_component(term_grid, students, term_schema):
    assert term_grid.cell_count == len(students) * len(term_schema.components)
    assert all(value == "" for row in term_grid.rows().values() for value in row.values())


def test_set_and_get(term_grid):
    term_grid.set("101", "mid_term", "72")

    assert term_grid.get("101", "mid_term") == "72"
    assert term_grid.get("102", "mid_term") == ""


def test_unknown_cells_raise(term_grid):
    with pytest.raises(KeyError):
        term_grid.get("999", "ma")
    with pytest.raises(KeyError):
        term_grid.set("101", "ga", "4")


def test_rows_is_a_copy(term_grid):
    rows = term_grid.rows()
    rows["101"]["ma"] = "5"

    assert term_grid.get("101", "ma") == ""


def test_student_lookups(term_grid):
    assert term_grid.find_by_roll("2").name == "Diya Sharma"
    assert term_grid.find_by_roll("99") is None
    assert term_grid.student("103").roll_number == "3"
    assert term_grid.has_student("101")
    assert not term_grid.has_cell("101", "ut1")


def test_grid_without_components(students):
    grid = GridState(derive_schema("HALF YEARLY", "IX"), students)

    assert len(grid) == 3
    assert grid.cell_count == 0
