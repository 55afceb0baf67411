# tests/test_cli.py

import pytest

from core.mark_entry import MarkEntrySession
from core.models import ExamDescriptor
from ui.cli import CellEdit, format_subject_for_display, parse_cell_edit


@pytest.fixture
def session(api, sample_subject, term_grid):
    return MarkEntrySession(api, sample_subject, ExamDescriptor("5", "TERM 1"), term_grid, "3")


def test_parse_by_component_key(session):
    assert parse_cell_edit("2 mid_term 55", session) == CellEdit("102", "mid_term", "55")


def test_parse_by_label_with_spaces(session):
    assert parse_cell_edit("3 Mid Term 61", session) == CellEdit("103", "mid_term", "61")


def test_dash_clears(session):
    assert parse_cell_edit("1 ma -", session).value == ""


@pytest.mark.parametrize(
    "command, message",
    [
        ("1 ma", "Use:"),
        ("42 ma 3", "No student with roll number 42"),
        ("1 ga 3", "Unknown component"),
    ],
)
def test_parse_errors(session, command, message):
    with pytest.raises(ValueError, match=message):
        parse_cell_edit(command, session)


def test_format_subject(sample_subject):
    assert format_subject_for_display(sample_subject) == "Science (Class IX-A)"
