# tests/test_main.py

import asyncio
import time

import pytest

import main
from core.mark_entry import MarkEntryEngine
from core.models import CellSaveStatus


@pytest.fixture
def school(server, student_records):
    server.on("get_exam", [{"id": "5", "exam_name": "TERM 1"}])
    server.on("assigned_subject", {"status": "error"})
    server.on("marks_permission", {"can_edit": "YES"})
    server.on("student_list", {"status": "success", "data": student_records})
    server.on("student_marks", {"status": "error"})
    return server


def feed_commands(monkeypatch, commands):
    """Replaces the terminal prompt; each command waits a little so earlier saves finish."""
    queue = list(commands)

    def prompt():
        time.sleep(0.05)
        return queue.pop(0)

    monkeypatch.setattr(main.cli, "prompt_command", prompt)


def run_loop(engine, subject, exam):
    async def scenario():
        await engine.bootstrap()
        await main.edit_loop(engine, subject, exam)

    asyncio.run(scenario())


def test_failed_save_then_clear_resets_cell(monkeypatch, school, session_context, sample_subject, term_exam):
    school.on("save_marks", {"status": "error", "message": "Marks locked"})
    feed_commands(monkeypatch, ["1 ma 4", "1 ma -", "q"])
    engine = MarkEntryEngine(school.api(), session_context)

    run_loop(engine, sample_subject, term_exam)

    session = engine.current
    assert session.grid.get("101", "ma") == ""
    assert session.status("101", "ma") is CellSaveStatus.IDLE
    assert len(school.calls("save_marks")) == 1


def test_commands_save_cells_and_quit_waits_for_saves(monkeypatch, school, session_context, sample_subject, term_exam):
    school.on("save_marks", {"status": "success"})
    feed_commands(monkeypatch, ["", "2 Mid Term 61", "9 ma 3", "3 se 99", "3 se 4", "q"])
    engine = MarkEntryEngine(school.api(), session_context)

    run_loop(engine, sample_subject, term_exam)

    rows = engine.current.grid.rows()
    assert rows["102"]["mid_term"] == "61"
    assert rows["103"]["se"] == "4"
    assert [(call["student_id"], call["col_name"]) for call in school.calls("save_marks")] == [
        ("102", "mid_term"),
        ("103", "se"),
    ]
