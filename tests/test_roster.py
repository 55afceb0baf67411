# tests/test_roster.py

import asyncio

import httpx
import pytest

from core.roster import load_roster
from utils.error_handler import RosterLoadFailed


def test_load_roster_keeps_server_order(server, api, student_records):
    server.on("student_list", {"status": "success", "data": list(reversed(student_records))})

    roster = asyncio.run(load_roster(api, "IX", "A", "3"))

    assert [student.id for student in roster] == ["103", "102", "101"]
    assert roster[0].admission_number == "A-1003"
    assert roster[0].roll_number == "3"


@pytest.mark.parametrize(
    "response",
    [
        {"status": "error", "message": "No data"},
        {"status": "success", "data": "none"},
        httpx.Response(500),
        httpx.Response(200, text="not json"),
    ],
)
def test_load_roster_failures(server, api, response):
    server.on("student_list", response)

    with pytest.raises(RosterLoadFailed):
        asyncio.run(load_roster(api, "IX", "A", "3"))


def test_load_roster_rejects_partial_data(server, api, student_records):
    server.on("student_list", {"status": "success", "data": student_records + [{"student_name": "Ghost"}]})

    with pytest.raises(RosterLoadFailed, match="Invalid student data"):
        asyncio.run(load_roster(api, "IX", "A", "3"))
