# tests/test_catalog.py

import asyncio

import httpx
import pytest

from core.catalog import load_assigned_subjects, load_edit_permission, load_exams
from core.models import AssignedSubject, ExamDescriptor
from utils.error_handler import APIError


def test_load_exams_from_bare_list(server, api):
    server.on("get_exam", [{"id": "1", "exam_name": "UNIT TEST 1"}, "TERM 1", {"id": "9", "exam_name": ""}])

    exams = asyncio.run(load_exams(api, "3"))

    assert exams == [ExamDescriptor("1", "UNIT TEST 1"), ExamDescriptor("", "TERM 1")]


def test_load_exams_from_envelope(server, api):
    server.on("get_exam", {"status": "success", "data": [{"exam_id": 4, "name": "TERM 2"}]})

    exams = asyncio.run(load_exams(api, "3"))

    assert exams == [ExamDescriptor("4", "TERM 2")]


def test_load_exams_unexpected_payload_is_empty(server, api):
    server.on("get_exam", {"status": "error"})

    assert asyncio.run(load_exams(api, "3")) == []


def test_load_exams_network_failure_propagates(server, api):
    server.on("get_exam", httpx.Response(503))

    with pytest.raises(APIError):
        asyncio.run(load_exams(api, "3"))


def test_load_assigned_subjects(server, api):
    server.on("assigned_subject", {
        "status": "success",
        "data": [{"class_name": "IX", "section_name": "A", "subject_id": "17", "subject_name": "Science"}],
    })

    subjects = asyncio.run(load_assigned_subjects(api, "EMP-9", "3"))

    assert subjects == [AssignedSubject("IX", "A", "17", "Science")]
    assert server.calls("assigned_subject") == [{"emp_id": "EMP-9", "branch_id": "3"}]


@pytest.mark.parametrize("body", [{"status": "error", "data": []}, {"status": "success", "data": None}, []])
def test_load_assigned_subjects_without_success_is_empty(server, api, body):
    server.on("assigned_subject", body)

    assert asyncio.run(load_assigned_subjects(api, "EMP-9", "3")) == []


@pytest.mark.parametrize(
    "response, expected",
    [
        ({"can_edit": "YES"}, True),
        ({"can_edit": "NO"}, False),
        ({}, False),
        (httpx.Response(500), False),
    ],
)
def test_load_edit_permission(server, api, response, expected):
    server.on("marks_permission", response)

    assert asyncio.run(load_edit_permission(api, "EMP-9")) is expected


def test_load_assigned_subjects_network_failure_is_empty(server, api):
    server.on("assigned_subject", httpx.Response(500))

    assert asyncio.run(load_assigned_subjects(api, "EMP-9", "3")) == []
