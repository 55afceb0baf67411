# tests/conftest.py

import inspect
import json

import httpx
import pytest

from core.grading_schema import derive_schema
from core.grid import GridState
from core.models import AssignedSubject, ExamDescriptor, Student
from services.school_api import SchoolApiService
from session import SessionContext

API_URL = "https://school.test/api.php"


class FakeSchoolServer:
    """Answers task calls with canned bodies and records every request.

    A registered response may be a JSON-able body, an httpx.Response, an
    exception to raise, or a (possibly async) callable taking the payload.
    """

    def __init__(self):
        self.responses = {}
        self.requests = []

    def on(self, task, response):
        self.responses[task] = response

    def calls(self, task):
        return [payload for name, payload in self.requests if name == task]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        task = request.url.params.get("task")
        payload = json.loads(request.content or b"{}")
        self.requests.append((task, payload))

        response = self.responses.get(task)
        if callable(response):
            response = response(payload)
            if inspect.isawaitable(response):
                response = await response
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        if response is None:
            return httpx.Response(404, text="unknown task")
        return httpx.Response(200, json=response)

    def api(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return SchoolApiService(client, api_url=API_URL)


@pytest.fixture
def server():
    return FakeSchoolServer()


@pytest.fixture
def api(server):
    return server.api()


@pytest.fixture
def student_records():
    return [
        {"id": "101", "student_admission": "A-1001", "student_roll": "1", "student_name": "Aarav Singh"},
        {"id": "102", "student_admission": "A-1002", "student_roll": "2", "student_name": "Diya Sharma"},
        {"id": "103", "student_admission": "A-1003", "student_roll": "3", "student_name": "Kabir Verma"},
    ]


@pytest.fixture
def students(student_records):
    return [Student.from_api(record) for record in student_records]


@pytest.fixture
def sample_subject():
    return AssignedSubject(class_name="IX", section_name="A", subject_id="17", subject_name="Science")


@pytest.fixture
def term_exam():
    return ExamDescriptor(identifier="5", display_name="TERM 1")


@pytest.fixture
def unit_test_exam():
    return ExamDescriptor(identifier="2", display_name="UNIT TEST 2")


@pytest.fixture
def term_schema():
    return derive_schema("TERM 1", "IX")


@pytest.fixture
def term_grid(term_schema, students):
    return GridState(term_schema, students)


@pytest.fixture
def session_context():
    return SessionContext(emp_id="EMP-9", branch_id="3")
