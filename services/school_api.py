"""Wrapper for the school's task-dispatch API (api.php?task=...)."""

from typing import Any, Dict, Optional

import httpx

import config
from utils.logger import get_logger
from utils.error_handler import APIError

logger = get_logger()

def _branch_as_int(branch_id: str) -> Optional[int]:
    """student_list expects a numeric branch id, or null when it is not one."""
    try:
        return int(branch_id)
    except (TypeError, ValueError):
        return None

class SchoolApiService:
    """Provides one coroutine per remote task.

    Every method returns the decoded JSON body untouched; interpreting the
    envelope is left to the caller. Transport failures, non-2xx responses and
    bodies that are not JSON raise APIError. Nothing is retried.
    """

    def __init__(self, client: httpx.AsyncClient, api_url: str = config.API_BASE_URL):
        self.client = client
        self.api_url = api_url
        logger.debug(f"SchoolApiService initialized for {api_url}")

    async def _dispatch(self, task: str, payload: Dict[str, Any]) -> Any:
        logger.debug(f"POST task={task} payload={payload}")
        try:
            response = await self.client.post(self.api_url, params={"task": task}, json=payload)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling task '{task}': {e}", exc_info=config.DEBUG)
            raise APIError(f"Request timed out: {e}", task=task) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Task '{task}' failed with HTTP {status}: {e.response.text[:200]}", exc_info=config.DEBUG)
            raise APIError(f"Server returned HTTP {status}", status_code=status, task=task) from e
        except httpx.RequestError as e:
            logger.error(f"Network error calling task '{task}': {type(e).__name__}: {e}", exc_info=config.DEBUG)
            raise APIError(f"Network error: {e}", task=task) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Task '{task}' returned a non-JSON body: {response.text[:200]!r}", exc_info=config.DEBUG)
            raise APIError("Invalid server response", status_code=response.status_code, task=task) from e

        if config.DEBUG:
            logger.debug(f"Task '{task}' response: {str(body)[:500]}")
        return body

    async def fetch_exams(self, branch_id: str) -> Any:
        """Exam list for a branch; a bare array or a {data: [...]} envelope."""
        logger.info(f"Fetching exam list for branch {branch_id}...")
        return await self._dispatch("get_exam", {"branch_id": branch_id})

    async def fetch_assigned_subjects(self, emp_id: str, branch_id: str) -> Any:
        """Subjects (class/section/subject) taught by a teacher."""
        logger.info(f"Fetching assigned subjects for teacher {emp_id}...")
        return await self._dispatch("assigned_subject", {"emp_id": emp_id, "branch_id": branch_id})

    async def fetch_marks_permission(self, emp_id: str) -> Any:
        logger.info(f"Checking marks permission for teacher {emp_id}...")
        return await self._dispatch("marks_permission", {"emp_id": emp_id})

    async def fetch_student_list(self, class_name: str, section_name: str, branch_id: str) -> Any:
        """Roster of one class/section."""
        logger.info(f"Fetching students for class {class_name}-{section_name}...")
        return await self._dispatch("student_list", {
            "student_class": class_name,
            "student_section": section_name,
            "branch_id": _branch_as_int(branch_id),
        })

    async def fetch_student_marks(
        self,
        class_name: str,
        section_name: str,
        subject_id: str,
        exam_name: str,
        branch_id: str,
    ) -> Any:
        """Previously saved marks. The server keys exams by display name."""
        logger.info(f"Fetching existing marks for {class_name}-{section_name}, subject {subject_id}, exam '{exam_name}'...")
        return await self._dispatch("student_marks", {
            "student_class": class_name,
            "student_section": section_name,
            "subject_id": subject_id,
            "exam_id": exam_name,
            "branch_id": branch_id,
        })

    async def save_mark(
        self,
        student_id: str,
        admission_number: str,
        term: str,
        subject_id: str,
        component: str,
        value: int | float,
        branch_id: str,
    ) -> Any:
        """Persists one cell. Marks are filed per term bucket, not per exam."""
        logger.info(f"Saving {component}={value} for student {student_id} ({term}, subject {subject_id})")
        return await self._dispatch("save_marks", {
            "student_id": student_id,
            "student_admission": admission_number,
            "term": term,
            "subject": subject_id,
            "col_name": component,
            "value": value,
            "branch_id": branch_id,
        })
