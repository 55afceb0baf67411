"""Loads what a teacher can pick from: exams, assigned subjects, and edit permission."""

from typing import Any, List

import config
from core.models import AssignedSubject, ExamDescriptor
from services.school_api import SchoolApiService
from utils.logger import get_logger
from utils.error_handler import APIError

logger = get_logger()

def _is_success(body: Any) -> bool:
    return isinstance(body, dict) and body.get("status") == config.SUCCESS_STATUS

async def load_exams(api: SchoolApiService, branch_id: str) -> List[ExamDescriptor]:
    """Fetches and normalizes the exam list, dropping unnamed entries.

    Raises:
        APIError: If the exam list cannot be fetched.
    """
    body = await api.fetch_exams(branch_id)
    if isinstance(body, list):
        items = body
    elif isinstance(body, dict) and isinstance(body.get("data"), list):
        items = body["data"]
    else:
        logger.warning(f"Unexpected exam list payload: {str(body)[:200]}")
        items = []

    exams = [ExamDescriptor.from_api(item) for item in items]
    exams = [exam for exam in exams if exam.display_name]
    logger.info(f"Loaded {len(exams)} exams for branch {branch_id}.")
    return exams

async def load_assigned_subjects(api: SchoolApiService, emp_id: str, branch_id: str) -> List[AssignedSubject]:
    """Teaching assignments of a teacher; empty unless the server reports success."""
    try:
        body = await api.fetch_assigned_subjects(emp_id, branch_id)
    except APIError as e:
        logger.warning(f"Assigned subjects could not be fetched for teacher {emp_id}: {e}")
        return []
    if not _is_success(body) or not isinstance(body.get("data"), list):
        logger.info(f"No assigned subjects returned for teacher {emp_id}.")
        return []

    subjects = [AssignedSubject.from_api(item) for item in body["data"] if isinstance(item, dict)]
    logger.info(f"Loaded {len(subjects)} assigned subjects for teacher {emp_id}.")
    return subjects

async def load_edit_permission(api: SchoolApiService, emp_id: str) -> bool:
    """True only when the server explicitly grants editing. Failures mean view-only."""
    try:
        body = await api.fetch_marks_permission(emp_id)
    except APIError as e:
        logger.warning(f"Marks permission check failed, falling back to view-only: {e}")
        return False
    can_edit = isinstance(body, dict) and body.get("can_edit") == "YES"
    logger.info(f"Teacher {emp_id} can edit marks: {can_edit}")
    return can_edit
