"""Loads the student list of a class/section."""

from typing import List

import config
from core.models import Student
from services.school_api import SchoolApiService
from utils.logger import get_logger
from utils.error_handler import APIError, RosterLoadFailed

logger = get_logger()

async def load_roster(api: SchoolApiService, class_name: str, section_name: str, branch_id: str) -> List[Student]:
    """Fetches the roster in server order. All or nothing: no partial lists.

    Args:
        api: The school API service.
        class_name: Class, e.g. "IX".
        section_name: Section, e.g. "A".
        branch_id: Active branch id.

    Returns:
        List[Student]: Students exactly as the server ordered them.

    Raises:
        RosterLoadFailed: On network errors, a non-success envelope, or malformed records.
    """
    task = "student_list"
    try:
        body = await api.fetch_student_list(class_name, section_name, branch_id)
    except APIError as e:
        logger.error(f"Roster load failed for {class_name}-{section_name}: {e}", exc_info=config.DEBUG)
        raise RosterLoadFailed(f"Failed to load students: {e}", status_code=e.status_code, task=task) from e

    if not isinstance(body, dict) or body.get("status") != config.SUCCESS_STATUS or not isinstance(body.get("data"), list):
        logger.error(f"No students returned for {class_name}-{section_name}: {str(body)[:200]}")
        raise RosterLoadFailed("No students found for this class", task=task)

    try:
        students = [Student.from_api(item) for item in body["data"]]
    except (AttributeError, ValueError) as e:
        logger.error(f"Malformed student record for {class_name}-{section_name}: {e}", exc_info=config.DEBUG)
        raise RosterLoadFailed("Invalid student data received", task=task) from e

    logger.info(f"Loaded {len(students)} students for {class_name}-{section_name}.")
    return students
