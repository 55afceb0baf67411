"""Builds the initial grid by merging saved marks into an all-empty grid."""

from dataclasses import replace
from typing import Any, Dict, List

import config
from core.grid import GridState
from core.models import GradingSchema, Student
from services.school_api import SchoolApiService
from utils.logger import get_logger
from utils.error_handler import APIError, MarkFetchFailed

logger = get_logger()

def is_blank_mark(value: Any) -> bool:
    """None, missing, 0 and "0" all mean 'not entered yet' in the school's data."""
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    return value == "0"

def format_mark(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def _coerce_max_scores(raw: Dict[str, Any]) -> Dict[str, float]:
    max_scores: Dict[str, float] = {}
    for key, value in raw.items():
        try:
            max_scores[str(key)] = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-numeric max score for '{key}': {value!r}")
    return max_scores

def apply_schema_override(schema: GradingSchema, body: Dict[str, Any]) -> GradingSchema:
    """Prefers server-declared columns, labels, maxima and term over the derived ones."""
    overrides: Dict[str, Any] = {}
    columns = body.get("columns")
    if isinstance(columns, list) and columns:
        overrides["components"] = tuple(str(column) for column in columns)
    if isinstance(body.get("column_labels"), dict):
        overrides["labels"] = {str(k): str(v) for k, v in body["column_labels"].items()}
    if isinstance(body.get("max_marks"), dict):
        overrides["max_scores"] = _coerce_max_scores(body["max_marks"])
    if body.get("term"):
        overrides["term"] = str(body["term"])

    if overrides:
        logger.info(f"Server supplied schema overrides: {sorted(overrides)}")
        return replace(schema, **overrides)
    return schema

async def fetch_existing_marks(
    api: SchoolApiService,
    class_name: str,
    section_name: str,
    subject_id: str,
    exam_name: str,
    branch_id: str,
) -> Dict[str, Any]:
    """Returns the marks envelope, or raises MarkFetchFailed when there is nothing usable."""
    task = "student_marks"
    try:
        body = await api.fetch_student_marks(class_name, section_name, subject_id, exam_name, branch_id)
    except APIError as e:
        raise MarkFetchFailed(f"Marks not reachable: {e}", status_code=e.status_code, task=task) from e

    if not isinstance(body, dict) or body.get("status") != config.SUCCESS_STATUS or not isinstance(body.get("data"), list):
        raise MarkFetchFailed("No marks returned", task=task)
    return body

async def reconcile(
    api: SchoolApiService,
    roster: List[Student],
    schema: GradingSchema,
    class_name: str,
    section_name: str,
    subject_id: str,
    exam_name: str,
    branch_id: str,
) -> GridState:
    """Builds a fully populated grid for the roster and schema.

    Any failure to fetch marks is the normal 'nothing graded yet' case and
    leaves the grid empty. When the server declares its own columns the
    returned grid (and its `schema`) follow the server instead.

    Returns:
        GridState: One cell per student and component, never fewer.
    """
    try:
        body = await fetch_existing_marks(api, class_name, section_name, subject_id, exam_name, branch_id)
    except MarkFetchFailed as e:
        logger.info(f"Using empty marks for {class_name}-{section_name} '{exam_name}': {e}")
        return GridState(schema, roster)

    effective = apply_schema_override(schema, body)
    grid = GridState(effective, roster)

    merged = 0
    for entry in body["data"]:
        if not isinstance(entry, dict):
            continue
        student_id = str(entry.get("student_id", ""))
        marks = entry.get("marks")
        if not isinstance(marks, dict) or not grid.has_student(student_id):
            continue
        for component in effective.components:
            value = marks.get(component)
            if not is_blank_mark(value):
                grid.set(student_id, component, format_mark(value))
                merged += 1

    logger.info(f"Reconciled {merged} saved marks into {grid.cell_count} cells.")
    return grid
