"""Validates and persists single grid cells, tracking a save status per cell."""

import math
from typing import Callable, Dict, Optional

import config
from core.grid import GridState
from core.models import CellKey, CellSaveStatus, CommitOutcome, CommitResult, GradingSchema, Student
from services.school_api import SchoolApiService
from utils.logger import get_logger
from utils.error_handler import APIError, SaveFailed

logger = get_logger()

Notifier = Callable[[str], None]

def parse_score(value: str) -> float:
    """Numeric value of a cell; anything non-numeric (including empty) counts as 0."""
    try:
        number = float(value)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0

def wire_number(number: float) -> int | float:
    return int(number) if number.is_integer() else number

class CellPersistenceController:
    """Commits cells of one grid independently of each other.

    A cell moves idle -> pending -> idle (saved) or error. While a cell is
    pending a second commit of the same cell is refused with BUSY; other cells
    are never blocked. Typed values are written to the grid before the request
    goes out and are not rolled back when it fails.
    """

    def __init__(
        self,
        api: SchoolApiService,
        grid: GridState,
        can_edit: bool = True,
        notify: Optional[Notifier] = None,
    ):
        self.api = api
        self.grid = grid
        self.can_edit = can_edit
        self.notify = notify
        self._statuses: Dict[CellKey, CellSaveStatus] = {}
        # Last value known to be stored on the server, per cell
        self._committed: Dict[CellKey, str] = {
            (student_id, component): value
            for student_id, row in grid.rows().items()
            for component, value in row.items()
        }

    def status(self, student_id: str, component: str) -> CellSaveStatus:
        return self._statuses.get((student_id, component), CellSaveStatus.IDLE)

    def statuses(self) -> Dict[CellKey, CellSaveStatus]:
        """Cells that are not idle."""
        return dict(self._statuses)

    def is_pending(self, student_id: str, component: str) -> bool:
        return self.status(student_id, component) is CellSaveStatus.PENDING

    def committed_value(self, student_id: str, component: str) -> str:
        return self._committed.get((student_id, component), "")

    def acknowledge_edit(self, student_id: str, component: str) -> None:
        """A fresh edit clears a previous failure on that cell."""
        key = (student_id, component)
        if self._statuses.get(key) is CellSaveStatus.ERROR:
            del self._statuses[key]

    def _raise_notice(self, message: str) -> None:
        if self.notify:
            self.notify(message)

    async def _persist(
        self,
        student: Student,
        component: str,
        number: float,
        term: str,
        subject_id: str,
        branch_id: str,
    ) -> None:
        task = "save_marks"
        try:
            body = await self.api.save_mark(
                student.id, student.admission_number, term, subject_id,
                component, wire_number(number), branch_id,
            )
        except APIError as e:
            raise SaveFailed(f"Network error while saving: {e}", status_code=e.status_code, task=task) from e

        if not isinstance(body, dict):
            raise SaveFailed("Invalid server response", task=task)
        if body.get("status") != config.SUCCESS_STATUS:
            raise SaveFailed(str(body.get("message") or "Failed to save"), task=task)

    async def commit_cell(
        self,
        student: Student,
        component: str,
        raw_value: str,
        schema: GradingSchema,
        term: str,
        subject_id: str,
        branch_id: str,
    ) -> CommitResult:
        """Validates one cell and, if it passes, saves it.

        Args:
            student: Owner of the cell.
            component: Component key, e.g. "mid_term".
            raw_value: Text the user left in the cell.
            schema: Schema providing the component's max score.
            term: Term bucket sent to the server instead of the exam.
            subject_id: Subject being graded.
            branch_id: Active branch.

        Returns:
            CommitResult: SAVED, SAVE_FAILED, or a local outcome (UNCHANGED,
            OUT_OF_RANGE, BUSY, READ_ONLY) that made no request.

        Raises:
            KeyError: If the grid has no such cell.
        """
        key = (student.id, component)
        if not self.grid.has_cell(student.id, component):
            raise KeyError(f"No cell for student {student.id!r} and component {component!r}")

        if not self.can_edit:
            return CommitResult(CommitOutcome.READ_ONLY, "Marks are in view-only mode")
        if self.is_pending(student.id, component):
            return CommitResult(CommitOutcome.BUSY, "Still saving the previous value")

        value = (raw_value or "").strip()
        if not value and not self.committed_value(student.id, component):
            # Clearing an unsaved failed value: show it empty again and drop the error
            self.grid.set(student.id, component, "")
            self.acknowledge_edit(student.id, component)
            return CommitResult(CommitOutcome.UNCHANGED)

        number = parse_score(value)
        max_score = schema.max_score_for(component)
        if number > max_score:
            message = f"Marks cannot exceed {max_score:g}"
            self._raise_notice(message)
            return CommitResult(CommitOutcome.OUT_OF_RANGE, message)
        if number < 0:
            message = "Marks cannot be negative"
            self._raise_notice(message)
            return CommitResult(CommitOutcome.OUT_OF_RANGE, message)

        self.grid.set(student.id, component, value)
        self._statuses[key] = CellSaveStatus.PENDING
        logger.debug(f"Cell {key} pending ({value!r})")

        try:
            await self._persist(student, component, number, term, subject_id, branch_id)
        except SaveFailed as e:
            self._statuses[key] = CellSaveStatus.ERROR
            logger.error(f"Save failed for {student.name} ({student.id}) {component}: {e}", exc_info=config.DEBUG)
            message = e.args[0]
            self._raise_notice(f"{student.name} - {schema.label_for(component)}: {message}")
            return CommitResult(CommitOutcome.SAVE_FAILED, message)

        self._statuses.pop(key, None)
        self._committed[key] = value
        logger.info(f"Saved {component}={value!r} for student {student.id}")
        return CommitResult(CommitOutcome.SAVED)
