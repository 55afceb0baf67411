"""Orchestrates mark entry for the teacher's current subject and exam selection."""

from typing import List, Optional

import config
from core.catalog import load_assigned_subjects, load_edit_permission, load_exams
from core.cell_commit import CellPersistenceController, Notifier
from core.grading_schema import derive_schema
from core.grid import GridState
from core.models import AssignedSubject, CellSaveStatus, CommitResult, ExamDescriptor, GradingSchema
from core.reconciler import reconcile
from core.roster import load_roster
from services.school_api import SchoolApiService
from session import SessionContext
from utils.logger import get_logger
from utils.error_handler import RosterLoadFailed

logger = get_logger()

class MarkEntrySession:
    """Everything that belongs to one (subject, exam) selection.

    A session is never reused for another selection; switching builds a new
    one. Saves still in flight keep writing to the session that started them.
    """

    def __init__(
        self,
        api: SchoolApiService,
        subject: AssignedSubject,
        exam: ExamDescriptor,
        grid: GridState,
        branch_id: str,
        can_edit: bool = True,
        notify: Optional[Notifier] = None,
        roster_error: Optional[str] = None,
    ):
        self.subject = subject
        self.exam = exam
        self.grid = grid
        self.branch_id = branch_id
        self.roster_error = roster_error
        self.controller = CellPersistenceController(api, grid, can_edit=can_edit, notify=notify)

    @classmethod
    async def open(
        cls,
        api: SchoolApiService,
        subject: AssignedSubject,
        exam: ExamDescriptor,
        branch_id: str,
        can_edit: bool = True,
        notify: Optional[Notifier] = None,
    ) -> "MarkEntrySession":
        """Derives the schema, loads the roster and reconciles saved marks.

        Raises:
            RosterLoadFailed: If the roster cannot be loaded.
        """
        schema = derive_schema(exam.display_name, subject.class_name)
        if not schema.components:
            logger.warning(f"No grading components known for exam '{exam.display_name}' in class {subject.class_name}.")

        students = await load_roster(api, subject.class_name, subject.section_name, branch_id)
        grid = await reconcile(
            api, students, schema,
            subject.class_name, subject.section_name, subject.subject_id,
            exam.display_name, branch_id,
        )
        return cls(api, subject, exam, grid, branch_id, can_edit=can_edit, notify=notify)

    @property
    def schema(self) -> GradingSchema:
        return self.grid.schema

    @property
    def term(self) -> str:
        return self.schema.term

    def edit(self, student_id: str, component: str, value: str) -> bool:
        """Updates what the cell shows. Refused while that cell is saving."""
        if self.controller.is_pending(student_id, component):
            return False
        self.grid.set(student_id, component, value)
        self.controller.acknowledge_edit(student_id, component)
        return True

    async def commit(self, student_id: str, component: str, raw_value: str) -> CommitResult:
        """Persists one cell (the edit-completion step)."""
        student = self.grid.student(student_id)
        return await self.controller.commit_cell(
            student, component, raw_value, self.schema, self.term,
            self.subject.subject_id, self.branch_id,
        )

    def status(self, student_id: str, component: str) -> CellSaveStatus:
        return self.controller.status(student_id, component)

class MarkEntryEngine:
    """Holds the teacher's catalog and the current mark-entry session."""

    def __init__(self, api: SchoolApiService, session: SessionContext, notify: Optional[Notifier] = None):
        self.api = api
        self.session = session
        self.notify = notify
        self.exams: List[ExamDescriptor] = []
        self.subjects: List[AssignedSubject] = []
        self.can_edit = False
        self.current: Optional[MarkEntrySession] = None
        self._selection_generation = 0

    async def bootstrap(self) -> None:
        """Loads exams, assigned subjects and the edit permission.

        Raises:
            APIError: If the exam list cannot be fetched.
        """
        self.exams = await load_exams(self.api, self.session.branch_id)
        self.subjects = await load_assigned_subjects(self.api, self.session.emp_id, self.session.branch_id)
        self.can_edit = await load_edit_permission(self.api, self.session.emp_id)
        logger.info(
            f"Engine ready: {len(self.exams)} exams, {len(self.subjects)} subjects, "
            f"{'edit' if self.can_edit else 'view-only'} mode."
        )

    @property
    def default_exam(self) -> Optional[ExamDescriptor]:
        return self.exams[0] if self.exams else None

    async def select(self, subject: AssignedSubject, exam: ExamDescriptor) -> Optional[MarkEntrySession]:
        """Replaces the current session with a freshly built one.

        Returns:
            The new session, or None when a newer selection superseded this one
            while it was loading.
        """
        self._selection_generation += 1
        generation = self._selection_generation
        self.current = None
        logger.info(f"Selecting {subject.subject_name} ({subject.class_name}-{subject.section_name}), exam '{exam.display_name}'")

        try:
            new_session = await MarkEntrySession.open(
                self.api, subject, exam, self.session.branch_id,
                can_edit=self.can_edit, notify=self.notify,
            )
        except RosterLoadFailed as e:
            logger.error(f"Showing an empty roster: {e}", exc_info=config.DEBUG)
            if self.notify:
                self.notify(e.args[0])
            schema = derive_schema(exam.display_name, subject.class_name)
            new_session = MarkEntrySession(
                self.api, subject, exam, GridState(schema, []), self.session.branch_id,
                can_edit=self.can_edit, notify=self.notify, roster_error=e.args[0],
            )

        if generation != self._selection_generation:
            logger.info(f"Discarding superseded selection of exam '{exam.display_name}'")
            return None

        self.current = new_session
        return new_session
