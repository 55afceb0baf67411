"""In-memory editable mark grid: student id -> component key -> text value."""

from typing import Dict, Iterable, List

from core.models import GradingSchema, Student

class GridState:
    """Display state of one (subject, exam) selection.

    Every (student, component) pair implied by the roster and schema has a
    cell from construction on; an empty string means ungraded. `set` only
    updates what is shown. Validation and persistence are the commit
    controller's job.
    """

    def __init__(self, schema: GradingSchema, students: Iterable[Student]):
        self.schema = schema
        self.students: List[Student] = list(students)
        self._cells: Dict[str, Dict[str, str]] = {
            student.id: {component: "" for component in schema.components}
            for student in self.students
        }

    def _row(self, student_id: str) -> Dict[str, str]:
        try:
            return self._cells[student_id]
        except KeyError:
            raise KeyError(f"Unknown student id {student_id!r}") from None

    def get(self, student_id: str, component: str) -> str:
        row = self._row(student_id)
        if component not in row:
            raise KeyError(f"Unknown component {component!r}")
        return row[component]

    def set(self, student_id: str, component: str, value: str) -> None:
        row = self._row(student_id)
        if component not in row:
            raise KeyError(f"Unknown component {component!r}")
        row[component] = value

    def has_student(self, student_id: str) -> bool:
        return student_id in self._cells

    def has_cell(self, student_id: str, component: str) -> bool:
        return component in self._cells.get(student_id, {})

    def rows(self) -> Dict[str, Dict[str, str]]:
        """Copy of the whole table, for rendering."""
        return {student_id: dict(row) for student_id, row in self._cells.items()}

    def student(self, student_id: str) -> Student:
        for student in self.students:
            if student.id == student_id:
                return student
        raise KeyError(f"Unknown student id {student_id!r}")

    def find_by_roll(self, roll_number: str) -> Student | None:
        for student in self.students:
            if student.roll_number == roll_number:
                return student
        return None

    @property
    def cell_count(self) -> int:
        return sum(len(row) for row in self._cells.values())

    def __len__(self) -> int:
        return len(self.students)
