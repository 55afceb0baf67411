"""Data model for the mark-entry engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import config

# Grid cells are addressed by (student id, component key)
CellKey = Tuple[str, str]

def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()

@dataclass(frozen=True)
class ExamDescriptor:
    """An exam as listed by the server. `display_name` drives the grading schema."""
    identifier: str
    display_name: str

    @classmethod
    def from_api(cls, item: Any) -> "ExamDescriptor":
        """Normalizes a wire item, which is either a bare name or an object."""
        if isinstance(item, str):
            return cls(identifier="", display_name=item.strip())
        if not isinstance(item, dict):
            return cls(identifier="", display_name="")
        identifier = item.get("id") or item.get("exam_id") or ""
        name = item.get("exam_name") or item.get("name") or ""
        return cls(identifier=_text(identifier), display_name=_text(name))

@dataclass(frozen=True)
class AssignedSubject:
    """One teaching assignment: a subject taught to a class/section."""
    class_name: str
    section_name: str
    subject_id: str
    subject_name: str

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "AssignedSubject":
        return cls(
            class_name=_text(item.get("class_name")),
            section_name=_text(item.get("section_name")),
            subject_id=_text(item.get("subject_id")),
            subject_name=_text(item.get("subject_name")),
        )

@dataclass(frozen=True)
class Student:
    id: str
    admission_number: str
    roll_number: str
    name: str

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> "Student":
        """Raises ValueError when the record has no id."""
        student_id = _text(item.get("id"))
        if not student_id:
            raise ValueError(f"Student record without id: {item!r}")
        return cls(
            id=student_id,
            admission_number=_text(item.get("student_admission")),
            roll_number=_text(item.get("student_roll")),
            name=_text(item.get("student_name")),
        )

@dataclass(frozen=True)
class GradingSchema:
    """Ordered gradable components of one (exam, class) pair.

    An empty `components` tuple is a valid schema: the exam is unknown and the
    grid simply has no columns.
    """
    components: Tuple[str, ...] = ()
    labels: Dict[str, str] = field(default_factory=dict)
    max_scores: Dict[str, float] = field(default_factory=dict)
    term: str = ""

    def label_for(self, component: str) -> str:
        return self.labels.get(component) or component.upper()

    def max_score_for(self, component: str) -> float:
        return self.max_scores.get(component) or config.DEFAULT_MAX_SCORE

    def __len__(self) -> int:
        return len(self.components)

class CellSaveStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    ERROR = "error"

class CommitOutcome(Enum):
    SAVED = "saved"
    UNCHANGED = "unchanged"          # empty value over an empty cell, no request sent
    OUT_OF_RANGE = "out_of_range"    # rejected locally, no request sent
    SAVE_FAILED = "save_failed"
    BUSY = "busy"                    # a save for the same cell is still outstanding
    READ_ONLY = "read_only"          # teacher has no edit permission

@dataclass(frozen=True)
class CommitResult:
    outcome: CommitOutcome
    message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is CommitOutcome.SAVED

    @property
    def reached_network(self) -> bool:
        return self.outcome in (CommitOutcome.SAVED, CommitOutcome.SAVE_FAILED)
