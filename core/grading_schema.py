"""Grading policy: which components an exam has, their maxima, and its term bucket.

The policy is kept as data so it can be audited at a glance:

    exam                      classes     components (max)
    UNIT TEST 1..4            any         utN (80)
    TERM 1 / TERM 2           IX, X       MA (5), Portfolio (5), SE (5), Mid Term (80)
    TERM 1 / TERM 2           I, II       GA (20), NB (5), SEA (5), Mid Term (60)
    TERM 1 / TERM 2           others      GA (20), NB (5), SEA (5), Mid Term (80)

Any other exam name yields an empty schema.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from core.models import GradingSchema

class Term(str, Enum):
    """Administrative half-year a mark is filed under. Values are sent on the wire."""
    TERM_1 = "TERM 1"
    TERM_2 = "TERM 2"

class ExamFamily(Enum):
    UNIT_TEST = "unit_test"
    TERM_EXAM = "term_exam"

class ClassBand(Enum):
    PRIMARY = "primary"        # I, II
    MIDDLE = "middle"          # everything not listed elsewhere
    SECONDARY = "secondary"    # IX, X

# Component rows are (key, label, max score)
ComponentRow = Tuple[str, str, float]

UNIT_TEST_NUMBERS: Dict[str, int] = {
    "UNIT TEST 1": 1,
    "UNIT TEST 2": 2,
    "UNIT TEST 3": 3,
    "UNIT TEST 4": 4,
}
TERM_EXAMS = ("TERM 1", "TERM 2")

UNIT_TEST_MAX: float = 80

TERM_EXAM_COMPONENTS: Dict[ClassBand, Tuple[ComponentRow, ...]] = {
    ClassBand.SECONDARY: (
        ("ma", "MA", 5),
        ("portfolio", "Portfolio", 5),
        ("se", "SE", 5),
        ("mid_term", "Mid Term", 80),
    ),
    ClassBand.PRIMARY: (
        ("ga", "GA", 20),
        ("nb", "NB", 5),
        ("sea", "SEA", 5),
        ("mid_term", "Mid Term", 60),
    ),
    ClassBand.MIDDLE: (
        ("ga", "GA", 20),
        ("nb", "NB", 5),
        ("sea", "SEA", 5),
        ("mid_term", "Mid Term", 80),
    ),
}

CLASS_BANDS: Dict[str, ClassBand] = {
    "I": ClassBand.PRIMARY,
    "II": ClassBand.PRIMARY,
    "IX": ClassBand.SECONDARY,
    "X": ClassBand.SECONDARY,
}

FIRST_TERM_EXAMS = frozenset({"UNIT TEST 1", "UNIT TEST 2", "TERM 1"})

def exam_family(exam_name: str) -> Optional[ExamFamily]:
    """Matches exam names exactly, as the school's exam master stores them."""
    if exam_name in UNIT_TEST_NUMBERS:
        return ExamFamily.UNIT_TEST
    if exam_name in TERM_EXAMS:
        return ExamFamily.TERM_EXAM
    return None

def class_band(class_name: str) -> ClassBand:
    return CLASS_BANDS.get(class_name, ClassBand.MIDDLE)

def classify_term(exam_name: str) -> Term:
    """UNIT TEST 1, UNIT TEST 2 and TERM 1 belong to the first term; anything else to the second."""
    if exam_name in FIRST_TERM_EXAMS:
        return Term.TERM_1
    return Term.TERM_2

def _component_rows(exam_name: str, class_name: str) -> Tuple[ComponentRow, ...]:
    family = exam_family(exam_name)
    if family is ExamFamily.UNIT_TEST:
        number = UNIT_TEST_NUMBERS[exam_name]
        return ((f"ut{number}", f"UT {number}", UNIT_TEST_MAX),)
    if family is ExamFamily.TERM_EXAM:
        return TERM_EXAM_COMPONENTS[class_band(class_name)]
    return ()

def derive_schema(exam_name: str, class_name: str) -> GradingSchema:
    """Builds the grading schema for an exam taken by a class.

    Never raises: an unknown exam gives a schema without components.

    Args:
        exam_name: Exam display name, e.g. "TERM 1".
        class_name: Class in roman numerals, e.g. "IX".

    Returns:
        GradingSchema: Components in display order with labels, maxima and term.
    """
    rows = _component_rows(exam_name, class_name)
    return GradingSchema(
        components=tuple(key for key, _, _ in rows),
        labels={key: label for key, label, _ in rows},
        max_scores={key: max_score for key, _, max_score in rows},
        term=classify_term(exam_name).value,
    )

# Example usage (prints the policy table)
if __name__ == "__main__":
    for exam in list(UNIT_TEST_NUMBERS) + list(TERM_EXAMS):
        for cls in ("I", "VI", "IX"):
            schema = derive_schema(exam, cls)
            cols = ", ".join(f"{schema.label_for(c)}({schema.max_score_for(c):g})" for c in schema.components)
            print(f"{exam:<12} {cls:<4} {schema.term:<7} {cols}")
