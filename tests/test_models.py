# tests/test_models.py

import pytest

from core.models import AssignedSubject, CommitOutcome, CommitResult, ExamDescriptor, GradingSchema, Student


def test_exam_from_bare_string():
    exam = ExamDescriptor.from_api("TERM 1")
    assert exam == ExamDescriptor(identifier="", display_name="TERM 1")


def test_exam_from_object_with_alternate_keys():
    assert ExamDescriptor.from_api({"exam_id": 7, "name": "UNIT TEST 1"}) == ExamDescriptor("7", "UNIT TEST 1")
    assert ExamDescriptor.from_api({"id": "3", "exam_name": "TERM 2"}) == ExamDescriptor("3", "TERM 2")


def test_exam_without_name_has_empty_display_name():
    assert ExamDescriptor.from_api({"id": "9"}).display_name == ""
    assert ExamDescriptor.from_api(None).display_name == ""


def test_student_ids_are_strings():
    student = Student.from_api(
        {"id": 55, "student_admission": 9001, "student_roll": 4, "student_name": " Meera "}
    )
    assert student == Student(id="55", admission_number="9001", roll_number="4", name="Meera")


def test_student_without_id_is_rejected():
    with pytest.raises(ValueError):
        Student.from_api({"student_name": "Nobody"})


def test_assigned_subject_from_api():
    subject = AssignedSubject.from_api(
        {"class_name": "IX", "section_name": "B", "subject_id": 12, "subject_name": "Maths"}
    )
    assert subject.subject_id == "12"
    assert subject.section_name == "B"


def test_schema_fallbacks():
    schema = GradingSchema(components=("oral",), labels={}, max_scores={})

    assert schema.label_for("oral") == "ORAL"
    assert schema.max_score_for("oral") == 100


def test_commit_result_flags():
    assert CommitResult(CommitOutcome.SAVED).success
    assert CommitResult(CommitOutcome.SAVE_FAILED).reached_network
    assert not CommitResult(CommitOutcome.OUT_OF_RANGE).reached_network
    assert not CommitResult(CommitOutcome.UNCHANGED).success
