import pydantic
import pytest

from gradebook.grading.enums import SpecialStatus
from gradebook.schemas.roster import ScoreData, Student, SubjectClass


def test_student_defaults_for_missing_fields():
    student = Student.model_validate({"id": "665010"})
    assert student.name == ""
    assert student.status is SpecialStatus.NORMAL
    assert student.redeemed_draws == 0
    assert student.scores.collected == [0.0] * 6
    assert student.scores.midterm == 0
    assert student.scores.final == 0


def test_numeric_ids_are_coerced_to_strings():
    assert Student.model_validate({"id": 665001}).id == "665001"
    assert Student.model_validate({"id": 665001.0}).id == "665001"
    assert Student.model_validate({"id": " 665001 "}).id == "665001"


def test_blank_id_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        Student.model_validate({"id": "   "})


def test_scores_are_clamped_on_entry():
    scores = ScoreData.model_validate({"collected": [12, -1, "7", None, ""], "midterm": "25", "final": -3})
    assert scores.collected == [10, 0, 7, 0, 0, 0]
    assert scores.midterm == 20
    assert scores.final == 0


def test_collected_is_padded_and_truncated():
    assert len(ScoreData.model_validate({"collected": [1, 2]}).collected) == 6
    assert ScoreData.model_validate({"collected": [1] * 9}).collected == [1] * 6


def test_collected_must_be_a_list():
    with pytest.raises(pydantic.ValidationError):
        ScoreData.model_validate({"collected": "10,10"})


def test_null_scores_and_blank_status():
    student = Student.model_validate({"id": "1", "name": None, "scores": None, "status": "  "})
    assert student.name == ""
    assert student.scores.to_record().collected_sum == 0
    assert student.status is SpecialStatus.NORMAL


def test_special_status_labels_round_trip():
    student = Student.model_validate({"id": "1", "status": "มส."})
    assert student.status is SpecialStatus.INCOMPLETE
    assert student.to_store()["status"] == "มส."


def test_unknown_status_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        Student.model_validate({"id": "1", "status": "Absent"})


def test_redeemed_draws_alias_and_sanitizing():
    assert Student.model_validate({"id": "1", "redeemedDraws": "2"}).redeemed_draws == 2
    assert Student.model_validate({"id": "1", "redeemedDraws": -4}).redeemed_draws == 0
    assert Student.model_validate({"id": "1", "redeemed_draws": 3}).redeemed_draws == 3


def test_to_store_uses_sheet_field_names_and_keeps_extra_columns():
    student = Student.model_validate({"id": "1", "redeemedDraws": 1, "note": "ย้ายห้อง"})
    stored = student.to_store()
    assert stored["redeemedDraws"] == 1
    assert "redeemed_draws" not in stored
    assert stored["note"] == "ย้ายห้อง"


def test_subject_class_lookup_and_substitution():
    roster = SubjectClass.model_validate(
        {"id": "M5_History", "name": "ม.5", "students": [{"id": "1"}, {"id": "2", "redeemedDraws": 1}]}
    )
    assert roster.find_student("2").redeemed_draws == 1
    assert roster.find_student("3") is None

    updated = roster.with_student(roster.find_student("2").model_copy(update={"redeemed_draws": 2}))
    assert updated.find_student("2").redeemed_draws == 2
    assert roster.find_student("2").redeemed_draws == 1
    assert [s.id for s in updated.students] == ["1", "2"]


def test_null_student_list_becomes_empty():
    assert SubjectClass.model_validate({"id": "X", "students": None}).students == []
