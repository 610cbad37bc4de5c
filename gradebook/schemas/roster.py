from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gradebook.grading.calculator import (
    normalize_collected,
    sanitize_redeemed,
    sanitize_score,
)
from gradebook.grading.constants import COLLECTED_SLOTS, MAX_FINAL_SCORE, MAX_MIDTERM_SCORE
from gradebook.grading.enums import SpecialStatus
from gradebook.grading.types import ScoreRecord

__all__ = [
    "ScoreData",
    "Student",
    "SubjectClass",
]


class ScoreData(BaseModel):
    """Score cells as stored in the spreadsheet; clamped on the way in."""

    collected: List[float] = Field(default_factory=lambda: [0.0] * COLLECTED_SLOTS)
    midterm: float = 0.0
    final: float = 0.0

    @field_validator("collected", mode="before")
    @classmethod
    def _clamp_collected(cls, value: Any) -> list[float]:
        if value is not None and not isinstance(value, (list, tuple)):
            raise ValueError("collected must be a list of scores")
        return list(normalize_collected(value))

    @field_validator("midterm", mode="before")
    @classmethod
    def _clamp_midterm(cls, value: Any) -> float:
        return sanitize_score(value, MAX_MIDTERM_SCORE)

    @field_validator("final", mode="before")
    @classmethod
    def _clamp_final(cls, value: Any) -> float:
        return sanitize_score(value, MAX_FINAL_SCORE)

    def to_record(self) -> ScoreRecord:
        return ScoreRecord(collected=tuple(self.collected), midterm=self.midterm, final=self.final)


class Student(BaseModel):
    """One enrollment record inside a class roster.

    Unknown spreadsheet columns are kept so a whole-roster save writes them
    back untouched.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(min_length=1)
    name: str = ""
    scores: ScoreData = Field(default_factory=ScoreData)
    status: SpecialStatus = SpecialStatus.NORMAL
    redeemed_draws: int = Field(default=0, ge=0, alias="redeemedDraws")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Sheets hands numeric-looking ids back as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("scores", mode="before")
    @classmethod
    def _default_scores(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return SpecialStatus.NORMAL
        return value.strip() if isinstance(value, str) else value

    @field_validator("redeemed_draws", mode="before")
    @classmethod
    def _clamp_redeemed(cls, value: Any) -> int:
        return sanitize_redeemed(value)

    def to_store(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SubjectClass(BaseModel):
    """Full roster of one class: the unit of load and of save."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(min_length=1)
    name: str = ""
    students: List[Student] = Field(default_factory=list)

    @field_validator("students", mode="before")
    @classmethod
    def _default_students(cls, value: Any) -> Any:
        return [] if value is None else value

    def find_student(self, student_id: str) -> Optional[Student]:
        for student in self.students:
            if student.id == student_id:
                return student
        return None

    def with_student(self, updated: Student) -> "SubjectClass":
        """Copy of the roster with ``updated`` substituted by id."""
        students = [updated if student.id == updated.id else student for student in self.students]
        return self.model_copy(update={"students": students})
