from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

from gradebook.core.numeric import safe_round
from gradebook.grading.calculator import calculate_grade, format_grade
from gradebook.grading.constants import GRADE_SCALE
from gradebook.grading.enums import SpecialStatus
from gradebook.schemas.roster import Student

__all__ = ["ClassStats", "compute_class_stats"]


@dataclass(frozen=True, slots=True)
class ClassStats:
    student_count: int
    average: float
    maximum: float
    minimum: float
    distribution: Dict[str, int]
    special: Dict[str, int]


def compute_class_stats(students: Sequence[Student]) -> ClassStats:
    """Teacher dashboard summary for one roster.

    Average, max and min only look at totals above zero, so students with a
    special status (total 0) or no scores yet do not drag the figures down.
    """
    results = [calculate_grade(student.scores.to_record(), student.status) for student in students]
    scored = [result.total_score for result in results if result.total_score > 0]

    distribution = {
        format_grade(grade): sum(1 for result in results if not result.is_special and result.grade == grade)
        for grade in GRADE_SCALE
    }
    special = {
        status.value: sum(1 for result in results if result.grade is status)
        for status in SpecialStatus
        if status.overrides_grade
    }
    return ClassStats(
        student_count=len(students),
        average=safe_round(sum(scored) / len(scored)) if scored else 0.0,
        maximum=max(scored) if scored else 0.0,
        minimum=min(scored) if scored else 0.0,
        distribution=distribution,
        special=special,
    )
