from __future__ import annotations

from typing import Any, Iterable, Optional

from gradebook.core.numeric import clamp, to_float_safe, to_int_safe
from gradebook.grading.constants import (
    COLLECTED_SLOTS,
    FAILING_GRADE,
    GRADE_THRESHOLDS,
    MAX_COLLECTED_SCORE,
    MAX_FINAL_SCORE,
    MAX_MIDTERM_SCORE,
    PASSING_GRADE,
)
from gradebook.grading.enums import SpecialStatus
from gradebook.grading.types import Grade, GradeResult, ScoreRecord

__all__ = [
    "sanitize_score",
    "sanitize_redeemed",
    "normalize_collected",
    "normalize_score_record",
    "grade_for_total",
    "calculate_grade",
    "format_grade",
]


def sanitize_score(value: Any, maximum: float) -> float:
    """Coerce one raw score cell into ``[0, maximum]``; blanks become 0."""
    return clamp(to_float_safe(value), 0.0, float(maximum))


def sanitize_redeemed(value: Any) -> int:
    return max(0, to_int_safe(value))


def normalize_collected(values: Optional[Iterable[Any]]) -> tuple[float, ...]:
    """Clamp collected scores and pad or truncate to exactly six slots."""
    cleaned = [sanitize_score(value, MAX_COLLECTED_SCORE) for value in (values or ())]
    cleaned = cleaned[:COLLECTED_SLOTS]
    cleaned.extend([0.0] * (COLLECTED_SLOTS - len(cleaned)))
    return tuple(cleaned)


def normalize_score_record(collected: Optional[Iterable[Any]] = None, midterm: Any = None, final: Any = None) -> ScoreRecord:
    return ScoreRecord(
        collected=normalize_collected(collected),
        midterm=sanitize_score(midterm, MAX_MIDTERM_SCORE),
        final=sanitize_score(final, MAX_FINAL_SCORE),
    )


def grade_for_total(total: float) -> float:
    for minimum, grade in GRADE_THRESHOLDS:
        if total >= minimum:
            return grade
    return FAILING_GRADE


def calculate_grade(record: ScoreRecord, status: SpecialStatus | str = SpecialStatus.NORMAL) -> GradeResult:
    """Turn a score record into total, grade and pass flag.

    A non-normal status short-circuits: scores are ignored entirely and the
    status label stands in as the grade. Missing cells count as 0; range
    clamping is the caller's job (see ``normalize_score_record``).
    """
    status = SpecialStatus(status)
    if status.overrides_grade:
        return GradeResult(total_score=0.0, grade=status, is_pass=False)

    total = (
        sum(to_float_safe(value) for value in record.collected)
        + to_float_safe(record.midterm)
        + to_float_safe(record.final)
    )
    grade = grade_for_total(total)
    return GradeResult(total_score=total, grade=grade, is_pass=grade >= PASSING_GRADE)


def format_grade(grade: Grade) -> str:
    """Render a grade the way report cards print it (``4``, ``3.5``, ``มส.``)."""
    if isinstance(grade, SpecialStatus):
        return grade.value
    return f"{grade:g}"
