from __future__ import annotations

import csv
import io
from typing import Sequence

from gradebook.grading.calculator import calculate_grade, format_grade
from gradebook.grading.constants import COLLECTED_SLOTS
from gradebook.schemas.roster import Student

__all__ = ["CSV_HEADER", "roster_to_csv"]

CSV_HEADER: tuple[str, ...] = (
    "ID",
    "Name",
    *(f"C{slot}" for slot in range(1, COLLECTED_SLOTS + 1)),
    "Midterm",
    "Final",
    "Total",
    "Grade",
    "Status",
    "RedeemedDraws",
)


def _number(value: float) -> str:
    return f"{value:g}"


def roster_to_csv(students: Sequence[Student]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for student in students:
        result = calculate_grade(student.scores.to_record(), student.status)
        writer.writerow(
            [
                student.id,
                student.name,
                *(_number(score) for score in student.scores.collected),
                _number(student.scores.midterm),
                _number(student.scores.final),
                _number(result.total_score),
                format_grade(result.grade),
                student.status.value,
                student.redeemed_draws,
            ]
        )
    return buffer.getvalue()
