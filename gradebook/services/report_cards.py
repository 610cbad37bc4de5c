from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gradebook.grading.calculator import calculate_grade
from gradebook.grading.ranks import resolve_rank
from gradebook.grading.tickets import ticket_info
from gradebook.grading.types import GradeResult, RankResolution, TicketInfo
from gradebook.schemas.roster import Student, SubjectClass

__all__ = ["ReportCard", "build_report_card"]


@dataclass(frozen=True, slots=True)
class ReportCard:
    """Everything derived for one student in one class at render time."""

    class_id: str
    class_name: str
    student: Student
    grade: GradeResult
    rank: RankResolution
    tickets: TicketInfo
    collected_sum: float


def build_report_card(student: Student, subject: SubjectClass, redeemed: Optional[int] = None) -> ReportCard:
    """Derive grade, rank and tickets; ``redeemed`` overrides the stored count."""
    record = student.scores.to_record()
    grade = calculate_grade(record, student.status)
    rank = resolve_rank(grade.total_score, student.id, name=student.name)
    used = student.redeemed_draws if redeemed is None else redeemed
    return ReportCard(
        class_id=subject.id,
        class_name=subject.name,
        student=student,
        grade=grade,
        rank=rank,
        tickets=ticket_info(rank.rank_index, used),
        collected_sum=record.collected_sum,
    )
