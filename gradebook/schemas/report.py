from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from gradebook.grading.types import RankTier
from gradebook.services.class_stats import ClassStats
from gradebook.services.redemption import RedemptionOutcome
from gradebook.services.report_cards import ReportCard

__all__ = [
    "GradeOut",
    "TierOut",
    "RankOut",
    "TicketsOut",
    "ReportCardOut",
    "StudentReportOut",
    "ClassSummaryOut",
    "ClassStatsOut",
    "SaveResultOut",
    "RedeemRequest",
    "RedemptionOutcomeOut",
]


class GradeOut(BaseModel):
    total_score: float
    grade: Union[float, str]
    is_pass: bool


class TierOut(BaseModel):
    tier: str
    thai_name: str
    min_score: float
    description: str
    hex_color: str

    @classmethod
    def from_tier(cls, tier: RankTier) -> "TierOut":
        return cls(
            tier=tier.tier,
            thai_name=tier.thai_name,
            min_score=tier.min_score,
            description=tier.description,
            hex_color=tier.hex_color,
        )


class RankOut(BaseModel):
    rank_index: int
    current: TierOut
    next: Optional[TierOut]
    progress: float = Field(ge=0, le=100, description="Display progress, capped at 100")
    hero_class: str
    gender: str
    skin_name: str
    avatar_url: str


class TicketsOut(BaseModel):
    earned: int
    available: int
    redeemed: int


class ReportCardOut(BaseModel):
    class_id: str
    class_name: str
    student_id: str
    name: str
    collected: List[float]
    collected_sum: float
    midterm: float
    final: float
    status: str
    grade: GradeOut
    rank: RankOut
    tickets: TicketsOut

    @classmethod
    def from_card(cls, card: ReportCard) -> "ReportCardOut":
        rank = card.rank
        return cls(
            class_id=card.class_id,
            class_name=card.class_name,
            student_id=card.student.id,
            name=card.student.name,
            collected=list(card.student.scores.collected),
            collected_sum=card.collected_sum,
            midterm=card.student.scores.midterm,
            final=card.student.scores.final,
            status=card.student.status.value,
            grade=GradeOut(**card.grade.as_dict()),
            rank=RankOut(
                rank_index=rank.rank_index,
                current=TierOut.from_tier(rank.current),
                next=TierOut.from_tier(rank.next) if rank.next else None,
                progress=max(0.0, rank.display_progress),
                hero_class=rank.hero_class.value,
                gender=rank.gender.value,
                skin_name=rank.skin_name,
                avatar_url=rank.avatar_url,
            ),
            tickets=TicketsOut(**card.tickets.as_dict()),
        )


class StudentReportOut(BaseModel):
    student_id: str
    name: str
    classes: List[ReportCardOut]


class ClassSummaryOut(BaseModel):
    id: str
    name: str
    student_count: int


class ClassStatsOut(BaseModel):
    class_id: str
    student_count: int
    average: float
    maximum: float
    minimum: float
    distribution: Dict[str, int]
    special: Dict[str, int]

    @classmethod
    def from_stats(cls, class_id: str, stats: ClassStats) -> "ClassStatsOut":
        return cls(
            class_id=class_id,
            student_count=stats.student_count,
            average=stats.average,
            maximum=stats.maximum,
            minimum=stats.minimum,
            distribution=stats.distribution,
            special=stats.special,
        )


class SaveResultOut(BaseModel):
    ok: bool
    class_id: str
    student_count: int
    message: str


class RedeemRequest(BaseModel):
    confirmed: bool = False


class RedemptionOutcomeOut(BaseModel):
    state: str
    success: bool
    class_id: str
    redeemed: int
    available: int
    message: str

    @classmethod
    def from_outcome(cls, outcome: RedemptionOutcome) -> "RedemptionOutcomeOut":
        return cls(
            state=outcome.state.value,
            success=outcome.success,
            class_id=outcome.class_id,
            redeemed=outcome.redeemed,
            available=outcome.available,
            message=outcome.message,
        )
