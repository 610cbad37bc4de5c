"""Pure grading engine: grades, rank tiers and lucky-draw tickets."""

from gradebook.grading.calculator import calculate_grade, format_grade, normalize_score_record
from gradebook.grading.enums import HeroClass, SpecialStatus, SubjectId
from gradebook.grading.ranks import RANK_TIERS, resolve_rank
from gradebook.grading.tickets import ticket_info
from gradebook.grading.types import GradeResult, RankResolution, RankTier, ScoreRecord, TicketInfo

__all__ = [
    "calculate_grade",
    "format_grade",
    "normalize_score_record",
    "resolve_rank",
    "ticket_info",
    "RANK_TIERS",
    "HeroClass",
    "SpecialStatus",
    "SubjectId",
    "GradeResult",
    "RankResolution",
    "RankTier",
    "ScoreRecord",
    "TicketInfo",
]
