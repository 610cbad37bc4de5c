from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from gradebook.grading.enums import Gender, HeroClass, SpecialStatus


Grade = Union[float, SpecialStatus]


@dataclass(frozen=True, slots=True)
class ScoreRecord:
    """Raw scores for one student in one class, already clamped on entry."""

    collected: Tuple[float, ...]
    midterm: float = 0.0
    final: float = 0.0

    @property
    def collected_sum(self) -> float:
        return sum(value or 0.0 for value in self.collected)


@dataclass(frozen=True, slots=True)
class GradeResult:
    """Derived grade; recomputed from ``(scores, status)`` on every read."""

    total_score: float
    grade: Grade
    is_pass: bool

    @property
    def is_special(self) -> bool:
        return isinstance(self.grade, SpecialStatus)

    def as_dict(self) -> dict[str, Any]:
        grade = self.grade.value if isinstance(self.grade, SpecialStatus) else self.grade
        return {"total_score": self.total_score, "grade": grade, "is_pass": self.is_pass}


@dataclass(frozen=True, slots=True)
class RankTier:
    """One row of the static rank table."""

    tier: str
    thai_name: str
    min_score: float
    description: str
    hex_color: str
    skin_prefix: str


@dataclass(frozen=True, slots=True)
class RankResolution:
    current: RankTier
    next: Optional[RankTier]
    progress: float
    rank_index: int
    hero_class: HeroClass
    gender: Gender
    skin_name: str
    avatar_url: str

    @property
    def display_progress(self) -> float:
        """Progress capped at 100 for progress bars."""
        return min(self.progress, 100.0)

    @property
    def is_top_tier(self) -> bool:
        return self.next is None


@dataclass(frozen=True, slots=True)
class TicketInfo:
    earned: int
    available: int
    redeemed: int

    def as_dict(self) -> dict[str, int]:
        return {"earned": self.earned, "available": self.available, "redeemed": self.redeemed}
