"""Categorical values shared by the grading engine and the API."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

__all__ = [
    "SpecialStatus",
    "HeroClass",
    "Gender",
    "SubjectId",
    "SUBJECTS",
]


class SpecialStatus(str, Enum):
    """Override classification that replaces score-based grading.

    The non-normal values are the labels teachers type into the spreadsheet,
    and they double as the displayed grade.
    """

    NORMAL = "Normal"
    ABSENT_EXCUSED = "ร"
    INCOMPLETE = "มส."

    def __str__(self) -> str:
        return self.value

    @property
    def overrides_grade(self) -> bool:
        return self is not SpecialStatus.NORMAL


class HeroClass(str, Enum):
    """Cosmetic role-playing class shown on the student card."""

    WARRIOR = "Warrior"
    MAGE = "Mage"
    ASSASSIN = "Assassin"
    CARRY = "Carry"
    TANK = "Tank"
    SUPPORT = "Support"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class SubjectId(str, Enum):
    M1_HISTORY = "M1_History"
    M1_SOCIAL = "M1_Social"
    M5_HISTORY = "M5_History"
    M5_SOCIAL = "M5_Social"
    M6_SOCIAL = "M6_Social"


SUBJECTS: Mapping[SubjectId, str] = MappingProxyType(
    {
        SubjectId.M1_HISTORY: "ม.1 ประวัติศาสตร์",
        SubjectId.M1_SOCIAL: "ม.1 สังคมศึกษา",
        SubjectId.M5_HISTORY: "ม.5 ประวัติศาสตร์",
        SubjectId.M5_SOCIAL: "ม.5 สังคมศึกษา",
        SubjectId.M6_SOCIAL: "ม.6 สังคมศึกษา",
    }
)
