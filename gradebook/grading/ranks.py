"""Rank tiers and the cosmetic hero card derived from a student's total.

The tier table is the only input to rank math. Hero class, gender, skin name
and avatar are flavour for the student card and never feed back into grades,
rank index or tickets.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Final, Mapping, Tuple

from gradebook.grading.enums import Gender, HeroClass
from gradebook.grading.types import RankResolution, RankTier

__all__ = [
    "RANK_TIERS",
    "HERO_CLASSES",
    "tier_index_for",
    "resolve_rank",
    "hero_class_for",
    "gender_for",
    "skin_name_for",
    "avatar_url_for",
]


RANK_TIERS: Final[Tuple[RankTier, ...]] = (
    RankTier("Novice Scout", "นักสำรวจฝึกหัด", 0, "First step into the wild.", "a8a29e", "Noob"),
    RankTier("Pathfinder", "ผู้บุกเบิก", 40, "Finding the way through the thicket.", "34d399", "Explorer"),
    RankTier("Hunter", "นายพราน", 50, "Survival of the fittest.", "d97706", "Pro"),
    RankTier("Ranger", "ผู้พิทักษ์ป่า", 60, "One with the forest.", "2dd4bf", "Veteran"),
    RankTier("Druid", "นักปราชญ์ไพร", 70, "Ancient wisdom unleashed.", "e879f9", "Master"),
    RankTier("Chieftain", "หัวหน้าเผ่า", 80, "Leader of the pack.", "facc15", "Epic"),
    RankTier("Jungle King", "เจ้าป่า", 85, "Ruler of the wild.", "f97316", "Legendary"),
    RankTier("Ancient Guardian", "เทพพิทักษ์", 90, "The Eternal Legend of Nature.", "67e8f9", "Godlike"),
)

# Index order is the hash target of hero_class_for; do not reorder.
HERO_CLASSES: Final[Tuple[HeroClass, ...]] = (
    HeroClass.WARRIOR,
    HeroClass.MAGE,
    HeroClass.ASSASSIN,
    HeroClass.CARRY,
    HeroClass.TANK,
    HeroClass.SUPPORT,
)

_CLASS_LABELS: Mapping[HeroClass, str] = MappingProxyType(
    {
        HeroClass.WARRIOR: "Fighter",
        HeroClass.MAGE: "Wizard",
        HeroClass.ASSASSIN: "Ninja",
        HeroClass.CARRY: "Gunner",
        HeroClass.TANK: "Defender",
        HeroClass.SUPPORT: "Medic",
    }
)

_FEMALE_PREFIXES: Final[Tuple[str, ...]] = ("ด.ญ.", "น.ส.", "นาง")
_FEMALE_MARKER: Final[str] = "หญิง"
_NON_DIGITS = re.compile(r"\D")
_AVATAR_URL = "https://api.dicebear.com/9.x/bottts/svg?seed={seed}&baseColor={color}"


def tier_index_for(total_score: float) -> int:
    """Index of the highest tier whose ``min_score`` the total reaches."""
    index = 0
    for position, tier in enumerate(RANK_TIERS):
        if total_score >= tier.min_score:
            index = position
        else:
            break
    return index


def hero_class_for(identity_seed: str) -> HeroClass:
    digits = _NON_DIGITS.sub("", identity_seed or "")
    number = int(digits) if digits else 0
    return HERO_CLASSES[number % len(HERO_CLASSES)]


def gender_for(name: str) -> Gender:
    name = name or ""
    if name.startswith(_FEMALE_PREFIXES) or _FEMALE_MARKER in name:
        return Gender.FEMALE
    return Gender.MALE


def skin_name_for(tier: RankTier, hero_class: HeroClass) -> str:
    return f"[{tier.skin_prefix}] {_CLASS_LABELS[hero_class]}"


def avatar_url_for(tier: RankTier) -> str:
    return _AVATAR_URL.format(seed=tier.tier.replace(" ", ""), color=tier.hex_color)


def resolve_rank(total_score: float, identity_seed: str, *, name: str = "") -> RankResolution:
    """Place a total on the tier ladder and build the student card.

    ``progress`` is the percentage of the way from the current tier's floor
    to the next tier's floor and is not clamped here; the top tier always
    reports 100.
    """
    rank_index = tier_index_for(total_score)
    current = RANK_TIERS[rank_index]
    following = RANK_TIERS[rank_index + 1] if rank_index + 1 < len(RANK_TIERS) else None

    if following is None:
        progress = 100.0
    else:
        span = following.min_score - current.min_score
        progress = (total_score - current.min_score) / span * 100.0

    hero_class = hero_class_for(identity_seed)
    return RankResolution(
        current=current,
        next=following,
        progress=progress,
        rank_index=rank_index,
        hero_class=hero_class,
        gender=gender_for(name),
        skin_name=skin_name_for(current, hero_class),
        avatar_url=avatar_url_for(current),
    )
