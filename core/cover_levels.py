"""Cover level ordering and the rule benefits attached to each level."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Iterable, Optional


class CoverLevel(IntEnum):
    """Ordered cover categories; comparisons follow ``none < lesser < standard < greater``."""

    NONE = 0
    LESSER = 1
    STANDARD = 2
    GREATER = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: object) -> "CoverLevel":
        """Coerce a level name, integer or :class:`CoverLevel` into a member."""

        if isinstance(value, CoverLevel):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError as exc:
                raise ValueError(f"unknown cover level '{value}'") from exc
        raise TypeError(f"cannot interpret {value!r} as a cover level")

    @classmethod
    def parse_override(cls, value: object) -> Optional["CoverLevel"]:
        """Like :meth:`parse` but maps ``None``/``"auto"`` to ``None`` (no override)."""

        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in ("", "auto"):
            return None
        return cls.parse(value)


def max_level(levels: Iterable[CoverLevel]) -> CoverLevel:
    return max(levels, default=CoverLevel.NONE)


def min_level(levels: Iterable[CoverLevel]) -> CoverLevel:
    return min(levels, default=CoverLevel.NONE)


# Absorbs rounding in clipped lengths so an exact 50% reads as 50%.
PERCENT_TOLERANCE = 1e-9


def meets_threshold(percent: float, threshold: float) -> bool:
    return percent + PERCENT_TOLERANCE >= threshold


def level_from_blocked_count(count: int) -> CoverLevel:
    """Map a number of blocked sightlines to a level (0, 1, 2-3, 4+)."""

    if count <= 0:
        return CoverLevel.NONE
    if count == 1:
        return CoverLevel.LESSER
    if count <= 3:
        return CoverLevel.STANDARD
    return CoverLevel.GREATER


@dataclass(frozen=True)
class CoverBenefits:
    """Rule modifiers granted by a cover level."""

    condition: Optional[str]
    bonus_ac: int
    bonus_reflex: int
    bonus_stealth: int
    can_hide: bool


COVER_BENEFITS: Dict[CoverLevel, CoverBenefits] = {
    CoverLevel.NONE: CoverBenefits(None, 0, 0, 0, False),
    CoverLevel.LESSER: CoverBenefits("lesser-cover", 1, 0, 0, False),
    CoverLevel.STANDARD: CoverBenefits("cover", 2, 2, 2, True),
    CoverLevel.GREATER: CoverBenefits("greater-cover", 4, 4, 4, True),
}


def benefits_for(level: CoverLevel) -> CoverBenefits:
    return COVER_BENEFITS[CoverLevel(level)]


__all__ = [
    "COVER_BENEFITS",
    "CoverBenefits",
    "CoverLevel",
    "benefits_for",
    "PERCENT_TOLERANCE",
    "level_from_blocked_count",
    "meets_threshold",
    "max_level",
    "min_level",
]
