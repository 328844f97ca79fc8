"""Movable obstacles: creatures and objects that may stand between two tokens."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

from core.cover_levels import CoverLevel
from entities.spatial_entity import SpatialEntity


class ActorType(Enum):
    CHARACTER = "character"
    NPC = "npc"
    CREATURE = "creature"
    VEHICLE = "vehicle"
    LOOT = "loot"
    HAZARD = "hazard"

    @classmethod
    def parse(cls, value: object) -> "ActorType":
        if isinstance(value, ActorType):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"unknown actor type {value!r}") from exc


# Categories that have no body to hide behind unless they opt in.
NON_CORPOREAL_TYPES: FrozenSet[ActorType] = frozenset({ActorType.LOOT, ActorType.HAZARD})


@dataclass(frozen=True)
class Obstacle(SpatialEntity):
    """A :class:`SpatialEntity` with the attributes used by the blocker filter.

    ``undetected`` is supplied by the external visibility subsystem relative
    to the attacker. ``cover_override`` is ``None`` for automatic detection.
    """

    hit_points: Optional[int] = None
    undetected: bool = False
    prone: bool = False
    never_blocks: bool = False
    hidden: bool = False
    actor_type: ActorType = ActorType.CREATURE
    grants_cover: bool = False
    cover_override: Optional[CoverLevel] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.actor_type, ActorType):
            object.__setattr__(self, "actor_type", ActorType.parse(self.actor_type))
        if self.cover_override is not None and not isinstance(self.cover_override, CoverLevel):
            object.__setattr__(self, "cover_override", CoverLevel.parse_override(self.cover_override))

    @property
    def is_dead(self) -> bool:
        return self.hit_points is not None and self.hit_points <= 0

    @property
    def is_non_corporeal(self) -> bool:
        return self.actor_type in NON_CORPOREAL_TYPES and not self.grants_cover


__all__ = ["ActorType", "NON_CORPOREAL_TYPES", "Obstacle"]
