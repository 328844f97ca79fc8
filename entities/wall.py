"""Static wall segments that may occlude a sightline."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.cover_levels import CoverLevel
from core.errors import MalformedWallError
from core.geometry import Point, PointLike, as_point, segments_intersect


class WallDirection(Enum):
    """Which side of a one-sided wall blocks sight.

    The side is measured against the wall's direction vector (first endpoint
    to second endpoint): ``LEFT`` blocks origins with a positive cross
    product, ``RIGHT`` blocks origins with a negative one.
    """

    BOTH = "both"
    LEFT = "left"
    RIGHT = "right"


class DoorType(Enum):
    NONE = "none"
    DOOR = "door"
    SECRET = "secret"


class DoorState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    LOCKED = "locked"


@dataclass(frozen=True)
class Wall:
    x1: float
    y1: float
    x2: float
    y2: float
    blocks_sight: bool = True
    direction: WallDirection = WallDirection.BOTH
    door: DoorType = DoorType.NONE
    door_state: DoorState = DoorState.CLOSED
    provides_cover: bool = True
    cover_override: Optional[CoverLevel] = None
    wall_id: Optional[str] = None

    def __post_init__(self) -> None:
        for name, enum_type in (
            ("direction", WallDirection),
            ("door", DoorType),
            ("door_state", DoorState),
        ):
            value = getattr(self, name)
            if not isinstance(value, enum_type):
                object.__setattr__(self, name, enum_type(str(value).strip().lower()))
        if self.cover_override is not None and not isinstance(self.cover_override, CoverLevel):
            object.__setattr__(self, "cover_override", CoverLevel.parse_override(self.cover_override))

    @property
    def start(self) -> Point:
        return Point(self.x1, self.y1)

    @property
    def end(self) -> Point:
        return Point(self.x2, self.y2)

    @property
    def is_open_door(self) -> bool:
        return self.door is not DoorType.NONE and self.door_state is DoorState.OPEN

    @property
    def has_override(self) -> bool:
        return self.cover_override is not None

    def validate(self) -> None:
        """Raise :class:`MalformedWallError` unless all coordinates are finite numbers."""

        for value in (self.x1, self.y1, self.x2, self.y2):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise MalformedWallError(f"wall {self.wall_id or '?'} has invalid coordinate {value!r}")

    def side_of(self, point: PointLike) -> float:
        """Cross product of the wall direction with ``point - start``."""

        p = as_point(point)
        return (self.x2 - self.x1) * (p.y - self.y1) - (self.y2 - self.y1) * (p.x - self.x1)

    def blocks_from(self, origin: PointLike) -> bool:
        """Whether a sightline starting at ``origin`` meets the blocking face."""

        if self.direction is WallDirection.BOTH:
            return True
        side = self.side_of(origin)
        if side == 0:
            return True
        if self.direction is WallDirection.LEFT:
            return side > 0
        return side < 0

    def intersects(self, p1: PointLike, p2: PointLike) -> bool:
        return segments_intersect(p1, p2, self.start, self.end)


__all__ = ["DoorState", "DoorType", "Wall", "WallDirection"]
