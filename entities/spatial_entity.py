"""Spatial entities: anything with a footprint, a size category and an elevation."""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, List, Optional, Tuple

from core.geometry import Point, PointLike, Rect, VerticalSpan, as_point, rect_corners

DEFAULT_GRID_SIZE: Final[float] = 50.0
DEFAULT_HEIGHT_FT: Final[float] = 5.0
# Tiny creatures cover a 0.7-square area centred on their position.
TINY_EFFECTIVE_SQUARES: Final[float] = 0.7

GridCell = Tuple[int, int]


class SizeCategory(Enum):
    """Creature size categories with their rank, height and default footprint."""

    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    HUGE = "huge"
    GARGANTUAN = "gargantuan"

    @property
    def rank(self) -> int:
        return _SIZE_RANK[self]

    @property
    def height_ft(self) -> float:
        return _SIZE_HEIGHT_FT[self]

    @property
    def squares(self) -> float:
        return _SIZE_SQUARES[self]

    @classmethod
    def parse(cls, value: object) -> "SizeCategory":
        """Accept a member, a full name or one of the short aliases (``med``, ``lg``...)."""

        if isinstance(value, SizeCategory):
            return value
        if not isinstance(value, str):
            raise ValueError(f"invalid size category {value!r}")
        key = value.strip().lower()
        key = _SIZE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError as exc:
            raise ValueError(f"invalid size category {value!r}") from exc


_SIZE_RANK: Dict[SizeCategory, int] = {
    SizeCategory.TINY: 0,
    SizeCategory.SMALL: 1,
    SizeCategory.MEDIUM: 2,
    SizeCategory.LARGE: 3,
    SizeCategory.HUGE: 4,
    SizeCategory.GARGANTUAN: 5,
}

_SIZE_HEIGHT_FT: Dict[SizeCategory, float] = {
    SizeCategory.TINY: 2.5,
    SizeCategory.SMALL: 5.0,
    SizeCategory.MEDIUM: 5.0,
    SizeCategory.LARGE: 10.0,
    SizeCategory.HUGE: 15.0,
    SizeCategory.GARGANTUAN: 20.0,
}

_SIZE_SQUARES: Dict[SizeCategory, float] = {
    SizeCategory.TINY: 1.0,
    SizeCategory.SMALL: 1.0,
    SizeCategory.MEDIUM: 1.0,
    SizeCategory.LARGE: 2.0,
    SizeCategory.HUGE: 3.0,
    SizeCategory.GARGANTUAN: 4.0,
}

_SIZE_ALIASES: Dict[str, str] = {
    "sm": "small",
    "med": "medium",
    "lg": "large",
    "grg": "gargantuan",
}


@dataclass(frozen=True)
class SpatialEntity:
    """A token-like entity as seen by the cover engine.

    ``x``/``y`` is the centre of the footprint in scene units. ``width`` and
    ``height`` override the size category's footprint (in grid squares) and
    ``height_ft`` overrides its nominal vertical extent. Instances are owned
    by the caller and never mutated by the engine.
    """

    entity_id: str
    x: float
    y: float
    size: SizeCategory = SizeCategory.MEDIUM
    elevation: float = 0.0
    alliance: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    height_ft: Optional[float] = None

    def __post_init__(self) -> None:
        if self.size is None:
            object.__setattr__(self, "size", SizeCategory.MEDIUM)
        elif not isinstance(self.size, SizeCategory):
            object.__setattr__(self, "size", SizeCategory.parse(self.size))
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative")

    @classmethod
    def from_point(
        cls,
        origin: PointLike,
        *,
        elevation: float = 0.0,
        entity_id: str = "point-origin",
    ) -> "SpatialEntity":
        """Zero-size pseudo entity located at ``origin``."""

        point = as_point(origin)
        return cls(entity_id, point.x, point.y, elevation=elevation, width=0.0, height=0.0)

    # ------------------------------------------------------------------
    # Derived geometry
    # ------------------------------------------------------------------
    @property
    def center(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size_rank(self) -> int:
        return self.size.rank

    @property
    def is_tiny(self) -> bool:
        return self.size is SizeCategory.TINY

    @property
    def is_point(self) -> bool:
        return self.width == 0 and self.height == 0

    def squares(self) -> Tuple[float, float]:
        default = self.size.squares
        width = default if self.width is None else self.width
        height = default if self.height is None else self.height
        return width, height

    def footprint(self, grid_size: float = DEFAULT_GRID_SIZE) -> Rect:
        width, height = self.squares()
        return Rect.from_center(self.x, self.y, width * grid_size, height * grid_size)

    def corners(self, grid_size: float = DEFAULT_GRID_SIZE) -> List[Point]:
        """Footprint corners; tiny entities use their reduced effective area."""

        if self.is_tiny and not self.is_point:
            half = grid_size * TINY_EFFECTIVE_SQUARES / 2
            return rect_corners(Rect(self.x - half, self.y - half, self.x + half, self.y + half))
        return rect_corners(self.footprint(grid_size))

    def vertical_extent(self) -> float:
        if self.height_ft is not None:
            return self.height_ft
        return self.size.height_ft

    def vertical_span(self) -> VerticalSpan:
        top = self.elevation + self.vertical_extent()
        return VerticalSpan(min(self.elevation, top), max(self.elevation, top))

    def grid_cell(self, grid_size: float = DEFAULT_GRID_SIZE) -> GridCell:
        """Grid cell holding the entity's centre."""

        return int(math.floor(self.x / grid_size)), int(math.floor(self.y / grid_size))


__all__ = [
    "DEFAULT_GRID_SIZE",
    "DEFAULT_HEIGHT_FT",
    "GridCell",
    "SizeCategory",
    "SpatialEntity",
    "TINY_EFFECTIVE_SQUARES",
]
