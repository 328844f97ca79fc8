"""Immutable scene snapshot handed to the cover detector."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

from entities.obstacle import Obstacle
from entities.wall import Wall


@dataclass(frozen=True)
class SceneSnapshot:
    """Obstacles and walls as they stood when the snapshot was taken.

    ``grid_size`` is the scene's square size in scene units; ``None`` defers to
    the detector settings.
    """

    obstacles: Tuple[Obstacle, ...] = field(default_factory=tuple)
    walls: Tuple[Wall, ...] = field(default_factory=tuple)
    grid_size: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "obstacles", tuple(self.obstacles))
        object.__setattr__(self, "walls", tuple(self.walls))
        if self.grid_size is not None and self.grid_size <= 0:
            raise ValueError("grid_size must be positive")

    def entity(self, entity_id: str) -> Optional[Obstacle]:
        for obstacle in self.obstacles:
            if obstacle.entity_id == entity_id:
                return obstacle
        return None

    def with_obstacles(self, obstacles: Iterable[Obstacle]) -> "SceneSnapshot":
        return replace(self, obstacles=tuple(obstacles))

    def with_walls(self, walls: Iterable[Wall]) -> "SceneSnapshot":
        return replace(self, walls=tuple(walls))


__all__ = ["SceneSnapshot"]
