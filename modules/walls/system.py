"""Wall occlusion: how much of a target's footprint is shadowed by static walls."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from config.settings import CoverSettings
from core.cover_levels import CoverLevel, meets_threshold
from core.errors import MalformedWallError
from core.geometry import PointLike, Rect, as_point, sample_rect_perimeter
from entities.wall import Wall

logger = logging.getLogger(__name__)


def combine_wall_override(
    computed: CoverLevel,
    overrides: Iterable[Optional[CoverLevel]],
    *,
    scan_found_wall: bool,
    ceiling: bool = True,
) -> CoverLevel:
    """Fold wall overrides into the computed wall level.

    Any ``none`` override forces ``none``. Otherwise the strongest override is
    used: returned as-is when the scan found no wall (a floor), or as a
    ceiling on ``computed`` when it did. ``ceiling=False`` makes the override
    replace the computed level.
    """

    levels = [CoverLevel(level) for level in overrides if level is not None]
    if not levels:
        return computed
    if CoverLevel.NONE in levels:
        return CoverLevel.NONE
    override = max(levels)
    if not scan_found_wall or not ceiling:
        return override
    return min(computed, override)


@dataclass(frozen=True)
class WallCoverResult:
    """Breakdown of a wall evaluation, kept for diagnostics."""

    level: CoverLevel
    computed: CoverLevel
    percent: float
    center_blocked: bool
    scan_found_wall: bool
    overrides: Tuple[CoverLevel, ...] = ()
    fallback: bool = False


class WallOcclusionEvaluator:
    """Evaluate wall cover for a fixed wall set and settings snapshot.

    Walls carrying a manual override are kept apart from the threshold scan:
    their override value is combined with the scan result afterwards.
    """

    def __init__(self, walls: Sequence[Wall], settings: Optional[CoverSettings] = None) -> None:
        self._settings = settings or CoverSettings()
        self._scan_walls: List[Wall] = []
        self._override_walls: List[Wall] = []
        for wall in walls:
            try:
                wall.validate()
            except MalformedWallError as exc:
                logger.debug("Skipping malformed wall: %s", exc)
                continue
            if wall.has_override:
                self._override_walls.append(wall)
            else:
                self._scan_walls.append(wall)

    @property
    def walls(self) -> Tuple[Wall, ...]:
        return tuple(self._scan_walls) + tuple(self._override_walls)

    # ------------------------------------------------------------------
    # Ray tests
    # ------------------------------------------------------------------
    @staticmethod
    def blocks_ray(wall: Wall, p1: PointLike, p2: PointLike) -> bool:
        """Whether ``wall`` blocks the sightline from ``p1`` to ``p2``."""

        if not wall.blocks_sight or not wall.provides_cover:
            return False
        if wall.is_open_door:
            return False
        if not wall.blocks_from(p1):
            return False
        return wall.intersects(p1, p2)

    def ray_blocked(self, p1: PointLike, p2: PointLike) -> bool:
        return any(self.blocks_ray(wall, p1, p2) for wall in self._scan_walls)

    def override_levels(self, p1: PointLike, p2: PointLike) -> List[CoverLevel]:
        """Overrides of walls crossing ``p1 -> p2`` from their blocking side."""

        levels: List[CoverLevel] = []
        for wall in self._override_walls:
            if wall.is_open_door or not wall.blocks_from(p1):
                continue
            if wall.intersects(p1, p2):
                levels.append(wall.cover_override)
        return levels

    # ------------------------------------------------------------------
    # Coverage
    # ------------------------------------------------------------------
    def coverage_percent(
        self,
        origin: PointLike,
        target_rect: Rect,
        target_center: Optional[PointLike] = None,
    ) -> Tuple[float, bool, bool]:
        """Return ``(weighted_percent, center_blocked, any_sample_blocked)``.

        Sample rays run from ``origin`` to points spread along the target's
        perimeter. When the centre ray is clear the raw percentage is scaled
        by ``wall_edge_only_weight`` so edge grazing alone stays low.
        """

        origin = as_point(origin)
        center = as_point(target_center) if target_center is not None else target_rect.center
        samples = sample_rect_perimeter(target_rect, self._settings.wall_samples_per_edge)
        blocked = sum(1 for point in samples if self.ray_blocked(origin, point))
        raw = blocked / max(1, len(samples)) * 100.0
        center_blocked = self.ray_blocked(origin, center)
        weight = 1.0 if center_blocked else self._settings.wall_edge_only_weight
        return min(100.0, raw * weight), center_blocked, blocked > 0 or center_blocked

    def level_for_percent(self, percent: float) -> CoverLevel:
        settings = self._settings
        if meets_threshold(percent, settings.wall_greater_threshold):
            return CoverLevel.GREATER if settings.wall_allow_greater else CoverLevel.STANDARD
        if meets_threshold(percent, settings.wall_standard_threshold):
            return CoverLevel.STANDARD
        return CoverLevel.NONE

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def analyze(
        self,
        origin: PointLike,
        target_rect: Optional[Rect],
        target_center: Optional[PointLike] = None,
    ) -> WallCoverResult:
        origin = as_point(origin)
        if target_rect is None:
            if target_center is None:
                return WallCoverResult(CoverLevel.NONE, CoverLevel.NONE, 0.0, False, False, fallback=True)
            return self._single_ray(origin, as_point(target_center))

        center = as_point(target_center) if target_center is not None else target_rect.center
        percent, center_blocked, found = self.coverage_percent(origin, target_rect, center)
        computed = self.level_for_percent(percent)
        overrides = tuple(self.override_levels(origin, center))
        level = combine_wall_override(
            computed,
            overrides,
            scan_found_wall=found,
            ceiling=self._settings.wall_override_ceiling,
        )
        return WallCoverResult(level, computed, percent, center_blocked, found, overrides)

    def evaluate(
        self,
        origin: PointLike,
        target_rect: Optional[Rect],
        target_center: Optional[PointLike] = None,
    ) -> CoverLevel:
        return self.analyze(origin, target_rect, target_center).level

    def _single_ray(self, origin, center) -> WallCoverResult:
        logger.debug("Target footprint unavailable; using a single centre ray")
        blocked = self.ray_blocked(origin, center)
        computed = CoverLevel.STANDARD if blocked else CoverLevel.NONE
        overrides = tuple(self.override_levels(origin, center))
        level = combine_wall_override(
            computed,
            overrides,
            scan_found_wall=blocked,
            ceiling=self._settings.wall_override_ceiling,
        )
        return WallCoverResult(
            level,
            computed,
            100.0 if blocked else 0.0,
            blocked,
            blocked,
            overrides,
            fallback=True,
        )


__all__ = ["WallCoverResult", "WallOcclusionEvaluator", "combine_wall_override"]
