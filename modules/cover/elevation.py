"""Elevation-aware filtering of blockers along a sightline."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from config.settings import CoverSettings, IntersectionMode
from core.geometry import Point, distance_point_to_segment, lerp, projection_fraction
from entities.spatial_entity import DEFAULT_GRID_SIZE, SpatialEntity

logger = logging.getLogger(__name__)


class ElevationFilter:
    """Drop blockers that cannot reach the sightline used by a strategy.

    A blocker first has to sit roughly between the two entities on the
    plane. The sightline elevation at the blocker is then interpolated by
    the blocker's projection onto the line and compared with the blocker's
    vertical span, using a rule that depends on the active mode.
    """

    def __init__(self, settings: Optional[CoverSettings] = None) -> None:
        self._settings = settings or CoverSettings()

    def is_between(
        self,
        blocker: SpatialEntity,
        attacker: SpatialEntity,
        target: SpatialEntity,
        grid_size: float = DEFAULT_GRID_SIZE,
    ) -> bool:
        a, b = attacker.center, target.center
        length = ((b.x - a.x) ** 2 + (b.y - a.y) ** 2) ** 0.5
        allowance = (
            blocker.footprint(grid_size).half_diagonal
            + self._settings.betweenness_tolerance * length
        )
        return distance_point_to_segment(blocker.center, a, b) <= allowance

    def accepts(
        self,
        mode: IntersectionMode,
        blocker: SpatialEntity,
        attacker: SpatialEntity,
        target: SpatialEntity,
        grid_size: float = DEFAULT_GRID_SIZE,
    ) -> bool:
        if not self.is_between(blocker, attacker, target, grid_size):
            return False

        span = blocker.vertical_span()
        a_span = attacker.vertical_span()
        t_span = target.vertical_span()

        if mode is IntersectionMode.CENTER_LINE:
            z = self._center_elevation(blocker, attacker, target)
            return span.contains(z)

        if mode is IntersectionMode.COVERAGE_PERCENTAGE:
            z = self._center_elevation(blocker, attacker, target)
            tolerance = self._settings.coverage_elevation_tolerance
            return span.overlaps(z - tolerance, z + tolerance)

        pairs = self._corner_fractions(blocker, attacker, target, grid_size)
        if mode is IntersectionMode.TACTICAL_CORNERS:
            return any(span.contains(lerp(a_span.mid, t_span.mid, t)) for t in pairs)

        low = min(lerp(a_span.bottom, t_span.bottom, t) for t in pairs)
        high = max(lerp(a_span.top, t_span.top, t) for t in pairs)
        return span.overlaps(low, high)

    def filter(
        self,
        mode: IntersectionMode,
        attacker: SpatialEntity,
        target: SpatialEntity,
        blockers: Iterable[SpatialEntity],
        grid_size: float = DEFAULT_GRID_SIZE,
    ) -> List[SpatialEntity]:
        blockers = list(blockers)
        if not self._settings.use_elevation_filter:
            return blockers
        kept = []
        for blocker in blockers:
            if self.accepts(mode, blocker, attacker, target, grid_size):
                kept.append(blocker)
            else:
                logger.debug("Elevation filter dropped %s (%s)", blocker.entity_id, mode.value)
        return kept

    # ------------------------------------------------------------------
    @staticmethod
    def _center_elevation(blocker, attacker, target) -> float:
        t = projection_fraction(blocker.center, attacker.center, target.center)
        return lerp(attacker.vertical_span().mid, target.vertical_span().mid, t)

    @staticmethod
    def _corner_fractions(blocker, attacker, target, grid_size) -> Tuple[float, ...]:
        center: Point = blocker.center
        return tuple(
            projection_fraction(center, a_corner, t_corner)
            for a_corner in attacker.corners(grid_size)
            for t_corner in target.corners(grid_size)
        )


__all__ = ["ElevationFilter"]
