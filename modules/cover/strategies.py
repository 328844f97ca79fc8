"""Token cover strategies.

Each strategy turns a filtered blocker set into a :class:`CoverLevel`. They
are stateless; :func:`strategy_for` hands out shared instances keyed by
:class:`IntersectionMode`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

from config.settings import CoverSettings, IntersectionMode
from core.cover_levels import (
    CoverLevel,
    level_from_blocked_count,
    max_level,
    meets_threshold,
    min_level,
)
from core.geometry import (
    Point,
    Rect,
    distance_point_to_segment,
    segment_intersects_rect,
    segment_rect_intersection_length,
)
from entities.spatial_entity import DEFAULT_GRID_SIZE, SpatialEntity
from modules.walls.system import WallOcclusionEvaluator

# Fractions of the vertical band sampled by the 3D strategy.
SAMPLE_FRACTIONS: Tuple[float, ...] = (0.1, 0.5, 0.9)


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a strategy needs for one attacker/target evaluation."""

    attacker: SpatialEntity
    target: SpatialEntity
    blockers: Tuple[SpatialEntity, ...] = ()
    grid_size: float = DEFAULT_GRID_SIZE
    walls: Optional[WallOcclusionEvaluator] = None
    settings: CoverSettings = field(default_factory=CoverSettings)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blockers", tuple(self.blockers))

    @property
    def sightline(self) -> Tuple[Point, Point]:
        return self.attacker.center, self.target.center

    def rect(self, blocker: SpatialEntity) -> Rect:
        return blocker.footprint(self.grid_size)

    def wall_blocks(self, p1: Point, p2: Point) -> bool:
        return self.walls is not None and self.walls.ray_blocked(p1, p2)


def grants_size_upgrade(blocker: SpatialEntity, attacker: SpatialEntity, target: SpatialEntity) -> bool:
    """A blocker two or more size ranks above both creatures grants full cover."""

    return (
        blocker.size_rank - attacker.size_rank >= 2
        and blocker.size_rank - target.size_rank >= 2
    )


def size_rule_level(
    blockers: Sequence[SpatialEntity], attacker: SpatialEntity, target: SpatialEntity
) -> CoverLevel:
    if not blockers:
        return CoverLevel.NONE
    if any(grants_size_upgrade(blocker, attacker, target) for blocker in blockers):
        return CoverLevel.STANDARD
    return CoverLevel.LESSER


class CoverStrategy(ABC):
    """Base class for token cover strategies."""

    mode: IntersectionMode

    @abstractmethod
    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        raise NotImplementedError


class SizeDifferentialStrategy(CoverStrategy):
    mode = IntersectionMode.SIZE_DIFFERENTIAL

    def intersecting(self, context: EvaluationContext) -> Iterator[SpatialEntity]:
        """Blockers crossing the centre sightline by more than a sliver."""

        p1, p2 = context.sightline
        fraction = context.settings.min_intersection_fraction
        for blocker in context.blockers:
            rect = context.rect(blocker)
            length = segment_rect_intersection_length(p1, p2, rect)
            if length > 0 and length > fraction * rect.width:
                yield blocker

    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        return size_rule_level(list(self.intersecting(context)), context.attacker, context.target)


class CenterLineStrategy(SizeDifferentialStrategy):
    """Size rule applied to the single blocker nearest the centre sightline."""

    mode = IntersectionMode.CENTER_LINE

    def nearest(self, context: EvaluationContext) -> Optional[SpatialEntity]:
        p1, p2 = context.sightline
        candidates = list(self.intersecting(context))
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda blocker: distance_point_to_segment(context.rect(blocker).center, p1, p2),
        )

    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        blocker = self.nearest(context)
        if blocker is None:
            return CoverLevel.NONE
        return size_rule_level([blocker], context.attacker, context.target)


class TacticalCornersStrategy(CoverStrategy):
    """Corner-to-corner lines: the attacker picks its best corner.

    From each attacker corner, every line to a target corner blocked by a
    wall or a blocker footprint is counted; the count maps to a level and the
    least cover over all attacker corners is the result.
    """

    mode = IntersectionMode.TACTICAL_CORNERS

    def blocked_counts(self, context: EvaluationContext) -> List[int]:
        rects = [context.rect(blocker) for blocker in context.blockers]
        target_corners = context.target.corners(context.grid_size)
        counts: List[int] = []
        for a_corner in context.attacker.corners(context.grid_size):
            blocked = 0
            for t_corner in target_corners:
                if context.wall_blocks(a_corner, t_corner) or any(
                    segment_rect_intersection_length(a_corner, t_corner, rect) > 0 for rect in rects
                ):
                    blocked += 1
            counts.append(blocked)
        return counts

    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        return min_level(level_from_blocked_count(count) for count in self.blocked_counts(context))


class CoveragePercentageStrategy(CoverStrategy):
    mode = IntersectionMode.COVERAGE_PERCENTAGE

    @staticmethod
    def blocker_percent(p1: Point, p2: Point, rect: Rect) -> float:
        return segment_rect_intersection_length(p1, p2, rect) / max(1.0, rect.longer_side) * 100.0

    def level_for_percent(self, percent: float, settings: CoverSettings) -> CoverLevel:
        if meets_threshold(percent, settings.coverage_greater_threshold):
            return CoverLevel.GREATER
        if meets_threshold(percent, settings.coverage_standard_threshold):
            return CoverLevel.STANDARD
        if meets_threshold(percent, settings.coverage_lesser_threshold):
            return CoverLevel.LESSER
        return CoverLevel.NONE

    def coverage_percent(self, context: EvaluationContext) -> float:
        """Summed per-blocker coverage capped at 100; diagnostic only."""

        p1, p2 = context.sightline
        total = sum(self.blocker_percent(p1, p2, context.rect(b)) for b in context.blockers)
        return min(100.0, total)

    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        p1, p2 = context.sightline
        worst = CoverLevel.NONE
        for blocker in context.blockers:
            percent = self.blocker_percent(p1, p2, context.rect(blocker))
            level = self.level_for_percent(percent, context.settings)
            if level is CoverLevel.GREATER:
                return level
            worst = max_level((worst, level))
        return worst


class Sampled3DStrategy(CoverStrategy):
    """Count centre-line blockers at three elevation slices of the sight band."""

    mode = IntersectionMode.SAMPLED_3D

    @staticmethod
    def sample_elevations(attacker: SpatialEntity, target: SpatialEntity) -> List[float]:
        a_span = attacker.vertical_span()
        t_span = target.vertical_span()
        low = max(a_span.bottom, t_span.bottom)
        high = min(a_span.top, t_span.top)
        if low <= high:
            return [low + (high - low) * f for f in SAMPLE_FRACTIONS]
        return [a_span.mid + (t_span.mid - a_span.mid) * f for f in SAMPLE_FRACTIONS]

    def slice_level(self, context: EvaluationContext, elevation: float) -> CoverLevel:
        p1, p2 = context.sightline
        hits = [
            blocker
            for blocker in context.blockers
            if blocker.vertical_span().strictly_contains(elevation)
            and segment_intersects_rect(p1, p2, context.rect(blocker))
        ]
        level = level_from_blocked_count(len(hits))
        if level is CoverLevel.LESSER and any(
            grants_size_upgrade(b, context.attacker, context.target) for b in hits
        ):
            level = CoverLevel.STANDARD
        return level

    def evaluate(self, context: EvaluationContext) -> CoverLevel:
        worst = CoverLevel.NONE
        for elevation in self.sample_elevations(context.attacker, context.target):
            worst = max_level((worst, self.slice_level(context, elevation)))
            if worst is CoverLevel.GREATER:
                break
        return worst


_STRATEGIES: Dict[IntersectionMode, CoverStrategy] = {
    strategy.mode: strategy
    for strategy in (
        SizeDifferentialStrategy(),
        CenterLineStrategy(),
        TacticalCornersStrategy(),
        CoveragePercentageStrategy(),
        Sampled3DStrategy(),
    )
}


def strategy_for(mode: Union[IntersectionMode, str]) -> CoverStrategy:
    """Return the strategy registered for ``mode`` (raises ``ValueError`` if unknown)."""

    return _STRATEGIES[IntersectionMode(mode)]


__all__ = [
    "CenterLineStrategy",
    "CoveragePercentageStrategy",
    "CoverStrategy",
    "EvaluationContext",
    "SAMPLE_FRACTIONS",
    "Sampled3DStrategy",
    "SizeDifferentialStrategy",
    "TacticalCornersStrategy",
    "grants_size_upgrade",
    "size_rule_level",
    "strategy_for",
]
