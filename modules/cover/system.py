"""Cover detection between tokens, and from area-effect origins, on a scene snapshot."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from config.settings import CoverSettings, IntersectionMode
from core.cover_levels import CoverBenefits, CoverLevel, benefits_for, max_level
from core.errors import CoverDetectionError, GeometryUnavailableError
from core.geometry import PointLike, Rect
from entities.spatial_entity import SpatialEntity
from modules.cover.elevation import ElevationFilter
from modules.cover.filters import eligible_blockers
from modules.cover.overrides import apply_blocker_override
from modules.cover.strategies import EvaluationContext, strategy_for
from modules.scene.snapshot import SceneSnapshot
from modules.walls.system import WallCoverResult, WallOcclusionEvaluator
from utils.logger import log_calls

logger = logging.getLogger(__name__)

# Failures that degrade to "no cover" at the public boundary.
_RECOVERABLE = (CoverDetectionError, ArithmeticError, TypeError, ValueError)


@dataclass(frozen=True)
class CoverReport:
    """How a cover level was reached for one attacker/target pair."""

    attacker_id: str
    target_id: str
    mode: IntersectionMode
    wall_level: CoverLevel = CoverLevel.NONE
    token_level: CoverLevel = CoverLevel.NONE
    level: CoverLevel = CoverLevel.NONE
    blocker_ids: Tuple[str, ...] = ()
    wall_percent: float = 0.0
    wall_fallback: bool = False
    error: Optional[str] = None

    @property
    def benefits(self) -> CoverBenefits:
        return benefits_for(self.level)


class CoverDetector:
    """Resolve cover on a fixed :class:`SceneSnapshot`.

    The detector keeps no per-call state, so a single instance may serve
    concurrent callers. Final cover is the better of wall cover and token
    cover; internal failures are logged and reported as ``NONE``.
    """

    def __init__(self, scene: SceneSnapshot, settings: Optional[CoverSettings] = None) -> None:
        self._scene = scene
        self._settings = settings or CoverSettings()
        self._grid_size = scene.grid_size or self._settings.grid_size
        self._walls = WallOcclusionEvaluator(scene.walls, self._settings)
        self._elevation = ElevationFilter(self._settings)
        self._strategy = strategy_for(self._settings.intersection_mode)

    @property
    def scene(self) -> SceneSnapshot:
        return self._scene

    @property
    def settings(self) -> CoverSettings:
        return self._settings

    @property
    def grid_size(self) -> float:
        return self._grid_size

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @log_calls
    def detect_between_tokens(self, attacker: SpatialEntity, target: SpatialEntity) -> CoverLevel:
        """Return the cover ``target`` has against attacks from ``attacker``."""

        return self.explain(attacker, target).level

    @log_calls
    def detect_from_point(
        self,
        origin: PointLike,
        target: SpatialEntity,
        elevation: float = 0.0,
    ) -> CoverLevel:
        """Cover of ``target`` against an effect emanating from ``origin``."""

        try:
            attacker = SpatialEntity.from_point(origin, elevation=elevation)
        except _RECOVERABLE as exc:
            logger.warning("Invalid cover origin %r: %s", origin, exc)
            return CoverLevel.NONE
        return self.detect_between_tokens(attacker, target)

    def explain(self, attacker: SpatialEntity, target: SpatialEntity) -> CoverReport:
        mode = self._settings.intersection_mode
        try:
            return self._evaluate(attacker, target)
        except _RECOVERABLE as exc:
            attacker_id = getattr(attacker, "entity_id", "?")
            target_id = getattr(target, "entity_id", "?")
            logger.warning("Cover detection failed for %s -> %s: %s", attacker_id, target_id, exc)
            return CoverReport(str(attacker_id), str(target_id), mode, error=str(exc))

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _evaluate(self, attacker: SpatialEntity, target: SpatialEntity) -> CoverReport:
        mode = self._settings.intersection_mode
        if not attacker.is_point and attacker.entity_id == target.entity_id:
            return CoverReport(attacker.entity_id, target.entity_id, mode)

        grid_size = self._grid_size
        wall = self._wall_result(attacker, target)

        blockers = eligible_blockers(
            self._scene.obstacles,
            attacker,
            target,
            self._settings.filter_policy,
            grid_size,
        )
        blockers = self._elevation.filter(mode, attacker, target, blockers, grid_size)

        context = EvaluationContext(
            attacker,
            target,
            tuple(blockers),
            grid_size,
            self._walls,
            self._settings,
        )
        token_level = self._strategy.evaluate(context)
        token_level = apply_blocker_override(
            token_level, blockers, attacker.center, target.center, grid_size
        )

        return CoverReport(
            attacker.entity_id,
            target.entity_id,
            mode,
            wall_level=wall.level,
            token_level=token_level,
            level=max_level((wall.level, token_level)),
            blocker_ids=tuple(blocker.entity_id for blocker in blockers),
            wall_percent=wall.percent,
            wall_fallback=wall.fallback,
        )

    def _wall_result(self, attacker: SpatialEntity, target: SpatialEntity) -> WallCoverResult:
        origin = attacker.center
        try:
            rect = self._target_rect(target)
        except GeometryUnavailableError as exc:
            logger.debug("Wall sampling unavailable for %s: %s", target.entity_id, exc)
            rect = None
        if rect is None and not _finite(target.x, target.y):
            return WallCoverResult(CoverLevel.NONE, CoverLevel.NONE, 0.0, False, False, fallback=True)
        return self._walls.analyze(origin, rect, target.center)

    def _target_rect(self, target: SpatialEntity) -> Rect:
        rect = target.footprint(self._grid_size)
        if not _finite(rect.x1, rect.y1, rect.x2, rect.y2):
            raise GeometryUnavailableError(f"non-finite footprint for {target.entity_id}")
        return rect


def _finite(*values: float) -> bool:
    return all(math.isfinite(value) for value in values)


__all__ = ["CoverDetector", "CoverReport"]
