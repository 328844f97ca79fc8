"""Blocker eligibility: which obstacles may contribute token cover at all."""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from config.settings import FilterPolicy
from entities.obstacle import Obstacle
from entities.spatial_entity import DEFAULT_GRID_SIZE, SpatialEntity

logger = logging.getLogger(__name__)


class ExclusionReason(str, Enum):
    SELF = "self"
    MALFORMED = "malformed"
    SAME_CELL = "same_cell"
    NON_CORPOREAL = "non_corporeal"
    HIDDEN = "hidden"
    NEVER_BLOCKS = "never_blocks"
    UNDETECTED = "undetected"
    DEAD = "dead"
    PRONE = "prone"
    ALLIED = "allied"
    TINY = "tiny"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def has_position(entity: SpatialEntity) -> bool:
    return _is_number(entity.x) and _is_number(entity.y)


def repair_obstacle(obstacle: Obstacle) -> Optional[Obstacle]:
    """Return ``obstacle`` with unusable vertical or footprint data defaulted.

    Elevation falls back to 0 and broken height or footprint overrides fall
    back to the size category's values. Returns ``None`` when the position
    itself is unusable, since such a blocker cannot be placed at all.
    """

    if not has_position(obstacle):
        return None
    changes: Dict[str, Any] = {}
    if not _is_number(obstacle.elevation):
        changes["elevation"] = 0.0
    for name in ("width", "height", "height_ft"):
        value = getattr(obstacle, name)
        if value is not None and not _is_number(value):
            changes[name] = None
    if not changes:
        return obstacle
    return replace(obstacle, **changes)


def exclusion_reason(
    obstacle: Obstacle,
    attacker: SpatialEntity,
    target: SpatialEntity,
    policy: FilterPolicy,
    grid_size: float = DEFAULT_GRID_SIZE,
) -> Optional[ExclusionReason]:
    """Return why ``obstacle`` cannot block between the pair, or ``None``.

    Checks run in a fixed order and the first match wins, so the reason is
    stable for logging and diagnostics.
    """

    # A point origin has no token of its own to exclude.
    if obstacle.entity_id == target.entity_id or (
        not attacker.is_point and obstacle.entity_id == attacker.entity_id
    ):
        return ExclusionReason.SELF
    if not has_position(obstacle):
        return ExclusionReason.MALFORMED
    cell = obstacle.grid_cell(grid_size)
    if cell == attacker.grid_cell(grid_size) or cell == target.grid_cell(grid_size):
        return ExclusionReason.SAME_CELL
    if obstacle.is_non_corporeal:
        return ExclusionReason.NON_CORPOREAL
    if obstacle.hidden:
        return ExclusionReason.HIDDEN
    if obstacle.never_blocks and policy.respect_ignore_flag:
        return ExclusionReason.NEVER_BLOCKS
    if obstacle.undetected and policy.ignore_undetected_obstacles:
        return ExclusionReason.UNDETECTED
    if obstacle.is_dead and policy.ignore_dead_obstacles:
        return ExclusionReason.DEAD
    if obstacle.prone and not policy.allow_prone_obstacles:
        return ExclusionReason.PRONE
    if (
        policy.ignore_allied_obstacles
        and obstacle.alliance is not None
        and obstacle.alliance == attacker.alliance
    ):
        return ExclusionReason.ALLIED
    # Tiny obstacles only shield other tiny creatures.
    if obstacle.is_tiny and not target.is_tiny:
        return ExclusionReason.TINY
    return None


def eligible_blockers(
    obstacles: Iterable[Obstacle],
    attacker: SpatialEntity,
    target: SpatialEntity,
    policy: Optional[FilterPolicy] = None,
    grid_size: float = DEFAULT_GRID_SIZE,
) -> List[Obstacle]:
    """Obstacles that may block between the pair, malformed ones repaired or dropped."""

    policy = policy or FilterPolicy()
    kept: List[Obstacle] = []
    for obstacle in obstacles:
        usable = repair_obstacle(obstacle)
        if usable is None:
            logger.warning("Skipping blocker %s: position is missing or not finite", obstacle.entity_id)
            continue
        if usable is not obstacle:
            logger.debug("Using default elevation or footprint for blocker %s", obstacle.entity_id)
        reason = exclusion_reason(usable, attacker, target, policy, grid_size)
        if reason is None:
            kept.append(usable)
        else:
            logger.debug("Excluding %s as blocker: %s", obstacle.entity_id, reason.value)
    return kept


__all__ = [
    "ExclusionReason",
    "eligible_blockers",
    "exclusion_reason",
    "has_position",
    "repair_obstacle",
]
