"""Manual cover overrides for walls and blockers.

Wall overrides bound the computed wall level and are folded in by the wall
evaluator (:func:`combine_wall_override`); blocker overrides replace the
computed token level outright.
"""
from __future__ import annotations

import logging
from typing import Sequence

from core.cover_levels import CoverLevel
from core.geometry import PointLike, segment_intersects_rect
from entities.obstacle import Obstacle
from modules.walls.system import combine_wall_override

logger = logging.getLogger(__name__)


def apply_blocker_override(
    computed: CoverLevel,
    blockers: Sequence[Obstacle],
    p1: PointLike,
    p2: PointLike,
    grid_size: float,
) -> CoverLevel:
    """Return the first touching blocker's override, else ``computed``."""

    for blocker in blockers:
        override = getattr(blocker, "cover_override", None)
        if override is None:
            continue
        if segment_intersects_rect(p1, p2, blocker.footprint(grid_size)):
            logger.debug(
                "Blocker %s overrides token cover %s -> %s",
                blocker.entity_id,
                computed.label,
                override.label,
            )
            return override
    return computed


__all__ = ["apply_blocker_override", "combine_wall_override"]
