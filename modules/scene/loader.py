"""Build :class:`SceneSnapshot` instances from YAML/JSON scene descriptions.

Scene files look like::

    grid_size: 50
    tokens:
      - id: ogre
        x: 275
        y: 125
        size: large
        hp: 30
        cover_override: auto
    walls:
      - id: north
        c: [0, 0, 500, 0]
        direction: both

Walls with unusable coordinates are skipped; tokens with missing or broken
fields fall back to a medium, 5 ft tall entity on the ground at the origin.
"""
from __future__ import annotations

import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import yaml

from core.cover_levels import CoverLevel
from core.errors import MalformedEntityError, MalformedWallError
from entities.obstacle import ActorType, Obstacle
from entities.spatial_entity import SizeCategory
from entities.wall import DoorState, DoorType, Wall, WallDirection
from modules.scene.snapshot import SceneSnapshot

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"(-?\d+(?:\.\d+)?)")


def parse_feet(value: Any) -> Optional[float]:
    """Parse ``10``, ``10.5`` or ``"10 ft"`` into a float; ``None`` otherwise."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _NUMBER_RE.search(value.strip())
        if match:
            return float(match.group(1))
    return None


def _coerce_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _coerce_override(value: Any, owner: str) -> Optional[CoverLevel]:
    try:
        return CoverLevel.parse_override(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid cover override %r on %s", value, owner)
        return None


def _require_coordinates(raw: Mapping[str, Any]) -> Sequence[Any]:
    coords = raw.get("c")
    if coords is None:
        coords = [raw.get("x1"), raw.get("y1"), raw.get("x2"), raw.get("y2")]
    if not isinstance(coords, (list, tuple)) or len(coords) != 4:
        raise MalformedWallError(f"wall coordinates must be four numbers, got {coords!r}")
    for value in coords:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise MalformedWallError(f"non-numeric wall coordinate {value!r}")
    return coords


def wall_from_mapping(raw: Mapping[str, Any]) -> Wall:
    """Convert a raw wall record; raises :class:`MalformedWallError` when unusable."""

    if not isinstance(raw, Mapping):
        raise MalformedWallError(f"wall record must be a mapping, got {type(raw).__name__}")
    x1, y1, x2, y2 = _require_coordinates(raw)
    wall_id = raw.get("id")
    try:
        direction = WallDirection(str(raw.get("direction", "both")).lower())
        door = DoorType(str(raw.get("door", "none")).lower())
        door_state = DoorState(str(raw.get("door_state", "closed")).lower())
    except ValueError as exc:
        raise MalformedWallError(f"wall {wall_id!r}: {exc}") from exc

    return Wall(
        float(x1),
        float(y1),
        float(x2),
        float(y2),
        blocks_sight=_coerce_bool(raw.get("sight"), default=True),
        direction=direction,
        door=door,
        door_state=door_state,
        provides_cover=_coerce_bool(raw.get("provides_cover"), default=True),
        cover_override=_coerce_override(raw.get("cover_override"), f"wall {wall_id!r}"),
        wall_id=None if wall_id is None else str(wall_id),
    )


def _entity_number(raw: Mapping[str, Any], key: str, default: float, entity_id: str) -> float:
    value = parse_feet(raw.get(key))
    if value is None:
        if key in raw:
            logger.warning("Entity %s has invalid %s %r; using %s", entity_id, key, raw.get(key), default)
        return default
    return value


def obstacle_from_mapping(raw: Mapping[str, Any], index: int = 0) -> Obstacle:
    """Convert a raw token record, substituting defaults for malformed fields."""

    if not isinstance(raw, Mapping):
        raise MalformedEntityError(f"token record must be a mapping, got {type(raw).__name__}")

    entity_id = str(raw.get("id") or f"token-{index}")
    if "x" not in raw or "y" not in raw:
        logger.warning("Entity %s has no position; placing it at the origin", entity_id)

    try:
        size = SizeCategory.parse(raw.get("size", SizeCategory.MEDIUM))
    except ValueError:
        logger.warning("Entity %s has invalid size %r; using medium", entity_id, raw.get("size"))
        size = SizeCategory.MEDIUM

    try:
        actor_type = ActorType.parse(raw.get("type", ActorType.CREATURE))
    except ValueError:
        logger.warning("Entity %s has unknown type %r; treating it as a creature", entity_id, raw.get("type"))
        actor_type = ActorType.CREATURE

    width = parse_feet(raw.get("width"))
    height = parse_feet(raw.get("height"))
    hit_points = parse_feet(raw.get("hp"))
    alliance = raw.get("alliance")

    return Obstacle(
        entity_id,
        _entity_number(raw, "x", 0.0, entity_id),
        _entity_number(raw, "y", 0.0, entity_id),
        size=size,
        elevation=_entity_number(raw, "elevation", 0.0, entity_id),
        alliance=None if alliance is None else str(alliance),
        width=width if width is not None and width >= 0 else None,
        height=height if height is not None and height >= 0 else None,
        height_ft=parse_feet(raw.get("height_ft")),
        hit_points=None if hit_points is None else int(hit_points),
        undetected=_coerce_bool(raw.get("undetected")),
        prone=_coerce_bool(raw.get("prone")),
        never_blocks=_coerce_bool(raw.get("ignore_auto_cover")),
        hidden=_coerce_bool(raw.get("hidden")),
        actor_type=actor_type,
        grants_cover=_coerce_bool(raw.get("grants_cover")),
        cover_override=_coerce_override(raw.get("cover_override"), f"token {entity_id}"),
    )


def scene_from_mapping(data: Optional[Mapping[str, Any]]) -> SceneSnapshot:
    data = data or {}
    grid_size = parse_feet(data.get("grid_size"))
    if grid_size is not None and grid_size <= 0:
        logger.warning("Ignoring non-positive grid_size %r", data.get("grid_size"))
        grid_size = None

    obstacles: List[Obstacle] = []
    for index, raw in enumerate(data.get("tokens") or []):
        try:
            obstacles.append(obstacle_from_mapping(raw, index))
        except MalformedEntityError as exc:
            logger.warning("Skipping token #%d: %s", index, exc)

    walls: List[Wall] = []
    for index, raw in enumerate(data.get("walls") or []):
        try:
            walls.append(wall_from_mapping(raw))
        except MalformedWallError as exc:
            logger.debug("Skipping wall #%d: %s", index, exc)

    return SceneSnapshot(tuple(obstacles), tuple(walls), grid_size)


def load_scene(path: Union[str, Path]) -> SceneSnapshot:
    """Read a YAML (or JSON, which YAML accepts) scene file."""

    with open(path, "r", encoding="utf-8") as handle:
        data: Dict[str, Any] = yaml.safe_load(handle) or {}
    return scene_from_mapping(data)


__all__ = [
    "load_scene",
    "obstacle_from_mapping",
    "parse_feet",
    "scene_from_mapping",
    "wall_from_mapping",
]
