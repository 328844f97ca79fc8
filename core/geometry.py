"""Plane geometry primitives shared by the cover evaluators.

Every helper accepts :class:`Point` instances or plain ``(x, y)`` pairs so
callers can pass whichever representation they already hold.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, List, Optional, Sequence, Tuple, Union

import numpy as np

_BETWEEN_EPSILON: Final[float] = 1e-6


@dataclass(frozen=True)
class Point:
    """A position on the scene plane, in scene length units."""

    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y


PointLike = Union[Point, Tuple[float, float], Sequence[float]]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with ``x1 <= x2`` and ``y1 <= y2``."""

    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self) -> None:
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise ValueError(
                f"rectangle corners are inverted: ({self.x1}, {self.y1}) -> ({self.x2}, {self.y2})"
            )

    @classmethod
    def from_center(cls, cx: float, cy: float, width: float, height: float) -> "Rect":
        half_w = abs(width) / 2
        half_h = abs(height) / 2
        return cls(cx - half_w, cy - half_h, cx + half_w, cy + half_h)

    @property
    def width(self) -> float:
        return self.x2 - self.x1

    @property
    def height(self) -> float:
        return self.y2 - self.y1

    @property
    def center(self) -> Point:
        return Point((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def longer_side(self) -> float:
        return max(self.width, self.height)

    @property
    def half_diagonal(self) -> float:
        return math.hypot(self.width, self.height) / 2


@dataclass(frozen=True)
class VerticalSpan:
    """Elevation interval occupied by an entity, in feet."""

    bottom: float
    top: float

    def __post_init__(self) -> None:
        if self.bottom > self.top:
            raise ValueError(f"vertical span bottom {self.bottom} is above top {self.top}")

    @property
    def mid(self) -> float:
        return (self.bottom + self.top) / 2

    def contains(self, z: float) -> bool:
        return self.bottom <= z <= self.top

    def strictly_contains(self, z: float) -> bool:
        return self.bottom < z < self.top

    def overlaps(self, low: float, high: float) -> bool:
        return self.bottom <= high and self.top >= low


def as_point(value: PointLike) -> Point:
    if isinstance(value, Point):
        return value
    x, y = value
    return Point(float(x), float(y))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


# ----------------------------------------------------------------------
# Point / segment helpers
# ----------------------------------------------------------------------
def point_in_rect(px: float, py: float, rect: Rect) -> bool:
    """Return ``True`` when ``(px, py)`` lies inside or on the border of ``rect``."""

    return rect.x1 <= px <= rect.x2 and rect.y1 <= py <= rect.y2


def projection_fraction(pt: PointLike, a: PointLike, b: PointLike) -> float:
    """Return the clamped parameter of ``pt`` projected onto segment ``ab``."""

    p, a, b = as_point(pt), as_point(a), as_point(b)
    abx = b.x - a.x
    aby = b.y - a.y
    ab2 = abx * abx + aby * aby
    if ab2 == 0:
        return 0.0
    t = ((p.x - a.x) * abx + (p.y - a.y) * aby) / ab2
    return max(0.0, min(1.0, t))


def distance_point_to_segment(pt: PointLike, a: PointLike, b: PointLike) -> float:
    """Euclidean distance from ``pt`` to the closest point of segment ``ab``."""

    p, a, b = as_point(pt), as_point(a), as_point(b)
    t = projection_fraction(p, a, b)
    cx = a.x + t * (b.x - a.x)
    cy = a.y + t * (b.y - a.y)
    return math.hypot(p.x - cx, p.y - cy)


def point_between_on_segment(pt: PointLike, a: PointLike, b: PointLike) -> bool:
    """Return ``True`` when ``pt`` falls within the bounding box of ``ab``."""

    p, a, b = as_point(pt), as_point(a), as_point(b)
    return (
        min(a.x, b.x) - _BETWEEN_EPSILON <= p.x <= max(a.x, b.x) + _BETWEEN_EPSILON
        and min(a.y, b.y) - _BETWEEN_EPSILON <= p.y <= max(a.y, b.y) + _BETWEEN_EPSILON
    )


def orientation(a: PointLike, b: PointLike, c: PointLike) -> int:
    """Sign of the turn ``a -> b -> c``: ``1``, ``-1`` or ``0`` when collinear."""

    a, b, c = as_point(a), as_point(b), as_point(c)
    value = (b.y - a.y) * (c.x - a.x) - (b.x - a.x) * (c.y - a.y)
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _on_segment(a: Point, b: Point, c: Point) -> bool:
    return min(a.x, b.x) <= c.x <= max(a.x, b.x) and min(a.y, b.y) <= c.y <= max(a.y, b.y)


def segments_intersect(p1: PointLike, p2: PointLike, q1: PointLike, q2: PointLike) -> bool:
    """Orientation-based segment intersection test.

    Collinear and touching configurations are resolved with bounding-box
    containment, which keeps the predicate symmetric under swapping the
    endpoints of either segment or the two segments themselves.
    """

    p1, p2, q1, q2 = as_point(p1), as_point(p2), as_point(q1), as_point(q2)
    o1 = orientation(p1, p2, q1)
    o2 = orientation(p1, p2, q2)
    o3 = orientation(q1, q2, p1)
    o4 = orientation(q1, q2, p2)

    if o1 != o2 and o3 != o4:
        return True
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2):
        return True
    return False


# ----------------------------------------------------------------------
# Rectangle helpers
# ----------------------------------------------------------------------
def rect_corners(rect: Rect) -> List[Point]:
    """Corners in top-left, top-right, bottom-right, bottom-left order."""

    return [
        Point(rect.x1, rect.y1),
        Point(rect.x2, rect.y1),
        Point(rect.x2, rect.y2),
        Point(rect.x1, rect.y2),
    ]


def rect_edges(rect: Rect) -> List[Tuple[Point, Point]]:
    """Edges as ``(start, end)`` pairs: top, right, bottom, left."""

    corners = rect_corners(rect)
    return [(corners[idx], corners[(idx + 1) % 4]) for idx in range(4)]


def segment_intersects_rect(p1: PointLike, p2: PointLike, rect: Rect) -> bool:
    """Return ``True`` if either endpoint is inside ``rect`` or the segment crosses an edge."""

    p1, p2 = as_point(p1), as_point(p2)
    if point_in_rect(p1.x, p1.y, rect) or point_in_rect(p2.x, p2.y, rect):
        return True
    return any(segments_intersect(p1, p2, a, b) for a, b in rect_edges(rect))


def segment_rect_intersection_range(
    p1: PointLike, p2: PointLike, rect: Rect
) -> Optional[Tuple[float, float]]:
    """Liang–Barsky clip of segment ``p1p2`` against ``rect``.

    Returns the ``(t0, t1)`` parameter interval of the portion inside the
    rectangle, or ``None`` when the clipped interval is empty.
    """

    p1, p2 = as_point(p1), as_point(p2)
    dx = p2.x - p1.x
    dy = p2.y - p1.y
    t0, t1 = 0.0, 1.0
    constraints = (
        (-dx, p1.x - rect.x1),
        (dx, rect.x2 - p1.x),
        (-dy, p1.y - rect.y1),
        (dy, rect.y2 - p1.y),
    )
    for p, q in constraints:
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    if t0 > t1:
        return None
    return t0, t1


def segment_rect_intersection_length(p1: PointLike, p2: PointLike, rect: Rect) -> float:
    """Length of the part of segment ``p1p2`` lying inside ``rect`` (``>= 0``)."""

    clipped = segment_rect_intersection_range(p1, p2, rect)
    if clipped is None:
        return 0.0
    p1, p2 = as_point(p1), as_point(p2)
    t0, t1 = clipped
    # Snap clipped endpoints onto the edges they were clipped against.
    x0, y0 = _clip_point(p1, p2, t0, rect)
    x1, y1 = _clip_point(p1, p2, t1, rect)
    return math.hypot(x1 - x0, y1 - y0)


def _clip_point(p1: Point, p2: Point, t: float, rect: Rect) -> Tuple[float, float]:
    if t <= 0.0:
        return p1.x, p1.y
    if t >= 1.0:
        return p2.x, p2.y
    x = p1.x + t * (p2.x - p1.x)
    y = p1.y + t * (p2.y - p1.y)
    return min(max(x, rect.x1), rect.x2), min(max(y, rect.y1), rect.y2)


def sample_rect_perimeter(rect: Rect, samples_per_edge: int) -> List[Point]:
    """Return ``4 * samples_per_edge`` points spread evenly along the perimeter.

    Each edge contributes its start corner plus ``samples_per_edge - 1``
    interior points; the end corner belongs to the next edge.
    """

    count = max(1, int(samples_per_edge))
    fractions = np.linspace(0.0, 1.0, count, endpoint=False)
    points: List[Point] = []
    for start, end in rect_edges(rect):
        xs = start.x + fractions * (end.x - start.x)
        ys = start.y + fractions * (end.y - start.y)
        points.extend(Point(float(x), float(y)) for x, y in zip(xs, ys))
    return points


__all__ = [
    "Point",
    "PointLike",
    "Rect",
    "VerticalSpan",
    "as_point",
    "distance_point_to_segment",
    "lerp",
    "orientation",
    "point_between_on_segment",
    "point_in_rect",
    "projection_fraction",
    "rect_corners",
    "rect_edges",
    "sample_rect_perimeter",
    "segment_intersects_rect",
    "segment_rect_intersection_length",
    "segment_rect_intersection_range",
    "segments_intersect",
]
