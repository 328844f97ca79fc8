import math

import pytest

from core.geometry import (
    Point,
    Rect,
    VerticalSpan,
    distance_point_to_segment,
    orientation,
    point_between_on_segment,
    point_in_rect,
    projection_fraction,
    rect_corners,
    rect_edges,
    sample_rect_perimeter,
    segment_intersects_rect,
    segment_rect_intersection_length,
    segment_rect_intersection_range,
    segments_intersect,
)

SEGMENT_CASES = [
    # crossing
    ((0, 0), (10, 10), (0, 10), (10, 0), True),
    # parallel, apart
    ((0, 0), (10, 0), (0, 5), (10, 5), False),
    # touching at an endpoint
    ((0, 0), (5, 5), (5, 5), (10, 0), True),
    # collinear and overlapping
    ((0, 0), (10, 0), (5, 0), (15, 0), True),
    # collinear and disjoint
    ((0, 0), (4, 0), (6, 0), (10, 0), False),
    # T junction
    ((0, 0), (10, 0), (5, -5), (5, 0), True),
    # would cross if extended
    ((0, 0), (4, 4), (10, 0), (6, 3), False),
]


@pytest.mark.parametrize("p1,p2,q1,q2,expected", SEGMENT_CASES)
def test_segments_intersect_cases(p1, p2, q1, q2, expected):
    assert segments_intersect(p1, p2, q1, q2) is expected


@pytest.mark.parametrize("p1,p2,q1,q2,expected", SEGMENT_CASES)
def test_segments_intersect_is_symmetric(p1, p2, q1, q2, expected):
    assert segments_intersect(q1, q2, p1, p2) is expected
    assert segments_intersect(p2, p1, q2, q1) is expected


def test_orientation_signs():
    assert orientation((0, 0), (10, 0), (5, 5)) == -1
    assert orientation((0, 0), (10, 0), (5, -5)) == 1
    assert orientation((0, 0), (10, 0), (20, 0)) == 0


def test_rect_rejects_inverted_corners():
    with pytest.raises(ValueError):
        Rect(10, 0, 0, 10)


def test_rect_properties():
    rect = Rect.from_center(50, 0, 20, 10)
    assert rect == Rect(40, -5, 60, 5)
    assert rect.center == Point(50, 0)
    assert rect.longer_side == 20
    assert rect.half_diagonal == pytest.approx(math.hypot(20, 10) / 2)


def test_vertical_span_checks():
    span = VerticalSpan(0, 5)
    assert span.mid == 2.5
    assert span.contains(5)
    assert not span.strictly_contains(5)
    assert span.overlaps(4, 10)
    assert not span.overlaps(6, 10)
    with pytest.raises(ValueError):
        VerticalSpan(5, 0)


def test_point_in_rect_includes_border():
    rect = Rect(0, 0, 10, 10)
    assert point_in_rect(0, 5, rect)
    assert point_in_rect(10, 10, rect)
    assert not point_in_rect(10.01, 5, rect)


def test_distance_and_projection_are_clamped():
    assert distance_point_to_segment((5, 5), (0, 0), (10, 0)) == pytest.approx(5)
    assert distance_point_to_segment((15, 0), (0, 0), (10, 0)) == pytest.approx(5)
    assert projection_fraction((5, 3), (0, 0), (10, 0)) == pytest.approx(0.5)
    assert projection_fraction((-5, 0), (0, 0), (10, 0)) == 0.0
    assert projection_fraction((3, 3), (1, 1), (1, 1)) == 0.0


def test_point_between_on_segment():
    assert point_between_on_segment((5, 0), (0, 0), (10, 0))
    assert not point_between_on_segment((11, 0), (0, 0), (10, 0))


def test_corners_and_edges_order():
    rect = Rect(0, 0, 10, 20)
    assert rect_corners(rect) == [Point(0, 0), Point(10, 0), Point(10, 20), Point(0, 20)]
    edges = rect_edges(rect)
    assert len(edges) == 4
    assert edges[-1] == (Point(0, 20), Point(0, 0))


def test_clipped_length_through_rect():
    rect = Rect(40, -10, 60, 10)
    assert segment_rect_intersection_length((0, 0), (100, 0), rect) == pytest.approx(20)
    assert segment_rect_intersection_length((100, 0), (0, 0), rect) == pytest.approx(20)
    assert segment_rect_intersection_range((0, 0), (100, 0), rect) == pytest.approx((0.4, 0.6))


def test_clipped_length_outside_is_zero():
    rect = Rect(40, -10, 60, 10)
    assert segment_rect_intersection_length((0, 50), (100, 50), rect) == 0.0
    assert segment_rect_intersection_range((0, 50), (100, 50), rect) is None
    assert segment_rect_intersection_length((0, 0), (30, 0), rect) == 0.0


def test_clipped_length_inside_equals_segment_length():
    rect = Rect(0, 0, 100, 100)
    assert segment_rect_intersection_length((10, 10), (40, 50), rect) == pytest.approx(50)


def test_segment_intersects_rect():
    rect = Rect(40, -10, 60, 10)
    assert segment_intersects_rect((0, 0), (100, 0), rect)
    assert segment_intersects_rect((50, 0), (200, 200), rect)
    assert not segment_intersects_rect((0, 20), (100, 20), rect)


def test_perimeter_samples_are_even_and_unique():
    rect = Rect(0, 0, 10, 10)
    points = sample_rect_perimeter(rect, 5)
    assert len(points) == 20
    assert len(set(points)) == 20
    assert points[0] == Point(0, 0)
    assert points[1] == Point(2, 0)
    for point in points:
        on_vertical = point.x in (0, 10)
        on_horizontal = point.y in (0, 10)
        assert on_vertical or on_horizontal


def test_clipped_length_is_exact_on_grid_edges():
    # Half of a 50x100 footprint's longer side; must not round below 50.
    length = segment_rect_intersection_length((25, 25), (475, 25), Rect(300, -25, 350, 75))
    assert length == pytest.approx(50, abs=1e-12)
    diagonal = segment_rect_intersection_length((0, 0), (300, 300), Rect(100, 100, 200, 200))
    assert diagonal == pytest.approx(100 * math.sqrt(2))


def test_corner_touch_has_zero_length_but_intersects():
    rect = Rect(250, 200, 300, 250)
    assert segment_rect_intersection_length((25, 25), (475, 475), rect) == 0.0
    assert segment_intersects_rect((25, 25), (475, 475), rect)
