import pytest

from config.settings import CoverSettings, IntersectionMode
from entities.obstacle import Obstacle
from entities.spatial_entity import SpatialEntity
from modules.cover.elevation import ElevationFilter

GRID = 50
ALL_MODES = list(IntersectionMode)


@pytest.fixture
def ground_pair():
    return SpatialEntity('a', 0, 0), SpatialEntity('t', 500, 0)


def accepts(mode, blocker, pair, **settings):
    attacker, target = pair
    return ElevationFilter(CoverSettings(**settings)).accepts(mode, blocker, attacker, target, GRID)


@pytest.mark.parametrize("mode", ALL_MODES)
def test_blocker_on_the_line_passes(mode, ground_pair):
    assert accepts(mode, Obstacle('b', 250, 0), ground_pair)


@pytest.mark.parametrize("mode", ALL_MODES)
def test_blocker_far_from_the_line_fails_betweenness(mode, ground_pair):
    assert not accepts(mode, Obstacle('b', 250, 300), ground_pair)


@pytest.mark.parametrize("mode", ALL_MODES)
def test_flying_blocker_is_dropped(mode, ground_pair):
    assert not accepts(mode, Obstacle('bird', 250, 0, elevation=20), ground_pair)


def test_low_hover_depends_on_mode(ground_pair):
    hover = Obstacle('hover', 250, 0, elevation=4)
    assert not accepts(IntersectionMode.CENTER_LINE, hover, ground_pair)
    assert not accepts(IntersectionMode.TACTICAL_CORNERS, hover, ground_pair)
    assert accepts(IntersectionMode.SIZE_DIFFERENTIAL, hover, ground_pair)
    assert accepts(IntersectionMode.SAMPLED_3D, hover, ground_pair)
    assert accepts(IntersectionMode.COVERAGE_PERCENTAGE, hover, ground_pair)


def test_elevation_is_interpolated_along_the_line():
    pair = (SpatialEntity('a', 0, 0), SpatialEntity('t', 500, 0, elevation=20))
    # Mid-heights 2.5 and 22.5: 12.5 at the midpoint, 6.5 a fifth of the way.
    middle = Obstacle('middle', 250, 0, elevation=10)
    near = Obstacle('near', 100, 0, elevation=10)
    assert accepts(IntersectionMode.CENTER_LINE, middle, pair)
    assert not accepts(IntersectionMode.CENTER_LINE, near, pair)


def test_coverage_tolerance_band(ground_pair):
    blocker = Obstacle('b', 250, 0, elevation=5.4)
    assert accepts(IntersectionMode.COVERAGE_PERCENTAGE, blocker, ground_pair)
    assert not accepts(
        IntersectionMode.COVERAGE_PERCENTAGE, blocker, ground_pair, coverage_elevation_tolerance=2
    )


def test_filter_can_be_disabled(ground_pair):
    attacker, target = ground_pair
    blockers = [Obstacle('off', 250, 300), Obstacle('bird', 250, 0, elevation=20)]
    enabled = ElevationFilter(CoverSettings()).filter(
        IntersectionMode.TACTICAL_CORNERS, attacker, target, blockers, GRID
    )
    disabled = ElevationFilter(CoverSettings(use_elevation_filter=False)).filter(
        IntersectionMode.TACTICAL_CORNERS, attacker, target, blockers, GRID
    )
    assert enabled == []
    assert disabled == blockers
