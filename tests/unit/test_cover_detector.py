import logging

from config.settings import CoverSettings, IntersectionMode
from core.cover_levels import CoverLevel
from entities.obstacle import Obstacle
from entities.spatial_entity import SpatialEntity
from entities.wall import Wall
from modules.cover import CoverDetector, CoverReport
from modules.scene import SceneSnapshot


def make_detector(**settings):
    scene = SceneSnapshot(
        obstacles=(Obstacle('ogre', 225, 25, size='huge'), Obstacle('corpse', 325, 25, hit_points=0)),
        walls=(Wall(400, 300, 400, 600),),
        grid_size=50,
    )
    return CoverDetector(scene, CoverSettings(**settings))


def test_grid_size_prefers_scene_then_settings():
    assert make_detector().grid_size == 50
    assert CoverDetector(SceneSnapshot(), CoverSettings(grid_size=70)).grid_size == 70


def test_explain_reports_each_stage():
    detector = make_detector(intersection_mode='size_differential')
    report = detector.explain(SpatialEntity('a', 25, 25), SpatialEntity('t', 475, 25))
    assert isinstance(report, CoverReport)
    assert report.mode is IntersectionMode.SIZE_DIFFERENTIAL
    assert report.blocker_ids == ('ogre',)
    assert report.wall_level is CoverLevel.NONE
    assert report.token_level is CoverLevel.STANDARD
    assert report.level is CoverLevel.STANDARD
    assert report.error is None
    assert report.benefits.can_hide


def test_malformed_entity_degrades_to_none(caplog):
    detector = make_detector()
    broken = SpatialEntity('broken', None, 25)
    with caplog.at_level(logging.WARNING, logger='modules.cover.system'):
        level = detector.detect_between_tokens(SpatialEntity('a', 25, 25), broken)
    assert level is CoverLevel.NONE
    assert 'Cover detection failed' in caplog.text
    assert detector.explain(SpatialEntity('a', 25, 25), broken).error


def test_non_finite_target_degrades_to_none():
    detector = make_detector()
    lost = SpatialEntity('lost', float('nan'), 25)
    assert detector.detect_between_tokens(SpatialEntity('a', 25, 25), lost) is CoverLevel.NONE


def test_invalid_origin_degrades_to_none():
    detector = make_detector()
    target = SpatialEntity('t', 475, 25)
    assert detector.detect_from_point(('left', 'right'), target) is CoverLevel.NONE
    assert detector.detect_from_point(None, target) is CoverLevel.NONE


def test_point_origin_uses_wall_geometry():
    detector = make_detector(intersection_mode='size_differential')
    target = SpatialEntity('t', 425, 475)
    # The wall at x=400 stands between the origin and the target.
    assert detector.detect_from_point((25, 475), target) is CoverLevel.STANDARD


def test_debug_logging_traces_public_calls(caplog):
    detector = make_detector()
    with caplog.at_level(logging.DEBUG, logger='modules.cover.system'):
        detector.detect_between_tokens(SpatialEntity('a', 25, 25), SpatialEntity('t', 475, 25))
    assert 'CoverDetector.detect_between_tokens' in caplog.text


def walled_detector(*obstacles):
    scene = SceneSnapshot(obstacles=obstacles, walls=(Wall(250, -500, 250, 500),), grid_size=50)
    return CoverDetector(scene, CoverSettings(intersection_mode='size_differential'))


def test_blocker_without_elevation_uses_ground_level():
    detector = walled_detector(Obstacle('bad', 225, 25, elevation=None))
    report = detector.explain(SpatialEntity('a', 25, 25), SpatialEntity('t', 475, 25))
    assert report.error is None
    assert report.wall_level is CoverLevel.STANDARD
    assert report.blocker_ids == ('bad',)
    assert report.level is CoverLevel.STANDARD


def test_blocker_without_position_is_skipped(caplog):
    detector = walled_detector(Obstacle('lost', float('nan'), 25), Obstacle('ogre', 225, 25, size='huge'))
    with caplog.at_level(logging.WARNING, logger='modules.cover.filters'):
        report = detector.explain(SpatialEntity('a', 25, 25), SpatialEntity('t', 475, 25))
    assert report.error is None
    assert report.blocker_ids == ('ogre',)
    assert report.level is CoverLevel.STANDARD
    assert 'Skipping blocker lost' in caplog.text


def test_point_origin_id_does_not_shadow_target():
    detector = make_detector(intersection_mode='size_differential')
    target = SpatialEntity('point-origin', 425, 475)
    assert detector.detect_from_point((25, 475), target) is CoverLevel.STANDARD
