from core.cover_levels import CoverLevel
from entities.obstacle import Obstacle
from modules.cover.overrides import apply_blocker_override

GRID = 50
P1, P2 = (25, 25), (475, 25)


def test_no_override_keeps_computed():
    blockers = [Obstacle('m', 225, 25)]
    assert apply_blocker_override(CoverLevel.LESSER, blockers, P1, P2, GRID) is CoverLevel.LESSER


def test_override_replaces_even_when_lower():
    blockers = [Obstacle('barrel', 225, 25, cover_override='lesser')]
    assert apply_blocker_override(CoverLevel.GREATER, blockers, P1, P2, GRID) is CoverLevel.LESSER


def test_override_replaces_when_higher():
    blockers = [Obstacle('tower-shield', 225, 25, cover_override=CoverLevel.GREATER)]
    assert apply_blocker_override(CoverLevel.NONE, blockers, P1, P2, GRID) is CoverLevel.GREATER


def test_override_needs_to_touch_the_sightline():
    blockers = [Obstacle('aside', 225, 200, cover_override='greater')]
    assert apply_blocker_override(CoverLevel.LESSER, blockers, P1, P2, GRID) is CoverLevel.LESSER


def test_first_override_wins():
    blockers = [
        Obstacle('plain', 125, 25),
        Obstacle('first', 225, 25, cover_override='standard'),
        Obstacle('second', 325, 25, cover_override='none'),
    ]
    assert apply_blocker_override(CoverLevel.LESSER, blockers, P1, P2, GRID) is CoverLevel.STANDARD
