"""Test bootstrap: ensure the repository root is on sys.path.

This allows absolute imports like `core.geometry` and `modules.cover`
which assume the working directory is the repository root.
"""
import sys, os
PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

import pytest

from config.settings import CoverSettings
from entities.spatial_entity import SpatialEntity


@pytest.fixture
def settings():
    return CoverSettings()


@pytest.fixture
def attacker():
    return SpatialEntity('attacker', 0.0, 0.0)


@pytest.fixture
def target():
    return SpatialEntity('target', 100.0, 0.0)
