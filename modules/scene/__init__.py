"""Scene snapshots and the file loader that builds them."""
from .loader import load_scene, scene_from_mapping
from .snapshot import SceneSnapshot

__all__ = [
    "SceneSnapshot",
    "load_scene",
    "scene_from_mapping",
]
