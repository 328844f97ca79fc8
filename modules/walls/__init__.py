"""Wall occlusion helpers."""
from .system import WallCoverResult, WallOcclusionEvaluator, combine_wall_override

__all__ = [
    "WallCoverResult",
    "WallOcclusionEvaluator",
    "combine_wall_override",
]
