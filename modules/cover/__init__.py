"""Token and wall cover detection on scene snapshots."""
from .batch import detect_for_template, detect_many
from .system import CoverDetector, CoverReport

__all__ = [
    "CoverDetector",
    "CoverReport",
    "detect_for_template",
    "detect_many",
]
