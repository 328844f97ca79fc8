"""Internal error taxonomy for the cover engine.

These exceptions never cross the public detector boundary: the orchestrator
catches them and degrades to a best-effort :class:`~core.cover_levels.CoverLevel`.
"""
from __future__ import annotations


class CoverDetectionError(Exception):
    """Base class for recoverable failures inside the cover pipeline."""


class GeometryUnavailableError(CoverDetectionError):
    """Scene geometry needed by an evaluator is missing or unusable."""


class MalformedWallError(CoverDetectionError):
    """A wall record carries non-numeric or non-finite coordinates."""


class MalformedEntityError(CoverDetectionError):
    """An entity record is missing position or size data."""


__all__ = [
    "CoverDetectionError",
    "GeometryUnavailableError",
    "MalformedEntityError",
    "MalformedWallError",
]
