"""Validated, immutable configuration for the cover engine."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from config.config_loader import ConfigLoader

DEFAULT_SETTINGS_PATH = Path(__file__).with_name("settings.yaml")


class IntersectionMode(str, Enum):
    """Token cover evaluation strategy."""

    SIZE_DIFFERENTIAL = "size_differential"
    TACTICAL_CORNERS = "tactical_corners"
    COVERAGE_PERCENTAGE = "coverage_percentage"
    SAMPLED_3D = "sampled_3d"
    CENTER_LINE = "center_line"


_MODE_ALIASES: Dict[str, str] = {
    "any": IntersectionMode.SIZE_DIFFERENTIAL.value,
    "size": IntersectionMode.SIZE_DIFFERENTIAL.value,
    "tactical": IntersectionMode.TACTICAL_CORNERS.value,
    "coverage": IntersectionMode.COVERAGE_PERCENTAGE.value,
    "sampling3d": IntersectionMode.SAMPLED_3D.value,
    "center": IntersectionMode.CENTER_LINE.value,
}


class FilterPolicy(BaseModel):
    """Policy switches for the blocker eligibility filter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ignore_undetected_obstacles: bool = False
    ignore_dead_obstacles: bool = True
    ignore_allied_obstacles: bool = False
    allow_prone_obstacles: bool = True
    respect_ignore_flag: bool = True


class CoverSettings(BaseModel):
    """Read-only settings snapshot shared by every evaluation in a batch."""

    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=False)

    intersection_mode: IntersectionMode = IntersectionMode.TACTICAL_CORNERS
    filter_policy: FilterPolicy = Field(default_factory=FilterPolicy)

    grid_size: float = Field(50.0, gt=0)

    wall_standard_threshold: float = Field(50.0, ge=0, le=100)
    wall_greater_threshold: float = Field(70.0, ge=0, le=100)
    wall_allow_greater: bool = False
    wall_samples_per_edge: int = Field(5, ge=1, le=64)
    wall_edge_only_weight: float = Field(0.3, ge=0, le=1)
    wall_override_ceiling: bool = True

    coverage_lesser_threshold: float = Field(20.0, ge=0, le=100)
    coverage_standard_threshold: float = Field(50.0, ge=0, le=100)
    coverage_greater_threshold: float = Field(70.0, ge=0, le=100)
    coverage_elevation_tolerance: float = Field(3.0, ge=0)

    use_elevation_filter: bool = True
    betweenness_tolerance: float = Field(0.1, ge=0)
    min_intersection_fraction: float = Field(0.05, ge=0, le=1)

    @field_validator("intersection_mode", mode="before")
    @classmethod
    def _normalise_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            key = value.strip().lower()
            return _MODE_ALIASES.get(key, key)
        return value

    @model_validator(mode="after")
    def _check_threshold_order(self) -> "CoverSettings":
        if self.wall_greater_threshold < self.wall_standard_threshold:
            raise ValueError("wall_greater_threshold must be >= wall_standard_threshold")
        if not (
            self.coverage_lesser_threshold
            <= self.coverage_standard_threshold
            <= self.coverage_greater_threshold
        ):
            raise ValueError("coverage thresholds must be ordered lesser <= standard <= greater")
        return self


def load_settings(
    path: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> CoverSettings:
    """Build :class:`CoverSettings` from the ``cover`` section of a YAML file.

    A missing file yields the defaults; keyword arguments win over file values.
    """

    loader = ConfigLoader(path or DEFAULT_SETTINGS_PATH)
    data = loader.section("cover")
    data.update(overrides)
    return CoverSettings.model_validate(data)


__all__ = [
    "CoverSettings",
    "DEFAULT_SETTINGS_PATH",
    "FilterPolicy",
    "IntersectionMode",
    "load_settings",
]
