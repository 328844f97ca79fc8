import pytest
from pydantic import ValidationError

from config.config_loader import ConfigLoader
from config.settings import (
    DEFAULT_SETTINGS_PATH,
    CoverSettings,
    FilterPolicy,
    IntersectionMode,
    load_settings,
)


def test_defaults():
    settings = CoverSettings()
    assert settings.intersection_mode is IntersectionMode.TACTICAL_CORNERS
    assert settings.wall_standard_threshold == 50
    assert settings.wall_greater_threshold == 70
    assert settings.wall_samples_per_edge == 5
    assert settings.wall_edge_only_weight == pytest.approx(0.3)
    assert not settings.wall_allow_greater
    policy = settings.filter_policy
    assert (
        policy.ignore_undetected_obstacles,
        policy.ignore_dead_obstacles,
        policy.ignore_allied_obstacles,
        policy.allow_prone_obstacles,
        policy.respect_ignore_flag,
    ) == (False, True, False, True, True)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("tactical", IntersectionMode.TACTICAL_CORNERS),
        ("any", IntersectionMode.SIZE_DIFFERENTIAL),
        ("Coverage", IntersectionMode.COVERAGE_PERCENTAGE),
        ("sampling3d", IntersectionMode.SAMPLED_3D),
        ("center_line", IntersectionMode.CENTER_LINE),
    ],
)
def test_mode_aliases(raw, expected):
    assert CoverSettings(intersection_mode=raw).intersection_mode is expected


def test_unknown_mode_rejected():
    with pytest.raises(ValidationError):
        CoverSettings(intersection_mode="vibes")


def test_settings_are_frozen():
    settings = CoverSettings()
    with pytest.raises(ValidationError):
        settings.wall_allow_greater = True


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        CoverSettings(wall_treshold=10)


def test_threshold_validation():
    with pytest.raises(ValidationError):
        CoverSettings(wall_standard_threshold=80, wall_greater_threshold=70)
    with pytest.raises(ValidationError):
        CoverSettings(coverage_lesser_threshold=60)
    with pytest.raises(ValidationError):
        CoverSettings(wall_standard_threshold=120)


def test_nested_policy_from_mapping():
    settings = CoverSettings(filter_policy={"ignore_allied_obstacles": True})
    assert isinstance(settings.filter_policy, FilterPolicy)
    assert settings.filter_policy.ignore_allied_obstacles


def test_load_settings_from_yaml(tmp_path):
    path = tmp_path / "cover.yaml"
    path.write_text(
        "cover:\n"
        "  intersection_mode: coverage\n"
        "  wall_allow_greater: true\n"
        "  filter_policy:\n"
        "    ignore_dead_obstacles: false\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.intersection_mode is IntersectionMode.COVERAGE_PERCENTAGE
    assert settings.wall_allow_greater
    assert not settings.filter_policy.ignore_dead_obstacles


def test_keyword_overrides_win(tmp_path):
    path = tmp_path / "cover.yaml"
    path.write_text("cover:\n  intersection_mode: coverage\n", encoding="utf-8")
    settings = load_settings(path, intersection_mode="sampled_3d")
    assert settings.intersection_mode is IntersectionMode.SAMPLED_3D


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.yaml") == CoverSettings()


def test_shipped_defaults_match_model():
    assert load_settings(DEFAULT_SETTINGS_PATH) == CoverSettings()


def test_config_loader_key_paths(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("cover:\n  grid_size: 70\n", encoding="utf-8")
    loader = ConfigLoader(str(path))
    assert loader.get("cover", "grid_size") == 70
    assert loader.get("cover", "missing", default=5) == 5
    with pytest.raises(KeyError):
        loader.get("cover", "grid_size", "deeper")
    assert loader.section("cover") == {"grid_size": 70}
    assert loader.section("absent") == {}


def test_config_loader_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigLoader(path)
    path.write_text("cover: 12\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)
