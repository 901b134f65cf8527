import json

import pytest

from voxelbiome.terrain.settings import (
    BeachSettings,
    CaveSettings,
    ForestSettings,
    PalmTreeSettings,
    DEFAULT_BEACH_SETTINGS,
    DEFAULT_FOREST_SETTINGS,
    apply_overrides,
    load_settings,
    settings_to_dict,
)


def test_defaults():
    assert DEFAULT_BEACH_SETTINGS.environment_asset == "/sunset.hdr"
    assert DEFAULT_BEACH_SETTINGS.trees.count == 2
    assert DEFAULT_FOREST_SETTINGS.environment_asset == "/forest.hdr"
    assert DEFAULT_FOREST_SETTINGS.trees.count_min == 30
    assert DEFAULT_FOREST_SETTINGS.trees.count_max == 40
    assert DEFAULT_FOREST_SETTINGS.border_hills.cave == CaveSettings()


def test_settings_are_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_BEACH_SETTINGS.water_level_factor = 0.5


def test_nested_override_keeps_other_fields():
    settings = apply_overrides(DEFAULT_BEACH_SETTINGS, {"trees": {"count": 1}, "sandstone_depth": 4})
    assert settings.trees.count == 1
    assert settings.trees.max_height == PalmTreeSettings().max_height
    assert settings.sandstone_depth == 4
    assert DEFAULT_BEACH_SETTINGS.trees.count == 2


def test_none_disables_sub_record():
    settings = apply_overrides(DEFAULT_FOREST_SETTINGS, {"stone_variations": None, "border_hills": {"cave": None}})
    assert settings.stone_variations is None
    assert settings.border_hills is not None
    assert settings.border_hills.cave is None


def test_dict_re_enables_disabled_sub_record():
    disabled = apply_overrides(DEFAULT_BEACH_SETTINGS, {"rocks": None})
    settings = apply_overrides(disabled, {"rocks": {"count_max": 10}})
    assert settings.rocks.count_max == 10
    assert settings.rocks.count_min == 4


def test_unknown_key_raises():
    with pytest.raises(ValueError, match="Unknown setting"):
        apply_overrides(DEFAULT_FOREST_SETTINGS, {"snow": True})
    with pytest.raises(ValueError):
        apply_overrides(DEFAULT_FOREST_SETTINGS, {"trees": {"colour": "red"}})


def test_load_settings_missing_file_returns_default(tmp_path):
    assert load_settings(tmp_path / "nope.json", DEFAULT_BEACH_SETTINGS) is DEFAULT_BEACH_SETTINGS
    assert load_settings(None, DEFAULT_BEACH_SETTINGS) is DEFAULT_BEACH_SETTINGS


def test_load_settings_from_json(tmp_path):
    path = tmp_path / "forest.json"
    path.write_text(json.dumps({"terrain_noise_amplitude": 2.0, "pebbles": None}))
    settings = load_settings(path, DEFAULT_FOREST_SETTINGS)
    assert isinstance(settings, ForestSettings)
    assert settings.terrain_noise_amplitude == 2.0
    assert settings.pebbles is None


def test_load_settings_rejects_non_object(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_settings(path, DEFAULT_FOREST_SETTINGS)


def test_settings_to_dict_round_trips():
    data = settings_to_dict(DEFAULT_BEACH_SETTINGS)
    assert data["trees"]["count"] == 2
    assert apply_overrides(BeachSettings(), data) == DEFAULT_BEACH_SETTINGS
