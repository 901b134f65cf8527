import json
from pathlib import Path

import pytest

from voxelbiome.config import GenerationConfig
from voxelbiome.voxel.constants import VOXEL_EMPTY, VOXEL_GRASS
from voxelbiome.voxel.grid import GridSize


def test_defaults():
    config = GenerationConfig(biome="beach")
    assert config.seed == ""
    assert config.size == GridSize()
    config.validate()


def test_validate_rejects_bad_values():
    with pytest.raises(ValueError):
        GenerationConfig(biome="").validate()
    with pytest.raises(ValueError):
        GenerationConfig(biome="beach", size_y=0).validate()


def test_save_and_load(tmp_path):
    config = GenerationConfig(
        biome="forest",
        seed="hello world",
        size_x=32,
        size_y=48,
        size_z=16,
        settings_path=Path("forest.json"),
    )
    path = tmp_path / "config.json"
    config.save(path)
    assert json.loads(path.read_text())["seed"] == "hello world"
    assert GenerationConfig.load(path) == config


def test_load_fills_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"biome": "test_plain"}))
    config = GenerationConfig.load(path)
    assert config.size == GridSize()
    assert config.settings_path is None


def test_build_registry_applies_settings_file(tmp_path):
    settings_path = tmp_path / "plain.json"
    settings_path.write_text(json.dumps({"base_height_factor": 0.5}))
    config = GenerationConfig(biome="test_plain", size_x=4, size_y=8, size_z=4, settings_path=settings_path)

    grid = config.build_registry().get("test_plain").generate("s", config.size)

    assert grid.get(0, 3, 0) == VOXEL_GRASS
    assert grid.get(0, 4, 0) == VOXEL_EMPTY


def test_build_registry_without_settings_is_default():
    registry = GenerationConfig(biome="beach").build_registry()
    assert registry.get("beach").settings.water_level_factor == pytest.approx(1 / 6)


def test_load_requires_biome(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"seed": "no biome"}))
    with pytest.raises(ValueError, match="biome"):
        GenerationConfig.load(path)
