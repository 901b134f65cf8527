"""Procedural terrain generation for voxel chunks."""

from .noise import Noise2D, RandomStream, derive_stream, normalized_noise
from .settings import (
    BeachSettings,
    PalmTreeSettings,
    RockSettings,
    BeachGrassSettings,
    ForestSettings,
    ForestTreeSettings,
    PebbleSettings,
    BorderHillSettings,
    CaveSettings,
    StoneVariationSettings,
    TransitionSettings,
    TestPlainSettings,
    DEFAULT_BEACH_SETTINGS,
    DEFAULT_FOREST_SETTINGS,
    DEFAULT_TEST_PLAIN_SETTINGS,
    apply_overrides,
    load_settings,
    settings_to_dict,
)
from .layers import Band, clamp_surface_y, fill_banded_column, heightmap_pass, pick_stone
from .beach import generate_beach
from .forest import generate_forest
from .plain import generate_test_plain
from .registry import (
    Biome,
    BiomeNotFoundError,
    BiomeRegistry,
    create_default_registry,
    derive_scoped_seed,
    generate,
    get_default_registry,
)

__all__ = [
    # Noise
    "Noise2D",
    "RandomStream",
    "derive_stream",
    "normalized_noise",
    # Settings
    "BeachSettings",
    "PalmTreeSettings",
    "RockSettings",
    "BeachGrassSettings",
    "ForestSettings",
    "ForestTreeSettings",
    "PebbleSettings",
    "BorderHillSettings",
    "CaveSettings",
    "StoneVariationSettings",
    "TransitionSettings",
    "TestPlainSettings",
    "DEFAULT_BEACH_SETTINGS",
    "DEFAULT_FOREST_SETTINGS",
    "DEFAULT_TEST_PLAIN_SETTINGS",
    "apply_overrides",
    "load_settings",
    "settings_to_dict",
    # Passes
    "Band",
    "clamp_surface_y",
    "fill_banded_column",
    "heightmap_pass",
    "pick_stone",
    # Generators
    "generate_beach",
    "generate_forest",
    "generate_test_plain",
    # Registry
    "Biome",
    "BiomeNotFoundError",
    "BiomeRegistry",
    "create_default_registry",
    "derive_scoped_seed",
    "generate",
    "get_default_registry",
]
