"""Per-biome generation settings.

Settings are immutable records loaded once per process. Heights are given
as factors of the grid height so the same record drives any grid size.
Optional sub-records may be None, which turns the matching feature or
material mixing off.
"""

from dataclasses import dataclass, field, fields, is_dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, Optional, TypeVar, Union, get_args, get_type_hints
import json

from ..voxel.constants import VOXEL_GRASS, VOXEL_DIRT_MEDIUM


# --- Beach ---

@dataclass(frozen=True)
class PalmTreeSettings:
    """Configuration for palm tree placement and shape."""
    count: int = 2
    min_height: int = 15
    max_height: int = 20
    frond_radius: int = 5
    frond_layers: int = 3
    trunk_thickness: int = 2
    curve_factor: float = 0.15
    placement_noise_scale: float = 20.0
    placement_threshold: float = 0.35
    # Low-noise sites are rejected for this many attempts, then accepted
    relax_after_attempts: int = 5
    max_placement_attempts: int = 50


@dataclass(frozen=True)
class RockSettings:
    """Configuration for single-voxel rocks on dry sand."""
    count_min: int = 4
    count_max: int = 8
    max_placement_attempts: int = 20


@dataclass(frozen=True)
class BeachGrassSettings:
    """Configuration for beach grass on dry sand."""
    density_factor: float = 0.03
    min_distance_from_water: int = 3


@dataclass(frozen=True)
class BeachSettings:
    """Configuration for the beach biome."""
    name: str = "Beach"
    environment_asset: str = "/sunset.hdr"

    # Water level as a factor of the grid height
    water_level_factor: float = 1 / 6
    # Z line where the slope towards the water begins, as a factor of the grid depth.
    # A negative value puts the whole chunk on the slope.
    beach_start_line_z_factor: float = -0.08
    # Inland surface height relative to the water level
    inland_height_offset: int = 1
    # Target slope height at the far edge relative to the water level
    shoreline_height_offset: int = -1
    # Lowest slope height relative to the water level
    slope_floor_offset: int = -2
    # Columns this far before the slope line may still flood
    flood_margin: int = 5
    dune_variation_factor: float = 1 / 12
    general_noise_scale: float = 40.0

    # Layering below the surface
    sandstone_depth: int = 3
    sand_light_chance: float = 0.2
    sand_dark_chance: float = 0.2

    trees: Optional[PalmTreeSettings] = field(default_factory=PalmTreeSettings)
    rocks: Optional[RockSettings] = field(default_factory=RockSettings)
    beach_grass: Optional[BeachGrassSettings] = field(default_factory=BeachGrassSettings)


# --- Forest ---

@dataclass(frozen=True)
class ForestTreeSettings:
    """Configuration for conifer-like forest trees."""
    count_min: int = 30
    count_max: int = 40
    min_height: int = 8
    max_height: int = 15
    trunk_thickness: int = 2
    leaf_layers_min: int = 3
    leaf_layers_max: int = 5
    leaf_layer_height: int = 2
    base_leaf_radius_max: float = 4.0
    placement_noise_scale: float = 20.0
    placement_threshold: float = 0.4
    min_dist_from_other_tree: float = 5.0
    max_placement_attempts: int = 30
    alt_leaf_chance: float = 0.3
    # Trees are not planted more than this far above the hill-free surface
    max_rise_above_natural: int = 3


@dataclass(frozen=True)
class PebbleSettings:
    """Configuration for pebbles on the forest floor."""
    density_factor: float = 0.05
    max_pebbles_per_chunk: int = 50
    # Pebbles are only placed on surfaces below size_y - top_margin
    top_margin: int = 2


@dataclass(frozen=True)
class CaveSettings:
    """Configuration for caves carved into border hills."""
    chance: float = 1.0
    min_hill_height_required: float = 5.0
    entrance_width: int = 5
    entrance_height: int = 5
    # Cave floor starts this far above the natural surface at the entrance
    floor_offset: int = 1


@dataclass(frozen=True)
class BorderHillSettings:
    """Configuration for hills raised along a chunk edge."""
    chance: float = 1.0
    max_hills: int = 1
    min_radius: float = 10.0
    max_radius: float = 12.0
    min_height: float = 9.0
    max_height: float = 13.0
    # Hill centres lie less than this far from the chosen edge
    border_proximity: int = 5
    cave: Optional[CaveSettings] = field(default_factory=CaveSettings)


@dataclass(frozen=True)
class StoneVariationSettings:
    """Chances for a stone voxel to use the light or dark variant."""
    light_chance: float = 0.20
    dark_chance: float = 0.20


@dataclass(frozen=True)
class TransitionSettings:
    """Probabilistic mixing at a material boundary."""
    depth: int = 2
    mix_chance: float = 0.35


@dataclass(frozen=True)
class ForestSettings:
    """Configuration for the forest biome."""
    name: str = "Forest"
    environment_asset: str = "/forest.hdr"

    base_height_factor: float = 1 / 3
    terrain_noise_scale: float = 30.0
    terrain_noise_amplitude: float = 5.0
    surface_voxel: int = VOXEL_GRASS
    surface_dirt_patch_chance: float = 0.30
    forest_floor_detail_chance: float = 0.10
    under_surface_voxel: int = VOXEL_DIRT_MEDIUM
    dirt_layer_depth: int = 5

    trees: Optional[ForestTreeSettings] = field(default_factory=ForestTreeSettings)
    pebbles: Optional[PebbleSettings] = field(default_factory=PebbleSettings)
    border_hills: Optional[BorderHillSettings] = field(default_factory=BorderHillSettings)
    stone_variations: Optional[StoneVariationSettings] = field(default_factory=StoneVariationSettings)
    dirt_stone_transition: Optional[TransitionSettings] = field(default_factory=TransitionSettings)


# --- Test plain ---

@dataclass(frozen=True)
class TestPlainSettings:
    """Configuration for the flat test plain."""
    __test__ = False  # not a pytest class

    name: str = "Test Plain"
    environment_asset: str = ""
    base_height_factor: float = 1 / 4
    surface_voxel: int = VOXEL_GRASS


DEFAULT_BEACH_SETTINGS = BeachSettings()
DEFAULT_FOREST_SETTINGS = ForestSettings()
DEFAULT_TEST_PLAIN_SETTINGS = TestPlainSettings()

S = TypeVar("S")


def _record_type(cls: type, name: str) -> Optional[type]:
    """Get the dataclass type of a (possibly Optional) settings field."""
    hint = get_type_hints(cls)[name]
    if is_dataclass(hint):
        return hint
    for arg in get_args(hint):
        if is_dataclass(arg):
            return arg
    return None


def apply_overrides(settings: S, data: Dict[str, Any]) -> S:
    """Return a copy of a settings record with values from a dict applied.

    Nested dicts update nested records, ``None`` disables an optional
    sub-record, and keys missing from ``data`` keep their current value.

    Raises:
        ValueError: If a key does not name a settings field
    """
    known = {f.name for f in fields(settings)}
    changes: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown setting for {type(settings).__name__}: {key}")
        record_type = _record_type(type(settings), key)
        if record_type is not None and isinstance(value, dict):
            current = getattr(settings, key)
            if current is None:
                current = record_type()
            value = apply_overrides(current, value)
        changes[key] = value
    return replace(settings, **changes)


def load_settings(path: Optional[Union[str, Path]], default: S) -> S:
    """Load settings overrides from JSON, falling back to the default record."""
    if path is None:
        return default
    path = Path(path)
    if not path.exists():
        return default
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a JSON object: {path}")
    return apply_overrides(default, data)


def settings_to_dict(settings: Any) -> Dict[str, Any]:
    """Convert a settings record to a JSON-compatible dictionary."""
    return asdict(settings)
