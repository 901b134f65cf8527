"""Beach biome generator.

The chunk is split along Z into an inland strip and a slope that runs
down towards the water at the far edge. Columns on (or just before) the
slope whose surface sits at or below the water level are flooded.

Feature passes, in order:
- Palm trees with curved trunks and drooping fronds
- Single-voxel rocks on dry sand
- Beach grass on dry sand away from the water's edge
"""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from ..voxel.constants import (
    VOXEL_EMPTY,
    VOXEL_SAND,
    VOXEL_SAND_LIGHT,
    VOXEL_SAND_DARK,
    VOXEL_SANDSTONE,
    VOXEL_WATER,
    VOXEL_PALM_TRUNK,
    VOXEL_PALM_FROND,
    VOXEL_ROCK,
    VOXEL_BEACH_GRASS,
    SAND_TYPES,
)
from ..voxel.grid import GridSize, VoxelGrid
from .layers import Band, fill_banded_column, heightmap_pass
from .noise import Noise2D, RandomStream, derive_stream, normalized_noise
from .settings import (
    BeachSettings,
    BeachGrassSettings,
    PalmTreeSettings,
    RockSettings,
    DEFAULT_BEACH_SETTINGS,
)

logger = logging.getLogger(__name__)

# Voxels a surface scan may look through on the beach before reaching sand
_ABOVE_SAND = frozenset({VOXEL_EMPTY, VOXEL_PALM_TRUNK, VOXEL_PALM_FROND, VOXEL_ROCK})
_REPLACEABLE = (VOXEL_EMPTY, VOXEL_WATER)


def _round(value: float) -> int:
    """Round half up."""
    return int(math.floor(value + 0.5))


def _sand_shade(stream: RandomStream, settings: BeachSettings) -> int:
    value = stream.random()
    if value < settings.sand_light_chance:
        return VOXEL_SAND_LIGHT
    if value < settings.sand_light_chance + settings.sand_dark_chance:
        return VOXEL_SAND_DARK
    return VOXEL_SAND


class _BeachLayout:
    """Derived dimensions of the beach for one grid size."""

    def __init__(self, settings: BeachSettings, size: GridSize):
        self.water_level = int(size.y * settings.water_level_factor)
        self.start_z = math.floor(size.z * settings.beach_start_line_z_factor)
        self.inland_height = self.water_level + settings.inland_height_offset
        self.shoreline_height = self.water_level + settings.shoreline_height_offset
        self.slope_floor = self.water_level + settings.slope_floor_offset
        self.dune_variation = size.y * settings.dune_variation_factor
        self.slope_length = size.z - 1 - self.start_z

    def slope_progress(self, z: int) -> float:
        if self.slope_length <= 0:
            return 1.0
        return (z - self.start_z) / self.slope_length


def _surface_height(
    x: int,
    z: int,
    noise: Noise2D,
    layout: _BeachLayout,
    settings: BeachSettings,
) -> float:
    base_noise = normalized_noise(noise, x, z, settings.general_noise_scale, layout.dune_variation)
    if z < layout.start_z:
        return layout.inland_height + base_noise
    progress = layout.slope_progress(z)
    height = math.floor(
        layout.inland_height * (1 - progress)
        + layout.shoreline_height * progress
        + base_noise * (1 - progress)
    )
    return max(layout.slope_floor, height)


def _build_terrain(
    grid: VoxelGrid,
    heights: np.ndarray,
    stream: RandomStream,
    layout: _BeachLayout,
    settings: BeachSettings,
) -> None:
    """Write sand, sandstone and water for every column."""
    bands = (
        Band(lambda: _sand_shade(stream, settings), settings.sandstone_depth),
        Band.solid(VOXEL_SANDSTONE),
    )
    for x in range(grid.size.x):
        for z in range(grid.size.z):
            surface_y = int(heights[z, x])
            floods = z >= layout.start_z - settings.flood_margin and surface_y <= layout.water_level
            if floods and surface_y < layout.water_level:
                grid.fill_column(x, z, surface_y, layout.water_level, VOXEL_WATER)
            else:
                grid.set(x, surface_y, z, _sand_shade(stream, settings))
            fill_banded_column(grid, x, z, surface_y, bands, stream)


# --- Palm trees ---

def _palm_base_y(grid: VoxelGrid, x: int, z: int, thickness: int, water_level: int) -> Optional[int]:
    """Get the sand height under a trunk footprint, or None if unsuitable."""
    base_y = None
    for dx in range(thickness):
        for dz in range(thickness):
            y = grid.top_y(x + dx, z + dz, SAND_TYPES, passable=_ABOVE_SAND)
            if y == -1 or y < water_level:
                return None
            if base_y is None:
                base_y = y
            elif abs(base_y - y) > 1:
                return None
    if base_y is None:
        return None
    for dx in range(thickness):
        for dz in range(thickness):
            if grid.get(x + dx, base_y, z + dz) not in SAND_TYPES:
                return None
    return base_y


def _find_palm_site(
    grid: VoxelGrid,
    stream: RandomStream,
    placement_noise: Noise2D,
    trees: PalmTreeSettings,
    water_level: int,
) -> Optional[Tuple[int, int, int]]:
    thickness = trees.trunk_thickness
    for attempt in range(trees.max_placement_attempts):
        x = int(stream.random() * (grid.size.x - thickness))
        z = int(stream.random() * (grid.size.z - thickness))
        if attempt < trees.relax_after_attempts:
            suitability = normalized_noise(placement_noise, x, z, trees.placement_noise_scale, 1.0)
            if suitability < trees.placement_threshold:
                continue
        base_y = _palm_base_y(grid, x, z, thickness, water_level)
        if base_y is not None:
            return x, base_y, z
    return None


def _grow_palm(
    grid: VoxelGrid,
    stream: RandomStream,
    curve_noise: Noise2D,
    site: Tuple[int, int, int],
    trees: PalmTreeSettings,
    water_level: int,
) -> None:
    base_x, base_y, base_z = site
    thickness = trees.trunk_thickness
    size = grid.size
    height = stream.randint(trees.min_height, trees.max_height)
    spread = trees.curve_factor * (thickness + 0.5)

    # Trunk: the tip drifts sideways, most strongly at mid height
    tip_x = float(base_x)
    tip_z = float(base_z)
    for h in range(1, height + 1):
        taper = math.sin(h / height * math.pi)
        tip_x += taper * curve_noise(tip_x * 0.1, h * 0.2) * spread
        tip_z += taper * curve_noise(tip_z * 0.1 + 100, h * 0.2) * spread
        tip_x = min(max(tip_x, 0.0), float(size.x - thickness))
        tip_z = min(max(tip_z, 0.0), float(size.z - thickness))
        y = base_y + h
        for dx in range(thickness):
            for dz in range(thickness):
                px = _round(tip_x) + dx
                pz = _round(tip_z) + dz
                if grid.in_bounds(px, y, pz) and grid.get(px, y, pz) in _REPLACEABLE:
                    grid.set(px, y, pz, VOXEL_PALM_TRUNK)

    # Fronds: rings of strands that droop as they reach outwards
    frond_base_y = base_y + height + 1
    center_x = _round(tip_x) + thickness // 2
    center_z = _round(tip_z) + thickness // 2
    for layer in range(trees.frond_layers):
        layer_y = frond_base_y + layer
        if layer_y >= size.y:
            continue
        fronds_in_layer = max(1, 8 - layer * 2)
        length = max(1.0, trees.frond_radius - layer * 1.5)
        for f in range(fronds_in_layer):
            angle = f / fronds_in_layer * math.pi * 2 + (stream.random() - 0.5) * 0.5
            frond_x, frond_z = center_x, center_z
            for step in range(math.ceil(length)):
                step_x = math.cos(angle) * (1 + (stream.random() - 0.5) * 0.3)
                step_z = math.sin(angle) * (1 + (stream.random() - 0.5) * 0.3)
                droop = (step / length) ** 2 * (trees.frond_radius / 2.0)
                frond_x = _round(frond_x + step_x)
                frond_z = _round(frond_z + step_z)
                frond_y = _round(layer_y - droop)

                if frond_y < water_level - 1:
                    break
                if frond_y >= size.y or frond_y < 0:
                    continue
                if not (0 <= frond_x < size.x and 0 <= frond_z < size.z):
                    break
                if grid.get(frond_x, frond_y, frond_z) in _REPLACEABLE:
                    grid.set(frond_x, frond_y, frond_z, VOXEL_PALM_FROND)


def place_palm_trees(
    grid: VoxelGrid,
    stream: RandomStream,
    placement_noise: Noise2D,
    curve_noise: Noise2D,
    trees: PalmTreeSettings,
    water_level: int,
) -> int:
    """Place palm trees on dry sand. Returns the number placed."""
    placed = 0
    for i in range(trees.count):
        site = _find_palm_site(grid, stream, placement_noise, trees, water_level)
        if site is None:
            logger.debug("Skipping palm tree %d: no site after %d attempts", i, trees.max_placement_attempts)
            continue
        _grow_palm(grid, stream, curve_noise, site, trees, water_level)
        placed += 1
    return placed


# --- Rocks and grass ---

def place_rocks(grid: VoxelGrid, stream: RandomStream, rocks: RockSettings, water_level: int) -> int:
    """Place single-voxel rocks on top of dry sand. Returns the number placed."""
    count = stream.randint(rocks.count_min, rocks.count_max)
    placed = 0
    for i in range(count):
        for _ in range(rocks.max_placement_attempts):
            x = int(stream.random() * grid.size.x)
            z = int(stream.random() * grid.size.z)
            surface_y = grid.top_y(x, z, SAND_TYPES, passable=_ABOVE_SAND)
            if surface_y == -1 or surface_y < water_level:
                continue
            rock_y = surface_y + 1
            if rock_y < grid.size.y and grid.get(x, rock_y, z) == VOXEL_EMPTY:
                grid.set(x, rock_y, z, VOXEL_ROCK)
                placed += 1
                break
        else:
            logger.debug("Skipping rock %d: no site after %d attempts", i, rocks.max_placement_attempts)
    return placed


def _near_water(grid: VoxelGrid, x: int, z: int, distance: int) -> bool:
    """Check whether a column within distance along an axis is topped with water."""
    for d in range(1, distance + 1):
        for nx, nz in ((x + d, z), (x - d, z), (x, z + d), (x, z - d)):
            top = grid.top_y(nx, nz)
            if top != -1 and grid.get(nx, top, nz) == VOXEL_WATER:
                return True
    return False


def place_beach_grass(grid: VoxelGrid, stream: RandomStream, grass: BeachGrassSettings, water_level: int) -> int:
    """Turn some dry sand surface voxels into beach grass. Returns the number placed."""
    placed = 0
    for x in range(grid.size.x):
        for z in range(grid.size.z):
            surface_y = grid.top_y(x, z, SAND_TYPES)
            if surface_y == -1 or surface_y < water_level:
                continue
            if _near_water(grid, x, z, grass.min_distance_from_water):
                continue
            if stream.random() < grass.density_factor:
                grid.set(x, surface_y, z, VOXEL_BEACH_GRASS)
                placed += 1
    return placed


def generate_beach(
    seed: str,
    settings: BeachSettings = DEFAULT_BEACH_SETTINGS,
    size: Optional[GridSize] = None,
) -> VoxelGrid:
    """Generate a beach chunk.

    Args:
        seed: Scoped seed string
        settings: Beach settings
        size: Grid dimensions (defaults to 64x64x64)

    Returns:
        The generated VoxelGrid
    """
    size = size or GridSize()
    stream = derive_stream(seed)
    terrain_noise = stream.noise2d()
    placement_noise = derive_stream(seed, "trees").noise2d()
    curve_noise = derive_stream(seed, "trunkCurve").noise2d()

    grid = VoxelGrid(size)
    layout = _BeachLayout(settings, size)
    heights = heightmap_pass(size, lambda x, z: _surface_height(x, z, terrain_noise, layout, settings))
    _build_terrain(grid, heights, stream, layout, settings)

    palms = rocks = grass = 0
    if settings.trees is not None:
        palms = place_palm_trees(grid, stream, placement_noise, curve_noise, settings.trees, layout.water_level)
    if settings.rocks is not None:
        rocks = place_rocks(grid, stream, settings.rocks, layout.water_level)
    if settings.beach_grass is not None:
        grass = place_beach_grass(grid, stream, settings.beach_grass, layout.water_level)

    logger.debug(
        "Beach %r: water level %d, %d palms, %d rocks, %d grass",
        seed, layout.water_level, palms, rocks, grass,
    )
    return grid
