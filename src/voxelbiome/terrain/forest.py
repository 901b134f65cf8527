"""Forest biome generator.

Base terrain is gently rolling grass over a dirt band and a stone base.
Feature passes run on top of it in order:

1. Pebbles scattered on the ground
2. Border hills raised along one chunk edge, optionally tunnelled by a cave
3. Conifer-like trees with tapering leaf disks

The natural (hill-free) surface height of every column is kept from the
base pass. Caves only carve hill mass above it, and trees are not planted
on hill faces that rise too far above it.
"""

import logging
import math
from enum import IntEnum
from typing import FrozenSet, List, Optional, Tuple

import numpy as np

from ..voxel.constants import (
    VOXEL_EMPTY,
    VOXEL_FOREST_FLOOR_DETAIL,
    VOXEL_FOREST_LEAVES,
    VOXEL_FOREST_LEAVES_ALT,
    VOXEL_FOREST_TRUNK,
    VOXEL_PEBBLE,
    LEAF_TYPES,
    STONE_TYPES,
)
from ..voxel.grid import GridSize, VoxelGrid
from .layers import Band, fill_banded_column, heightmap_pass, pick_stone
from .noise import Noise2D, RandomStream, derive_stream, normalized_noise
from .settings import (
    BorderHillSettings,
    CaveSettings,
    ForestSettings,
    ForestTreeSettings,
    PebbleSettings,
    DEFAULT_FOREST_SETTINGS,
)

logger = logging.getLogger(__name__)

_GROUND_COVER = (VOXEL_EMPTY, VOXEL_PEBBLE)
_LEAF_REPLACEABLE = frozenset({VOXEL_EMPTY}) | LEAF_TYPES


class Edge(IntEnum):
    """Horizontal chunk edge a border hill is raised against."""
    NEG_X = 0
    POS_X = 1
    NEG_Z = 2
    POS_Z = 3

    @property
    def inward(self) -> Tuple[int, int]:
        """Unit (dx, dz) step pointing from this edge into the chunk."""
        return {
            Edge.NEG_X: (1, 0),
            Edge.POS_X: (-1, 0),
            Edge.NEG_Z: (0, 1),
            Edge.POS_Z: (0, -1),
        }[self]


def ground_types(settings: ForestSettings) -> FrozenSet[int]:
    """Voxel codes that count as forest ground."""
    return frozenset({settings.surface_voxel, settings.under_surface_voxel, VOXEL_FOREST_FLOOR_DETAIL})


def _build_terrain(grid: VoxelGrid, natural: np.ndarray, stream: RandomStream, settings: ForestSettings) -> None:
    """Write the surface, dirt band and stone base of every column."""
    bands = (
        Band.solid(settings.under_surface_voxel, settings.dirt_layer_depth),
        Band(lambda: pick_stone(stream, settings.stone_variations)),
    )
    for x in range(grid.size.x):
        for z in range(grid.size.z):
            surface_y = int(natural[z, x])
            value = stream.random()
            if value < settings.surface_dirt_patch_chance:
                surface = settings.under_surface_voxel
            elif value < settings.surface_dirt_patch_chance + settings.forest_floor_detail_chance:
                surface = VOXEL_FOREST_FLOOR_DETAIL
            else:
                surface = settings.surface_voxel
            grid.set(x, surface_y, z, surface)
            fill_banded_column(grid, x, z, surface_y, bands, stream, settings.dirt_stone_transition)


def place_pebbles(grid: VoxelGrid, stream: RandomStream, pebbles: PebbleSettings, ground: FrozenSet[int]) -> int:
    """Scatter pebbles one voxel above the ground. Returns the number placed."""
    max_y = grid.size.y - pebbles.top_margin
    placed = 0
    for x in range(grid.size.x):
        for z in range(grid.size.z):
            if placed >= pebbles.max_pebbles_per_chunk:
                return placed
            surface_y = grid.top_y(x, z, ground)
            if surface_y == -1 or surface_y >= max_y:
                continue
            if stream.random() < pebbles.density_factor:
                if grid.get(x, surface_y + 1, z) == VOXEL_EMPTY and surface_y + 1 < grid.size.y:
                    grid.set(x, surface_y + 1, z, VOXEL_PEBBLE)
                    placed += 1
    return placed


# --- Border hills ---

def _raise_hill(
    grid: VoxelGrid,
    stream: RandomStream,
    center_x: float,
    center_z: float,
    radius: float,
    height: float,
    settings: ForestSettings,
) -> None:
    """Raise a parabolic mound of stone capped with the original surface."""
    reach = math.ceil(radius)
    radius_sq = radius * radius
    for dx in range(-reach, reach + 1):
        for dz in range(-reach, reach + 1):
            dist_sq = dx * dx + dz * dz
            if dist_sq > radius_sq:
                continue
            x = math.floor(center_x + dx)
            z = math.floor(center_z + dz)
            if not (0 <= x < grid.size.x and 0 <= z < grid.size.z):
                continue

            original_y = grid.top_y(x, z, passable=_GROUND_COVER)
            if original_y == -1:
                continue
            new_y = original_y + int(height * (1 - dist_sq / radius_sq))
            cap = grid.get(x, original_y, z)

            top_y = min(new_y, grid.size.y - 1)
            for y in range(original_y + 1, top_y + 1):
                if grid.get(x, y, z) in _GROUND_COVER:
                    grid.set(x, y, z, pick_stone(stream, settings.stone_variations) if y < top_y else cap)

            if new_y > original_y:
                # Bury the old surface and the dirt under it in stone
                grid.set(x, original_y, z, pick_stone(stream, settings.stone_variations))
                for y in range(original_y - 1, -1, -1):
                    voxel = grid.get(x, y, z)
                    if voxel == settings.under_surface_voxel:
                        grid.set(x, y, z, pick_stone(stream, settings.stone_variations))
                    elif voxel in STONE_TYPES or voxel == VOXEL_EMPTY:
                        break


def carve_cave(
    grid: VoxelGrid,
    natural: np.ndarray,
    edge: Edge,
    center_x: float,
    center_z: float,
    radius: float,
    cave: CaveSettings,
) -> int:
    """Carve a rectangular tunnel into a hill, heading into the chunk.

    Only voxels above the natural surface are cleared, so the tunnel
    never cuts into base terrain. Returns the number of voxels cleared.
    """
    step_x, step_z = edge.inward
    entrance_x = math.floor(center_x + step_x * radius * 0.5)
    entrance_z = math.floor(center_z + step_z * radius * 0.5)
    natural_x = min(max(entrance_x, 0), grid.size.x - 1)
    natural_z = min(max(entrance_z, 0), grid.size.z - 1)
    floor_y = int(natural[natural_z, natural_x]) + cave.floor_offset
    half_width = cave.entrance_width // 2

    cleared = 0
    # A straight tunnel leaves the chunk within this many steps
    for depth in range(max(grid.size.x, grid.size.z) + 1):
        x = entrance_x + step_x * depth
        z = entrance_z + step_z * depth
        if not (0 <= x < grid.size.x and 0 <= z < grid.size.z):
            break
        for w in range(-half_width, half_width + 1):
            cave_x, cave_z = (x, z + w) if step_x != 0 else (x + w, z)
            for h in range(cave.entrance_height):
                cave_y = floor_y + h
                if not grid.in_bounds(cave_x, cave_y, cave_z):
                    continue
                if cave_y > natural[cave_z, cave_x] and grid.get(cave_x, cave_y, cave_z) != VOXEL_EMPTY:
                    grid.set(cave_x, cave_y, cave_z, VOXEL_EMPTY)
                    cleared += 1
    return cleared


def raise_border_hills(
    grid: VoxelGrid,
    stream: RandomStream,
    natural: np.ndarray,
    settings: ForestSettings,
) -> int:
    """Maybe raise hills along one chunk edge. Returns the number raised."""
    hills: Optional[BorderHillSettings] = settings.border_hills
    if hills is None or stream.random() >= hills.chance:
        return 0

    count = 1 + int(stream.random() * hills.max_hills)
    for _ in range(count):
        radius = stream.uniform(hills.min_radius, hills.max_radius)
        height = stream.uniform(hills.min_height, hills.max_height)
        edge = Edge(int(stream.random() * 4))
        offset = int(stream.random() * hills.border_proximity)

        if edge == Edge.NEG_X:
            center_x, center_z = float(offset), stream.random() * grid.size.z
        elif edge == Edge.POS_X:
            center_x, center_z = float(grid.size.x - 1 - offset), stream.random() * grid.size.z
        elif edge == Edge.NEG_Z:
            center_x, center_z = stream.random() * grid.size.x, float(offset)
        else:
            center_x, center_z = stream.random() * grid.size.x, float(grid.size.z - 1 - offset)

        _raise_hill(grid, stream, center_x, center_z, radius, height, settings)
        logger.debug("Raised hill on %s edge at (%.1f, %.1f), r=%.1f h=%.1f", edge.name, center_x, center_z, radius, height)

        cave = hills.cave
        if cave is not None and stream.random() < cave.chance and height >= cave.min_hill_height_required:
            cleared = carve_cave(grid, natural, edge, center_x, center_z, radius, cave)
            logger.debug("Carved cave from %s edge, %d voxels cleared", edge.name, cleared)
    return count


# --- Trees ---

def _grow_forest_tree(
    grid: VoxelGrid,
    stream: RandomStream,
    x: int,
    surface_y: int,
    z: int,
    trees: ForestTreeSettings,
) -> None:
    """Grow a straight trunk topped by a stack of shrinking leaf disks."""
    trunk_height = stream.randint(trees.min_height, trees.max_height)
    trunk_top_y = surface_y + trunk_height
    thickness = max(1, int(trees.trunk_thickness))
    offset = thickness // 2

    for h in range(1, trunk_height + 1):
        y = surface_y + h
        if y >= grid.size.y:
            break
        for dx in range(thickness):
            for dz in range(thickness):
                trunk_x = x - offset + dx
                trunk_z = z - offset + dz
                if grid.in_bounds(trunk_x, y, trunk_z) and grid.get(trunk_x, y, trunk_z) == VOXEL_EMPTY:
                    grid.set(trunk_x, y, trunk_z, VOXEL_FOREST_TRUNK)

    layers = stream.randint(trees.leaf_layers_min, trees.leaf_layers_max)
    base_radius = trees.base_leaf_radius_max * (0.7 + stream.random() * 0.3)
    layer_height = trees.leaf_layer_height

    for layer in range(layers):
        progress = layer / (layers - 1) if layers > 1 else 0.0
        radius = max(1, math.ceil(base_radius * (1 - progress * 0.85)))
        center_y = trunk_top_y + 1 + layer * layer_height + layer_height // 2

        for dy in range(-(layer_height // 2), math.ceil(layer_height / 2) + 1):
            y = center_y + dy
            if y <= surface_y or y >= grid.size.y:
                continue
            for dx in range(-radius, radius + 1):
                for dz in range(-radius, radius + 1):
                    if dx * dx + dz * dz > radius * radius:
                        continue
                    leaf_x = x + dx
                    leaf_z = z + dz
                    if not grid.in_bounds(leaf_x, y, leaf_z):
                        continue
                    # Leaves of neighbouring trees intermingle
                    if grid.get(leaf_x, y, leaf_z) in _LEAF_REPLACEABLE:
                        leaf = VOXEL_FOREST_LEAVES_ALT if stream.random() < trees.alt_leaf_chance else VOXEL_FOREST_LEAVES
                        grid.set(leaf_x, y, leaf_z, leaf)


def place_forest_trees(
    grid: VoxelGrid,
    stream: RandomStream,
    placement_noise: Noise2D,
    natural: np.ndarray,
    trees: ForestTreeSettings,
    ground: FrozenSet[int],
) -> List[Tuple[int, int]]:
    """Plant trees by rejection sampling. Returns the (x, z) of each trunk."""
    count = stream.randint(trees.count_min, trees.count_max)
    min_dist_sq = trees.min_dist_from_other_tree ** 2
    placed: List[Tuple[int, int]] = []

    for i in range(count):
        for _ in range(trees.max_placement_attempts):
            x = int(stream.random() * grid.size.x)
            z = int(stream.random() * grid.size.z)

            if any((x - ox) ** 2 + (z - oz) ** 2 < min_dist_sq for ox, oz in placed):
                continue
            suitability = normalized_noise(placement_noise, x, z, trees.placement_noise_scale, 1.0)
            if suitability < trees.placement_threshold:
                continue
            surface_y = grid.top_y(x, z, ground, passable=_GROUND_COVER)
            if surface_y == -1:
                continue
            if surface_y > natural[z, x] + trees.max_rise_above_natural:
                continue

            _grow_forest_tree(grid, stream, x, surface_y, z, trees)
            placed.append((x, z))
            break
        else:
            logger.debug("Skipping tree %d: no site after %d attempts", i, trees.max_placement_attempts)
    return placed


def generate_forest(
    seed: str,
    settings: ForestSettings = DEFAULT_FOREST_SETTINGS,
    size: Optional[GridSize] = None,
) -> VoxelGrid:
    """Generate a forest chunk.

    Args:
        seed: Scoped seed string
        settings: Forest settings
        size: Grid dimensions (defaults to 64x64x64)

    Returns:
        The generated VoxelGrid
    """
    size = size or GridSize()
    stream = derive_stream(seed)
    terrain_noise = stream.noise2d()
    placement_noise = derive_stream(seed, "_forest_trees").noise2d()

    grid = VoxelGrid(size)
    base_y = int(size.y * settings.base_height_factor)
    natural = heightmap_pass(
        size,
        lambda x, z: base_y + normalized_noise(
            terrain_noise, x, z, settings.terrain_noise_scale, settings.terrain_noise_amplitude
        ),
    )
    _build_terrain(grid, natural, stream, settings)

    ground = ground_types(settings)
    pebbles = hills = 0
    trees: List[Tuple[int, int]] = []
    if settings.pebbles is not None:
        pebbles = place_pebbles(grid, stream, settings.pebbles, ground)
    if settings.border_hills is not None:
        hills = raise_border_hills(grid, stream, natural, settings)
    if settings.trees is not None:
        trees = place_forest_trees(grid, stream, placement_noise, natural, settings.trees, ground)

    logger.debug("Forest %r: %d pebbles, %d hills, %d trees", seed, pebbles, hills, len(trees))
    return grid
