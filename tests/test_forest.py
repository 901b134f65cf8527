from dataclasses import replace

import numpy as np
import pytest

from voxelbiome.terrain.forest import (
    Edge,
    _raise_hill,
    carve_cave,
    generate_forest,
    ground_types,
    place_forest_trees,
    raise_border_hills,
)
from voxelbiome.terrain.noise import RandomStream, derive_stream
from voxelbiome.terrain.settings import (
    BorderHillSettings,
    CaveSettings,
    ForestTreeSettings,
    DEFAULT_FOREST_SETTINGS,
)
from voxelbiome.voxel.constants import (
    VOXEL_EMPTY,
    VOXEL_FOREST_TRUNK,
    VOXEL_GRASS,
    VOXEL_PEBBLE,
    VOXEL_STONE,
    VOXEL_STONE_DARK,
    VOXEL_STONE_LIGHT,
    LEAF_TYPES,
    STONE_TYPES,
)
from voxelbiome.voxel.grid import GridSize, VoxelGrid


@pytest.fixture(scope="module")
def forest():
    return generate_forest("forest_hello world")


def test_forest_is_deterministic(forest):
    assert generate_forest("forest_hello world") == forest


def test_forest_seed_changes_terrain(forest):
    assert generate_forest("forest_other") != forest


def test_forest_has_trees_and_stone_base(forest):
    assert forest.count(VOXEL_FOREST_TRUNK) > 0
    assert sum(forest.count(code) for code in LEAF_TYPES) > 0
    for x in range(forest.size.x):
        for z in range(forest.size.z):
            assert forest.get(x, 0, z) in STONE_TYPES


def test_pebbles_rest_on_ground():
    settings = replace(DEFAULT_FOREST_SETTINGS, border_hills=None)
    grid = generate_forest("forest_pebbles", settings)
    ground = ground_types(settings)
    pebbles = [(x, y, z) for x, y, z, voxel in grid.occupied() if voxel == VOXEL_PEBBLE]
    assert 0 < len(pebbles) <= settings.pebbles.max_pebbles_per_chunk
    for x, y, z in pebbles:
        assert grid.get(x, y - 1, z) in ground


def test_without_stone_variations_only_plain_stone():
    settings = replace(DEFAULT_FOREST_SETTINGS, stone_variations=None)
    grid = generate_forest("forest_plain_stone", settings, GridSize(32, 64, 32))
    assert grid.count(VOXEL_STONE) > 0
    assert grid.count(VOXEL_STONE_LIGHT) == 0
    assert grid.count(VOXEL_STONE_DARK) == 0


def test_trees_keep_their_distance():
    bare = replace(DEFAULT_FOREST_SETTINGS, trees=None, pebbles=None, border_hills=None)
    grid = generate_forest("forest_spacing", bare)
    natural = grid.heightmap()
    trees = ForestTreeSettings(count_min=5, count_max=5, placement_threshold=0.0)
    placed = place_forest_trees(
        grid,
        RandomStream("forest_spacing_trees"),
        derive_stream("forest_spacing", "_forest_trees").noise2d(),
        natural,
        trees,
        ground_types(bare),
    )
    assert len(placed) == 5
    for i, (x1, z1) in enumerate(placed):
        assert grid.get(x1, int(natural[z1, x1]) + 1, z1) == VOXEL_FOREST_TRUNK
        for x2, z2 in placed[i + 1:]:
            assert (x1 - x2) ** 2 + (z1 - z2) ** 2 >= trees.min_dist_from_other_tree ** 2


def test_tree_count_within_range():
    settings = DEFAULT_FOREST_SETTINGS
    grid = generate_forest("forest_count", replace(settings, trees=None))
    placed = place_forest_trees(
        grid,
        RandomStream("forest_count_trees"),
        derive_stream("forest_count", "_forest_trees").noise2d(),
        grid.heightmap(passable=(VOXEL_EMPTY, VOXEL_PEBBLE)),
        settings.trees,
        ground_types(settings),
    )
    assert len(placed) <= settings.trees.count_max


def test_edge_inward_steps():
    assert Edge.NEG_X.inward == (1, 0)
    assert Edge.POS_X.inward == (-1, 0)
    assert Edge.NEG_Z.inward == (0, 1)
    assert Edge.POS_Z.inward == (0, -1)


def _hill_block(size: GridSize) -> VoxelGrid:
    grid = VoxelGrid(size)
    for x in range(size.x):
        for z in range(size.z):
            grid.fill_column(x, z, 0, 13, VOXEL_STONE)
    return grid


def test_cave_only_clears_above_natural_surface():
    size = GridSize.cube(16)
    grid = _hill_block(size)
    natural = np.full((16, 16), 4, dtype=np.int32)
    cave = CaveSettings(entrance_width=5, entrance_height=5, floor_offset=1)

    cleared = carve_cave(grid, natural, Edge.NEG_X, 0.0, 8.0, 4.0, cave)

    # Entrance at x=2, tunnel runs to x=15 over z 6..10 and y 5..9
    assert cleared == 14 * 5 * 5
    assert grid.get(3, 5, 8) == VOXEL_EMPTY
    assert grid.get(15, 9, 10) == VOXEL_EMPTY
    assert grid.get(1, 5, 8) == VOXEL_STONE
    assert grid.get(3, 10, 8) == VOXEL_STONE
    assert grid.get(3, 5, 11) == VOXEL_STONE
    for x in range(16):
        for z in range(16):
            assert grid.get(x, 4, z) == VOXEL_STONE


def test_cave_never_cuts_natural_terrain():
    size = GridSize.cube(16)
    grid = _hill_block(size)
    natural = np.full((16, 16), 12, dtype=np.int32)
    cave = CaveSettings(floor_offset=-5)
    assert carve_cave(grid, natural, Edge.POS_Z, 8.0, 15.0, 4.0, cave) == 0
    assert grid.count(VOXEL_EMPTY) == 16 * 16 * 3


def test_border_hills_respect_chance(small_grid):
    settings = replace(DEFAULT_FOREST_SETTINGS, border_hills=BorderHillSettings(chance=0.0))
    natural = np.zeros((8, 8), dtype=np.int32)
    assert raise_border_hills(small_grid, RandomStream("hills"), natural, settings) == 0
    settings = replace(DEFAULT_FOREST_SETTINGS, border_hills=None)
    assert raise_border_hills(small_grid, RandomStream("hills"), natural, settings) == 0


def test_border_hill_raises_terrain():
    settings = replace(
        DEFAULT_FOREST_SETTINGS,
        trees=None,
        pebbles=None,
        border_hills=BorderHillSettings(chance=1.0, cave=None),
    )
    flat = generate_forest("forest_hill", replace(settings, border_hills=None))
    hilly = generate_forest("forest_hill", settings)
    passable = (VOXEL_EMPTY, VOXEL_PEBBLE)
    assert (hilly.heightmap(passable) >= flat.heightmap(passable)).all()
    assert (hilly.heightmap(passable) > flat.heightmap(passable)).any()


def test_tree_count_reaches_minimum_when_sites_are_plentiful():
    bare = replace(DEFAULT_FOREST_SETTINGS, trees=None, pebbles=None, border_hills=None)
    grid = generate_forest("forest_many", bare)
    trees = ForestTreeSettings(count_min=6, count_max=10, placement_threshold=0.0, max_placement_attempts=200)
    placed = place_forest_trees(
        grid,
        RandomStream("forest_many_trees"),
        derive_stream("forest_many", "_forest_trees").noise2d(),
        grid.heightmap(),
        trees,
        ground_types(bare),
    )
    assert trees.count_min <= len(placed) <= trees.count_max


def test_hill_clipped_by_grid_top_keeps_its_cap(small_grid):
    for x in range(8):
        for z in range(8):
            small_grid.fill_column(x, z, 0, 5, VOXEL_STONE)
            small_grid.set(x, 5, z, VOXEL_GRASS)

    _raise_hill(small_grid, RandomStream("tall"), 4.0, 4.0, 3.0, 10.0, DEFAULT_FOREST_SETTINGS)

    assert small_grid.get(4, 7, 4) == VOXEL_GRASS
    assert small_grid.get(4, 6, 4) in STONE_TYPES
    assert small_grid.get(4, 5, 4) in STONE_TYPES
