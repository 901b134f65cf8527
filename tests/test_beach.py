from dataclasses import replace

import pytest

from voxelbiome.terrain.beach import generate_beach, place_beach_grass, place_palm_trees
from voxelbiome.terrain.noise import derive_stream
from voxelbiome.terrain.settings import BeachGrassSettings, PalmTreeSettings, DEFAULT_BEACH_SETTINGS
from voxelbiome.voxel.constants import (
    VOXEL_BEACH_GRASS,
    VOXEL_PALM_FROND,
    VOXEL_PALM_TRUNK,
    VOXEL_ROCK,
    VOXEL_SAND,
    VOXEL_SANDSTONE,
    VOXEL_WATER,
    SAND_TYPES,
)
from voxelbiome.voxel.grid import GridSize, VoxelGrid

WATER_LEVEL = 10  # int(64 / 6)


@pytest.fixture(scope="module")
def beach():
    return generate_beach("beach_hello world")


def test_beach_is_deterministic(beach):
    assert generate_beach("beach_hello world") == beach


def test_beach_seed_changes_terrain(beach):
    assert generate_beach("beach_goodbye") != beach


def test_beach_has_water_below_water_level(beach):
    assert beach.count(VOXEL_WATER) > 0
    assert all(y < WATER_LEVEL for _, y, _, voxel in beach.occupied() if voxel == VOXEL_WATER)


def test_far_edge_is_flooded():
    settings = replace(DEFAULT_BEACH_SETTINGS, trees=None, rocks=None, beach_grass=None)
    grid = generate_beach("beach_edge", settings, GridSize(32, 64, 32))
    for x in range(grid.size.x):
        assert grid.get(x, WATER_LEVEL - 1, 31) == VOXEL_WATER
        assert grid.get(x, WATER_LEVEL, 31) not in SAND_TYPES


def test_beach_base_is_sandstone(beach):
    for x in range(beach.size.x):
        for z in range(beach.size.z):
            assert beach.get(x, 0, z) == VOXEL_SANDSTONE


def test_rocks_sit_on_sand(beach):
    rocks = [(x, y, z) for x, y, z, voxel in beach.occupied() if voxel == VOXEL_ROCK]
    assert rocks
    for x, y, z in rocks:
        assert beach.get(x, y - 1, z) in SAND_TYPES
        assert y - 1 >= WATER_LEVEL


def test_palm_trees_stand_above_water(beach):
    trunk = [(x, y, z) for x, y, z, voxel in beach.occupied() if voxel == VOXEL_PALM_TRUNK]
    assert all(y > WATER_LEVEL for _, y, _ in trunk)


def test_beach_grass_on_dry_land(beach):
    for x, y, z, voxel in beach.occupied():
        if voxel == VOXEL_BEACH_GRASS:
            assert y >= WATER_LEVEL
            assert beach.get(x, y + 1, z) not in SAND_TYPES


def test_features_can_be_disabled():
    settings = replace(DEFAULT_BEACH_SETTINGS, trees=None, rocks=None, beach_grass=None)
    grid = generate_beach("beach_plain", settings, GridSize(32, 64, 32))
    for code in (VOXEL_PALM_TRUNK, VOXEL_PALM_FROND, VOXEL_ROCK, VOXEL_BEACH_GRASS):
        assert grid.count(code) == 0
    assert grid.count(VOXEL_WATER) > 0


def test_palm_count_never_exceeds_setting():
    settings = replace(DEFAULT_BEACH_SETTINGS, trees=None, rocks=None, beach_grass=None)
    grid = generate_beach("beach_palms", settings)
    trees = PalmTreeSettings(count=2)
    placed = place_palm_trees(
        grid,
        derive_stream("beach_palms"),
        derive_stream("beach_palms", "trees").noise2d(),
        derive_stream("beach_palms", "trunkCurve").noise2d(),
        trees,
        WATER_LEVEL,
    )
    assert 0 <= placed <= 2
    if placed:
        assert grid.count(VOXEL_PALM_TRUNK) > 0


def test_beach_small_grid():
    grid = generate_beach("beach_tiny", size=GridSize.cube(16))
    assert grid.size == GridSize.cube(16)
    assert grid.count(VOXEL_WATER) > 0
    assert len(grid.tolist()) == 16 ** 3


def _column_clusters(columns):
    """Count 4-connected groups of (x, z) columns."""
    remaining = set(columns)
    clusters = 0
    while remaining:
        clusters += 1
        stack = [remaining.pop()]
        while stack:
            x, z = stack.pop()
            for neighbor in ((x + 1, z), (x - 1, z), (x, z + 1), (x, z - 1)):
                if neighbor in remaining:
                    remaining.remove(neighbor)
                    stack.append(neighbor)
    return clusters


def test_hello_world_has_at_most_two_palms(beach):
    trunk_columns = {(x, z) for x, _, z, voxel in beach.occupied() if voxel == VOXEL_PALM_TRUNK}
    assert _column_clusters(trunk_columns) <= 2


def test_beach_grass_keeps_away_from_water(beach):
    distance = DEFAULT_BEACH_SETTINGS.beach_grass.min_distance_from_water
    for x, y, z, voxel in beach.occupied():
        if voxel != VOXEL_BEACH_GRASS:
            continue
        for d in range(1, distance + 1):
            for nx, nz in ((x + d, z), (x - d, z), (x, z + d), (x, z - d)):
                top = beach.top_y(nx, nz)
                assert top == -1 or beach.get(nx, top, nz) != VOXEL_WATER


def test_beach_grass_skips_shoreline_columns():
    grid = VoxelGrid(GridSize(8, 8, 1))
    for x in range(8):
        grid.fill_column(x, 0, 0, 4, VOXEL_SAND)
    grid.set(0, 3, 0, VOXEL_WATER)
    placed = place_beach_grass(
        grid, derive_stream("grass"), BeachGrassSettings(density_factor=1.0, min_distance_from_water=3), 3
    )
    assert placed == 4
    assert [grid.get(x, 3, 0) for x in range(1, 4)] == [VOXEL_SAND] * 3
    assert [grid.get(x, 3, 0) for x in range(4, 8)] == [VOXEL_BEACH_GRASS] * 4
