from voxelbiome.terrain.plain import generate_test_plain, plain_height
from voxelbiome.terrain.settings import TestPlainSettings, DEFAULT_TEST_PLAIN_SETTINGS
from voxelbiome.voxel.constants import VOXEL_EMPTY, VOXEL_GRASS, VOXEL_SAND
from voxelbiome.voxel.grid import GridSize


def test_plain_fills_lower_quarter():
    grid = generate_test_plain("anything")
    assert grid.get(0, 15, 0) == VOXEL_GRASS
    assert grid.get(0, 16, 0) == VOXEL_EMPTY
    assert grid.get(63, 0, 63) == VOXEL_GRASS
    assert grid.count(VOXEL_GRASS) == 64 * 64 * 16


def test_plain_ignores_seed(small_size):
    assert generate_test_plain("a", size=small_size) == generate_test_plain("b", size=small_size)


def test_plain_custom_settings(small_size):
    settings = TestPlainSettings(base_height_factor=0.5, surface_voxel=VOXEL_SAND)
    grid = generate_test_plain("s", settings, small_size)
    assert plain_height(settings, small_size) == 4
    assert grid.column(3, 3).tolist() == [VOXEL_SAND] * 4 + [VOXEL_EMPTY] * 4


def test_plain_height_is_clamped():
    size = GridSize.cube(8)
    assert plain_height(TestPlainSettings(base_height_factor=2.0), size) == 8
    assert plain_height(DEFAULT_TEST_PLAIN_SETTINGS, size) == 2
