"""Constants for the voxel chunk format.

A chunk is a dense SIZE_X x SIZE_Y x SIZE_Z volume of voxel codes stored
as a flat sequence. The linear index of a voxel is
``x + y * SIZE_X + z * SIZE_X * SIZE_Y``.
"""

# Chunk dimensions
CHUNK_SIZE = 64  # 64x64 voxels horizontally
CHUNK_HEIGHT = 64  # Total height in voxels

# Voxel codes (0 is reserved for empty/air)
VOXEL_EMPTY = 0
VOXEL_MUSHROOM_CAP = 1
VOXEL_MUSHROOM_STEM = 2
VOXEL_GRASS = 3
VOXEL_DIRT_LIGHT = 4
VOXEL_DIRT_MEDIUM = 5
VOXEL_DIRT_DARK = 6

# Beach materials
VOXEL_SAND = 7
VOXEL_SANDSTONE = 8
VOXEL_WATER = 9
VOXEL_PALM_TRUNK = 10
VOXEL_PALM_FROND = 11
VOXEL_SAND_LIGHT = 12
VOXEL_SAND_DARK = 13
VOXEL_ROCK = 14
VOXEL_BEACH_GRASS = 15

# Forest materials
VOXEL_FOREST_TRUNK = 16
VOXEL_FOREST_LEAVES = 17
VOXEL_FOREST_FLOOR_DETAIL = 18
VOXEL_PEBBLE = 19
VOXEL_STONE = 20
VOXEL_STONE_LIGHT = 21
VOXEL_STONE_DARK = 22
VOXEL_FOREST_LEAVES_ALT = 23

# Material groups used by several passes
SAND_TYPES = frozenset({VOXEL_SAND, VOXEL_SAND_LIGHT, VOXEL_SAND_DARK})
STONE_TYPES = frozenset({VOXEL_STONE, VOXEL_STONE_LIGHT, VOXEL_STONE_DARK})
LEAF_TYPES = frozenset({VOXEL_FOREST_LEAVES, VOXEL_FOREST_LEAVES_ALT})


def index_voxel(x: int, y: int, z: int, size_x: int = CHUNK_SIZE, size_y: int = CHUNK_HEIGHT) -> int:
    """Calculate the linear index of a voxel from local x,y,z coordinates."""
    return x + y * size_x + z * size_x * size_y


def x_from_index(index: int, size_x: int = CHUNK_SIZE) -> int:
    """Extract x coordinate from a linear index."""
    return index % size_x


def y_from_index(index: int, size_x: int = CHUNK_SIZE, size_y: int = CHUNK_HEIGHT) -> int:
    """Extract y coordinate from a linear index."""
    return (index // size_x) % size_y


def z_from_index(index: int, size_x: int = CHUNK_SIZE, size_y: int = CHUNK_HEIGHT) -> int:
    """Extract z coordinate from a linear index."""
    return index // (size_x * size_y)
