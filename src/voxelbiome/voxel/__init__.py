"""Voxel chunk storage and material codes."""

from .constants import (
    CHUNK_SIZE,
    CHUNK_HEIGHT,
    VOXEL_EMPTY,
    VOXEL_WATER,
    SAND_TYPES,
    STONE_TYPES,
    LEAF_TYPES,
    index_voxel,
    x_from_index,
    y_from_index,
    z_from_index,
)
from .materials import Material, MaterialRegistry, get_default_registry
from .grid import (
    FACE_DIRECTIONS,
    FrozenGridError,
    GridSize,
    VoxelGrid,
    exposed_faces,
    liquid_faces,
)

__all__ = [
    # Constants
    "CHUNK_SIZE",
    "CHUNK_HEIGHT",
    "VOXEL_EMPTY",
    "VOXEL_WATER",
    "SAND_TYPES",
    "STONE_TYPES",
    "LEAF_TYPES",
    "index_voxel",
    "x_from_index",
    "y_from_index",
    "z_from_index",
    # Materials
    "Material",
    "MaterialRegistry",
    "get_default_registry",
    # Grid
    "FACE_DIRECTIONS",
    "FrozenGridError",
    "GridSize",
    "VoxelGrid",
    "exposed_faces",
    "liquid_faces",
]
