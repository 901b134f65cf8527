"""Flat test plain generator.

A baseline with no noise and no features: every column is solid from
y=0 up to a fixed fraction of the grid height.
"""

from typing import Optional

from ..voxel.grid import GridSize, VoxelGrid
from .settings import TestPlainSettings, DEFAULT_TEST_PLAIN_SETTINGS


def plain_height(settings: TestPlainSettings, size: GridSize) -> int:
    """Number of solid voxels in each column."""
    return max(0, min(size.y, int(size.y * settings.base_height_factor)))


def generate_test_plain(
    seed: str,
    settings: TestPlainSettings = DEFAULT_TEST_PLAIN_SETTINGS,
    size: Optional[GridSize] = None,
) -> VoxelGrid:
    """Generate a flat plain. The seed is accepted for a uniform interface but unused."""
    size = size or GridSize()
    grid = VoxelGrid(size)
    height = plain_height(settings, size)
    for x in range(size.x):
        for z in range(size.z):
            grid.fill_column(x, z, 0, height, settings.surface_voxel)
    return grid
