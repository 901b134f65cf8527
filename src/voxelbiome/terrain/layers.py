"""Heightmap and layering passes shared by the biome generators.

The heightmap pass turns a per-column height function into a (z, x) array
of surface heights. The layering pass fills a column below its surface
with bands of material, optionally mixing voxels across each band
boundary.

Random draws are always taken in the same order: columns by ascending x,
then ascending z, and within a column by descending y.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from ..voxel.constants import VOXEL_STONE, VOXEL_STONE_LIGHT, VOXEL_STONE_DARK
from ..voxel.grid import GridSize, VoxelGrid
from .noise import RandomStream
from .settings import StoneVariationSettings, TransitionSettings


@dataclass(frozen=True)
class Band:
    """A vertical band of material below the surface.

    Attributes:
        pick: Returns the voxel for the next position in the band
        depth: Number of voxels in the band, or None to fill to the bottom
    """
    pick: Callable[[], int]
    depth: Optional[int] = None

    @classmethod
    def solid(cls, voxel: int, depth: Optional[int] = None) -> "Band":
        """Create a band of a single material."""
        return cls(lambda: voxel, depth)


def clamp_surface_y(height: float, size_y: int) -> int:
    """Floor a surface height and clamp it into the grid."""
    return max(0, min(size_y - 1, int(np.floor(height))))


def heightmap_pass(size: GridSize, height_at: Callable[[int, int], float]) -> np.ndarray:
    """Compute the surface height of every column.

    Args:
        size: Grid dimensions
        height_at: Returns the unclamped surface height for column x,z

    Returns:
        (z, x) array of surface Y coordinates clamped to the grid
    """
    heights = np.zeros((size.z, size.x), dtype=np.int32)
    for x in range(size.x):
        for z in range(size.z):
            heights[z, x] = clamp_surface_y(height_at(x, z), size.y)
    return heights


def pick_stone(stream: RandomStream, variations: Optional[StoneVariationSettings]) -> int:
    """Pick a stone voxel, recoloured light or dark by chance.

    Without variation settings this is plain stone and takes no draw.
    """
    if variations is None:
        return VOXEL_STONE
    value = stream.random()
    if value < variations.light_chance:
        return VOXEL_STONE_LIGHT
    if value < variations.light_chance + variations.dark_chance:
        return VOXEL_STONE_DARK
    return VOXEL_STONE


def fill_banded_column(
    grid: VoxelGrid,
    x: int,
    z: int,
    surface_y: int,
    bands: Sequence[Band],
    stream: RandomStream,
    transition: Optional[TransitionSettings] = None,
) -> None:
    """Fill a column from just below its surface down to y=0.

    Bands are laid top to bottom. With a transition, the last
    ``transition.depth`` voxels of a band and the first ``transition.depth``
    voxels of the band below it each swap to the other band's material
    with ``transition.mix_chance``.
    """
    band_index = 0
    depth_in_band = 0
    for y in range(surface_y - 1, -1, -1):
        band = bands[band_index]
        if band.depth is not None and depth_in_band >= band.depth and band_index + 1 < len(bands):
            band_index += 1
            depth_in_band = 0
            band = bands[band_index]

        voxel = band.pick()
        if transition is not None and transition.depth > 0:
            neighbor = None
            below = bands[band_index + 1] if band_index + 1 < len(bands) else None
            if below is not None and band.depth is not None and depth_in_band >= band.depth - transition.depth:
                neighbor = below
            elif band_index > 0 and depth_in_band < transition.depth:
                neighbor = bands[band_index - 1]
            if neighbor is not None and stream.random() < transition.mix_chance:
                voxel = neighbor.pick()

        grid.set(x, y, z, voxel)
        depth_in_band += 1
