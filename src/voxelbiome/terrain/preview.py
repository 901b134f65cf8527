"""Top-down colour preview of a generated chunk.

Each pixel shows the material of the topmost non-empty voxel in its
column, darkened with depth so hills and hollows stay readable.
"""

from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image

from ..voxel.constants import VOXEL_EMPTY
from ..voxel.grid import VoxelGrid
from ..voxel.materials import MaterialRegistry, get_default_registry


def render_top_down(
    grid: VoxelGrid,
    scale: int = 4,
    registry: Optional[MaterialRegistry] = None,
) -> Image.Image:
    """Render a top-down RGB image of a grid.

    Args:
        grid: Generated grid
        scale: Pixels per column edge
        registry: Material registry for colours

    Returns:
        PIL image of size (size_x * scale, size_z * scale)
    """
    if scale <= 0:
        raise ValueError(f"Scale must be positive: {scale}")
    registry = registry or get_default_registry()
    size = grid.size
    pixels = np.zeros((size.z, size.x, 3), dtype=np.uint8)
    sky = registry.get(VOXEL_EMPTY).color

    for z in range(size.z):
        for x in range(size.x):
            y = grid.top_y(x, z)
            if y == -1:
                pixels[z, x] = sky
                continue
            shade = 0.55 + 0.45 * (y / max(1, size.y - 1))
            r, g, b = registry.get(grid.get(x, y, z)).color
            pixels[z, x] = (int(r * shade), int(g * shade), int(b * shade))

    image = Image.fromarray(pixels)
    if scale != 1:
        image = image.resize((size.x * scale, size.z * scale), Image.Resampling.NEAREST)
    return image


def save_preview(grid: VoxelGrid, path: Union[str, Path], scale: int = 4) -> Path:
    """Render a grid and save it as an image file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    render_top_down(grid, scale).save(path)
    return path
