"""Dense voxel grid storage.

The grid is the only data interface between the generators and the
meshing layer. Voxels live in a numpy uint8 array shaped (z, y, x) so the
flat C-order index is ``x + y * size_x + z * size_x * size_y``.

All reads and writes go through :meth:`VoxelGrid.get` and
:meth:`VoxelGrid.set` (or the column helpers built on them), which keep
bounds checks in one place: out-of-range reads return empty and
out-of-range writes are ignored.
"""

from dataclasses import dataclass
from typing import Collection, Iterator, List, Optional, Tuple

import numpy as np

from .constants import CHUNK_SIZE, CHUNK_HEIGHT, VOXEL_EMPTY, index_voxel
from .materials import MaterialRegistry, get_default_registry


class FrozenGridError(RuntimeError):
    """Raised when writing to a grid that was handed back to a caller."""


@dataclass(frozen=True)
class GridSize:
    """Dimensions of a voxel grid."""
    x: int = CHUNK_SIZE
    y: int = CHUNK_HEIGHT
    z: int = CHUNK_SIZE

    def __post_init__(self):
        for axis in ("x", "y", "z"):
            value = getattr(self, axis)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"Grid size {axis} must be a positive integer: {value!r}")

    @property
    def volume(self) -> int:
        return self.x * self.y * self.z

    @classmethod
    def cube(cls, size: int) -> "GridSize":
        """Create a grid size with the same extent on every axis."""
        return cls(size, size, size)


# Neighbour offsets, in the order the mesher emits faces
FACE_DIRECTIONS: Tuple[Tuple[int, int, int], ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


class VoxelGrid:
    """A fixed-size dense volume of voxel codes."""

    def __init__(self, size: Optional[GridSize] = None):
        self.size = size or GridSize()
        self._voxels = np.full((self.size.z, self.size.y, self.size.x), VOXEL_EMPTY, dtype=np.uint8)
        self._frozen = False

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        """Check if coordinates are inside the grid."""
        return 0 <= x < self.size.x and 0 <= y < self.size.y and 0 <= z < self.size.z

    def index(self, x: int, y: int, z: int) -> int:
        """Get the linear index of an in-range voxel."""
        return index_voxel(x, y, z, self.size.x, self.size.y)

    def get(self, x: int, y: int, z: int) -> int:
        """Get voxel code at coordinates, returning empty if out of range."""
        if not self.in_bounds(x, y, z):
            return VOXEL_EMPTY
        return int(self._voxels[z, y, x])

    def set(self, x: int, y: int, z: int, voxel: int) -> None:
        """Set voxel code at coordinates. Out-of-range writes are ignored."""
        if self._frozen:
            raise FrozenGridError("Grid is read-only once generation has finished")
        if not self.in_bounds(x, y, z):
            return
        self._voxels[z, y, x] = voxel

    def fill_column(self, x: int, z: int, y_start: int, y_stop: int, voxel: int) -> None:
        """Fill voxels ``y_start <= y < y_stop`` of a column, clipped to the grid."""
        if self._frozen:
            raise FrozenGridError("Grid is read-only once generation has finished")
        if not (0 <= x < self.size.x and 0 <= z < self.size.z):
            return
        y_start = max(0, y_start)
        y_stop = min(self.size.y, y_stop)
        if y_start < y_stop:
            self._voxels[z, y_start:y_stop, x] = voxel

    def column(self, x: int, z: int) -> np.ndarray:
        """Get a read-only copy of the column at x,z (index is y)."""
        if not (0 <= x < self.size.x and 0 <= z < self.size.z):
            return np.zeros(self.size.y, dtype=np.uint8)
        return self._voxels[z, :, x].copy()

    def top_y(
        self,
        x: int,
        z: int,
        targets: Optional[Collection[int]] = None,
        passable: Collection[int] = (VOXEL_EMPTY,),
    ) -> int:
        """Scan a column from the top and return the Y of the first match.

        Args:
            x: Column X coordinate
            z: Column Z coordinate
            targets: Voxel codes that count as a hit. If None, any voxel
                not in ``passable`` is a hit.
            passable: Voxel codes the scan may continue through. Any other
                non-target voxel ends the scan without a hit.

        Returns:
            Y coordinate of the hit, or -1 if there is none
        """
        if not (0 <= x < self.size.x and 0 <= z < self.size.z):
            return -1
        column = self._voxels[z, :, x]
        for y in range(self.size.y - 1, -1, -1):
            voxel = int(column[y])
            if targets is None:
                if voxel not in passable:
                    return y
            elif voxel in targets:
                return y
            elif voxel not in passable:
                return -1
        return -1

    def heightmap(self, passable: Collection[int] = (VOXEL_EMPTY,)) -> np.ndarray:
        """Get the top non-passable Y of every column as a (z, x) array."""
        heights = np.full((self.size.z, self.size.x), -1, dtype=np.int32)
        for z in range(self.size.z):
            for x in range(self.size.x):
                heights[z, x] = self.top_y(x, z, passable=passable)
        return heights

    def count(self, voxel: int) -> int:
        """Count voxels with the given code."""
        return int(np.count_nonzero(self._voxels == voxel))

    def counts(self) -> dict:
        """Get a mapping of voxel code to number of voxels."""
        codes, totals = np.unique(self._voxels, return_counts=True)
        return {int(code): int(total) for code, total in zip(codes, totals)}

    def occupied(self) -> Iterator[Tuple[int, int, int, int]]:
        """Iterate over non-empty voxels as (x, y, z, voxel)."""
        zs, ys, xs = np.nonzero(self._voxels != VOXEL_EMPTY)
        for z, y, x in zip(zs.tolist(), ys.tolist(), xs.tolist()):
            yield x, y, z, int(self._voxels[z, y, x])

    def freeze(self) -> "VoxelGrid":
        """Make the grid read-only and return it."""
        self._frozen = True
        self._voxels.flags.writeable = False
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def as_array(self) -> np.ndarray:
        """Get a read-only (z, y, x) view of the voxel data."""
        view = self._voxels.view()
        view.flags.writeable = False
        return view

    def tolist(self) -> List[int]:
        """Get the voxels as a flat list in linear index order."""
        return self._voxels.ravel().tolist()

    def tobytes(self) -> bytes:
        """Get the voxels as bytes in linear index order."""
        return self._voxels.tobytes()

    def __len__(self) -> int:
        return self.size.volume

    def __getitem__(self, index: int) -> int:
        return int(self._voxels.ravel()[index])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VoxelGrid):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._voxels, other._voxels)

    def __repr__(self) -> str:
        return f"VoxelGrid({self.size.x}x{self.size.y}x{self.size.z})"


def exposed_faces(grid: VoxelGrid, x: int, y: int, z: int) -> List[Tuple[int, int, int]]:
    """Get the face directions of a voxel that border a different material.

    Neighbours outside the grid read as empty, so faces on the chunk
    boundary are always exposed.
    """
    voxel = grid.get(x, y, z)
    faces = []
    for dx, dy, dz in FACE_DIRECTIONS:
        if grid.get(x + dx, y + dy, z + dz) != voxel:
            faces.append((dx, dy, dz))
    return faces


def liquid_faces(
    grid: VoxelGrid,
    registry: Optional[MaterialRegistry] = None,
) -> Iterator[Tuple[int, int, int, Tuple[int, int, int]]]:
    """Iterate over the visible faces of every liquid voxel.

    Yields (x, y, z, direction) for each face of a liquid voxel whose
    neighbour is not the same liquid. The meshing layer builds one
    seamless translucent surface from these faces.
    """
    registry = registry or get_default_registry()
    for x, y, z, voxel in grid.occupied():
        if not registry.is_liquid(voxel):
            continue
        for direction in exposed_faces(grid, x, y, z):
            yield x, y, z, direction
