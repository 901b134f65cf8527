# Add src/ to sys.path so tests run without installing the package
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from voxelbiome.voxel.grid import GridSize, VoxelGrid  # noqa: E402


@pytest.fixture
def small_size():
    return GridSize.cube(8)


@pytest.fixture
def small_grid(small_size):
    return VoxelGrid(small_size)
