"""VoxelBiome: procedural voxel terrain chunks for named biomes."""

__version__ = "0.1.0"

from .voxel import GridSize, VoxelGrid, FrozenGridError
from .terrain import (
    Biome,
    BiomeNotFoundError,
    BiomeRegistry,
    derive_scoped_seed,
    generate,
    get_default_registry,
)
from .config import GenerationConfig

__all__ = [
    "__version__",
    "GridSize",
    "VoxelGrid",
    "FrozenGridError",
    "Biome",
    "BiomeNotFoundError",
    "BiomeRegistry",
    "derive_scoped_seed",
    "generate",
    "get_default_registry",
    "GenerationConfig",
]
