"""Biome registry and the top-level generate() entry point.

A biome couples an id with its generator and settings. Registration is
pluggable: the default registry carries beach, forest and test_plain, and
callers may build their own.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..voxel.grid import GridSize, VoxelGrid
from .beach import generate_beach
from .forest import generate_forest
from .plain import generate_test_plain
from .settings import (
    DEFAULT_BEACH_SETTINGS,
    DEFAULT_FOREST_SETTINGS,
    DEFAULT_TEST_PLAIN_SETTINGS,
)

logger = logging.getLogger(__name__)

Generator = Callable[[str, Any, Optional[GridSize]], VoxelGrid]


class BiomeNotFoundError(KeyError):
    """Raised when a biome id is not registered."""

    def __init__(self, biome_id: str, available: List[str]):
        self.biome_id = biome_id
        self.available = available
        super().__init__(biome_id)

    def __str__(self) -> str:
        return f"Unknown biome: {self.biome_id!r} (available: {', '.join(self.available) or 'none'})"


@dataclass(frozen=True)
class Biome:
    """A named terrain style with its generator and settings."""
    id: str
    display_name: str
    generator: Generator
    settings: Any

    @property
    def environment_asset(self) -> str:
        """Opaque asset reference handed to the renderer."""
        return getattr(self.settings, "environment_asset", "")

    def generate(self, scoped_seed: str, size: Optional[GridSize] = None) -> VoxelGrid:
        """Run this biome's generator with a scoped seed."""
        return self.generator(scoped_seed, self.settings, size)


class BiomeRegistry:
    """Registry of available biomes, keyed by id."""

    def __init__(self):
        self._biomes: Dict[str, Biome] = {}

    def register(self, biome: Biome) -> Biome:
        """Register a biome, replacing any biome with the same id."""
        self._biomes[biome.id] = biome
        return biome

    def get(self, biome_id: str) -> Biome:
        """Get a biome by id.

        Raises:
            BiomeNotFoundError: If no biome has this id
        """
        try:
            return self._biomes[biome_id]
        except KeyError:
            raise BiomeNotFoundError(biome_id, self.ids()) from None

    def ids(self) -> List[str]:
        return list(self._biomes)

    def available(self) -> List[Biome]:
        return list(self._biomes.values())

    def __contains__(self, biome_id: str) -> bool:
        return biome_id in self._biomes

    def __len__(self) -> int:
        return len(self._biomes)


def create_default_registry() -> BiomeRegistry:
    """Create a registry with the built-in biomes."""
    registry = BiomeRegistry()
    registry.register(Biome("beach", "Beach", generate_beach, DEFAULT_BEACH_SETTINGS))
    registry.register(Biome("forest", "Forest", generate_forest, DEFAULT_FOREST_SETTINGS))
    registry.register(Biome("test_plain", "Test Plain", generate_test_plain, DEFAULT_TEST_PLAIN_SETTINGS))
    return registry


DEFAULT_REGISTRY = create_default_registry()


def get_default_registry() -> BiomeRegistry:
    """Get the default biome registry."""
    return DEFAULT_REGISTRY


def derive_scoped_seed(biome_id: str, user_seed: str) -> str:
    """Combine a biome id and a user seed into the seed a generator runs on.

    An empty user seed gets a random suffix, so every such call produces a
    different terrain.
    """
    if not user_seed:
        return f"{biome_id}_{uuid.uuid4().hex[:8]}"
    return f"{biome_id}_{user_seed}"


def generate(
    biome_id: str,
    seed: str,
    size: Optional[GridSize] = None,
    registry: Optional[BiomeRegistry] = None,
) -> VoxelGrid:
    """Generate a chunk for a biome.

    Args:
        biome_id: Registered biome id
        seed: User seed (empty for a random one)
        size: Grid dimensions (defaults to 64x64x64)
        registry: Biome registry (defaults to the built-in one)

    Returns:
        The generated, read-only VoxelGrid

    Raises:
        BiomeNotFoundError: If the biome id is not registered
    """
    registry = registry or DEFAULT_REGISTRY
    biome = registry.get(biome_id)
    scoped_seed = derive_scoped_seed(biome_id, seed)

    start = time.perf_counter()
    grid = biome.generate(scoped_seed, size)
    logger.info(
        "Generated %s chunk %r (%dx%dx%d) in %.2fs",
        biome.display_name, scoped_seed, grid.size.x, grid.size.y, grid.size.z,
        time.perf_counter() - start,
    )
    return grid.freeze()
