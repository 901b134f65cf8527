"""Material registry for voxel codes.

This module provides a mapping between voxel codes and the materials
they stand for. The code space is open: new materials can be registered
at runtime, code 0 is always "Empty".

The display colours match the palette the renderer uses and are only
consumed by the preview image.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .constants import (
    VOXEL_EMPTY,
    VOXEL_MUSHROOM_CAP,
    VOXEL_MUSHROOM_STEM,
    VOXEL_GRASS,
    VOXEL_DIRT_LIGHT,
    VOXEL_DIRT_MEDIUM,
    VOXEL_DIRT_DARK,
    VOXEL_SAND,
    VOXEL_SANDSTONE,
    VOXEL_WATER,
    VOXEL_PALM_TRUNK,
    VOXEL_PALM_FROND,
    VOXEL_SAND_LIGHT,
    VOXEL_SAND_DARK,
    VOXEL_ROCK,
    VOXEL_BEACH_GRASS,
    VOXEL_FOREST_TRUNK,
    VOXEL_FOREST_LEAVES,
    VOXEL_FOREST_FLOOR_DETAIL,
    VOXEL_PEBBLE,
    VOXEL_STONE,
    VOXEL_STONE_LIGHT,
    VOXEL_STONE_DARK,
    VOXEL_FOREST_LEAVES_ALT,
)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Material:
    """Represents a voxel material with its properties."""
    code: int
    name: str
    color: Color = (0, 0, 0)
    is_liquid: bool = False


class MaterialRegistry:
    """Registry of known voxel materials."""

    def __init__(self):
        self._by_code: Dict[int, Material] = {}
        self._by_name: Dict[str, Material] = {}

        # Code 0 is always Empty
        self.register(Material(VOXEL_EMPTY, "Empty", (173, 216, 230)))

    def register(self, material: Material) -> Material:
        """Register a material, replacing any previous entry for its code."""
        if material.code < 0 or material.code > 255:
            raise ValueError(f"Voxel code must be 0-255: {material.code}")
        previous = self._by_code.get(material.code)
        if previous is not None:
            self._by_name.pop(previous.name, None)
        self._by_code[material.code] = material
        self._by_name[material.name] = material
        return material

    def get(self, code: int) -> Material:
        """Get a material by code, returning Empty if not found."""
        return self._by_code.get(code, self._by_code[VOXEL_EMPTY])

    def get_by_name(self, name: str) -> Optional[Material]:
        """Get a material by its name."""
        return self._by_name.get(name)

    def get_name(self, code: int) -> str:
        """Get material name by code, returning 'Empty' if not found."""
        return self.get(code).name

    def is_liquid(self, code: int) -> bool:
        return self.get(code).is_liquid

    def __contains__(self, code: int) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[Material]:
        return iter(sorted(self._by_code.values(), key=lambda m: m.code))

    def __len__(self) -> int:
        return len(self._by_code)


def _build_default_registry() -> MaterialRegistry:
    registry = MaterialRegistry()
    for material in (
        Material(VOXEL_MUSHROOM_CAP, "Mushroom Cap", (200, 40, 40)),
        Material(VOXEL_MUSHROOM_STEM, "Mushroom Stem", (235, 225, 200)),
        Material(VOXEL_GRASS, "Grass", (0x2E, 0x6F, 0x40)),
        Material(VOXEL_DIRT_LIGHT, "Dirt Light", (0x9B, 0x76, 0x53)),
        Material(VOXEL_DIRT_MEDIUM, "Dirt Medium", (0x70, 0x54, 0x3E)),
        Material(VOXEL_DIRT_DARK, "Dirt Dark", (0x4F, 0x3A, 0x2B)),
        Material(VOXEL_SAND, "Sand", (0xF4, 0xE0, 0xAC)),
        Material(VOXEL_SANDSTONE, "Sandstone", (0xD8, 0xC0, 0x8C)),
        Material(VOXEL_WATER, "Water", (0x46, 0x82, 0xB4), is_liquid=True),
        Material(VOXEL_PALM_TRUNK, "Palm Trunk", (0x8B, 0x45, 0x13)),
        Material(VOXEL_PALM_FROND, "Palm Frond", (0x22, 0x8B, 0x22)),
        Material(VOXEL_SAND_LIGHT, "Sand Light", (0xF8, 0xE8, 0xBC)),
        Material(VOXEL_SAND_DARK, "Sand Dark", (0xE0, 0xD0, 0x9C)),
        Material(VOXEL_ROCK, "Rock", (0x88, 0x88, 0x88)),
        Material(VOXEL_BEACH_GRASS, "Beach Grass", (0xA0, 0xA0, 0x70)),
        Material(VOXEL_FOREST_TRUNK, "Forest Trunk", (0x5D, 0x40, 0x37)),
        Material(VOXEL_FOREST_LEAVES, "Forest Leaves", (0x2E, 0x7D, 0x32)),
        Material(VOXEL_FOREST_FLOOR_DETAIL, "Forest Floor Detail", (0x4A, 0x3B, 0x31)),
        Material(VOXEL_PEBBLE, "Pebble", (0xA9, 0xA9, 0xA9)),
        Material(VOXEL_STONE, "Stone", (0x80, 0x80, 0x80)),
        Material(VOXEL_STONE_LIGHT, "Stone Light", (0x98, 0x98, 0x98)),
        Material(VOXEL_STONE_DARK, "Stone Dark", (0x68, 0x68, 0x68)),
        Material(VOXEL_FOREST_LEAVES_ALT, "Forest Leaves Alt", (0x55, 0x8B, 0x2F)),
    ):
        registry.register(material)
    return registry


# Default registry with every built-in material
DEFAULT_REGISTRY = _build_default_registry()


def get_default_registry() -> MaterialRegistry:
    """Get the default material registry."""
    return DEFAULT_REGISTRY
