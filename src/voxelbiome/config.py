"""Configuration classes for VoxelBiome generation."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Dict, Any
import json

from .voxel.constants import CHUNK_SIZE, CHUNK_HEIGHT
from .voxel.grid import GridSize
from .terrain.registry import BiomeRegistry, create_default_registry
from .terrain.settings import load_settings


@dataclass
class GenerationConfig:
    """Configuration for a single chunk generation."""
    # Biome id
    biome: str

    # User seed (empty for a random one)
    seed: str = ""

    # Grid dimensions
    size_x: int = CHUNK_SIZE
    size_y: int = CHUNK_HEIGHT
    size_z: int = CHUNK_SIZE

    # JSON file with overrides for the biome's settings
    settings_path: Optional[Path] = None

    def validate(self) -> None:
        """Validate the configuration."""
        if not self.biome:
            raise ValueError("Biome id must not be empty")
        for axis, value in (("size_x", self.size_x), ("size_y", self.size_y), ("size_z", self.size_z)):
            if value <= 0:
                raise ValueError(f"{axis} must be positive: {value}")

    @property
    def size(self) -> GridSize:
        return GridSize(self.size_x, self.size_y, self.size_z)

    def build_registry(self) -> BiomeRegistry:
        """Create a biome registry with this config's settings overrides applied."""
        registry = create_default_registry()
        if self.settings_path is not None:
            biome = registry.get(self.biome)
            registry.register(replace(biome, settings=load_settings(self.settings_path, biome.settings)))
        return registry

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "biome": self.biome,
            "seed": self.seed,
            "size_x": self.size_x,
            "size_y": self.size_y,
            "size_z": self.size_z,
            "settings_path": str(self.settings_path) if self.settings_path else None,
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path) -> "GenerationConfig":
        """Load configuration from JSON file."""
        with open(filepath) as f:
            data = json.load(f)
        if not isinstance(data, dict) or "biome" not in data:
            raise ValueError(f"Config file must be a JSON object with a biome: {filepath}")

        return cls(
            biome=data["biome"],
            seed=data.get("seed", ""),
            size_x=data.get("size_x", CHUNK_SIZE),
            size_y=data.get("size_y", CHUNK_HEIGHT),
            size_z=data.get("size_z", CHUNK_SIZE),
            settings_path=Path(data["settings_path"]) if data.get("settings_path") else None,
        )
