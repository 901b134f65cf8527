#!/usr/bin/env python3
"""
VoxelBiome - Generate a seeded voxel terrain chunk.

Usage:
    python3 main.py list-biomes                      # Show available biomes
    python3 main.py generate beach --seed "hello"    # Generate and summarize a chunk
    python3 main.py preview forest forest.png        # Save a top-down image
    python3 main.py --help                           # Show help
"""

import sys
from pathlib import Path

# Add src to path so we can run without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))


def main():
    """Main entry point."""
    from voxelbiome.cli import app

    app()


if __name__ == "__main__":
    main()
