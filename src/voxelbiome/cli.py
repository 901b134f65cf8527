"""Command-line interface for VoxelBiome."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import GenerationConfig
from .terrain.registry import BiomeNotFoundError, derive_scoped_seed, get_default_registry
from .voxel.materials import get_default_registry as get_material_registry

app = typer.Typer(
    name="voxelbiome",
    help="Generate procedural voxel terrain chunks for named biomes.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"VoxelBiome version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
):
    """VoxelBiome: seeded voxel terrain generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_config(
    biome: str,
    seed: str,
    size: int,
    height: Optional[int],
    config_file: Optional[Path],
    settings: Optional[Path],
) -> GenerationConfig:
    if config_file is not None:
        config = GenerationConfig.load(config_file)
    else:
        config = GenerationConfig(
            biome=biome,
            seed=seed,
            size_x=size,
            size_y=height if height is not None else size,
            size_z=size,
        )
    if settings is not None:
        config.settings_path = settings
    config.validate()
    return config


def _run(config: GenerationConfig):
    registry = config.build_registry()
    biome = registry.get(config.biome)
    scoped_seed = derive_scoped_seed(config.biome, config.seed)
    grid = biome.generate(scoped_seed, config.size).freeze()
    return biome, scoped_seed, grid


@app.command()
def generate(
    biome: str = typer.Argument("beach", help="Biome id"),
    seed: str = typer.Option("", "--seed", "-s", help="Seed string (random if empty)"),
    size: int = typer.Option(64, "--size", help="Horizontal grid size"),
    height: Optional[int] = typer.Option(None, "--height", help="Grid height (defaults to --size)"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Generation config JSON"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Biome settings overrides JSON"),
):
    """Generate a chunk and print its material counts.

    Example:
        voxelbiome generate forest --seed "hello world"
    """
    try:
        config = _build_config(biome, seed, size, height, config_file, settings)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"Generating {config.biome} chunk...", total=None)
            selected, scoped_seed, grid = _run(config)
    except (BiomeNotFoundError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold]Generated {selected.display_name} chunk[/bold]")
    console.print(f"  Seed: {scoped_seed}")
    console.print(f"  Size: {grid.size.x} x {grid.size.y} x {grid.size.z}")
    console.print(f"  Environment: {selected.environment_asset or '-'}")
    console.print()

    materials = get_material_registry()
    table = Table(title="Voxels by Material")
    table.add_column("Code", justify="right")
    table.add_column("Material", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    for code, count in sorted(grid.counts().items()):
        table.add_row(str(code), materials.get_name(code), str(count), f"{100.0 * count / len(grid):.2f}%")
    console.print(table)


@app.command("list-biomes")
def list_biomes_cmd():
    """List available biomes."""
    table = Table(title="Available Biomes")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Environment")

    for biome in get_default_registry().available():
        table.add_row(biome.id, biome.display_name, biome.environment_asset or "-")

    console.print(table)


@app.command()
def preview(
    biome: str = typer.Argument(..., help="Biome id"),
    output: Path = typer.Argument(..., help="Output image path (e.g. chunk.png)"),
    seed: str = typer.Option("", "--seed", "-s", help="Seed string (random if empty)"),
    size: int = typer.Option(64, "--size", help="Horizontal grid size"),
    scale: int = typer.Option(4, "--scale", help="Pixels per column"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Biome settings overrides JSON"),
):
    """Write a top-down colour image of a generated chunk.

    Example:
        voxelbiome preview beach beach.png --seed "hello world"
    """
    from .terrain.preview import save_preview

    try:
        config = _build_config(biome, seed, size, None, None, settings)
        selected, scoped_seed, grid = _run(config)
        path = save_preview(grid, output, scale)
    except (BiomeNotFoundError, ValueError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Success![/green] {selected.display_name} preview ({scoped_seed}) saved to: {path}")


if __name__ == "__main__":
    app()
