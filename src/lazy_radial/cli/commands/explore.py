"""Explore command: replay expand/collapse gestures on an in-memory chart."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

from ...config.settings import ChartSettings
from ...core.context import ChartContext
from ...core.exceptions import LazyRadialError
from ...core.surface import InMemoryRenderSurface
from ..dataset import load_settings, read_dataset
from ..output import console, print_error, print_info, print_tree_stats, print_warning


async def _explore(
    dataset: object,
    settings: ChartSettings,
    expand: list[str],
    collapse: list[str],
) -> None:
    surface = InMemoryRenderSurface()
    async with ChartContext(settings, surface) as chart:
        await chart.initialize(dataset)

        for node_id in expand:
            if await chart.expand(node_id):
                print_info(f"Expanded {node_id}")
            else:
                print_warning(f"Nothing to expand at {node_id}")

        for node_id in collapse:
            removed = await chart.collapse(node_id)
            if removed:
                print_info(f"Collapsed {node_id} ({len(removed)} nodes removed)")
            else:
                print_warning(f"Nothing to collapse at {node_id}")

        console.print()
        console.print(chart.tree_state.render_tree())
        print_tree_stats(chart.stats())
        console.print(
            f"[dim]Surface: {len(surface.nodes)} nodes, {len(surface.edges)} edges, "
            f"{surface.render_count} renders[/dim]"
        )


def explore(
    input_path: Path = typer.Argument(
        ...,
        help="Dataset JSON (nodes/edges, nested tree or trees)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    expand: list[str] = typer.Option(
        [], "--expand", "-e", help="Node to expand (repeatable, applied in order)"
    ),
    collapse: list[str] = typer.Option(
        [], "--collapse", "-x", help="Node to collapse (repeatable, after expands)"
    ),
    depth: int | None = typer.Option(
        None, "--depth", "-d", help="Levels to expand below the roots on load", min=0
    ),
    eager: bool = typer.Option(
        False, "--eager", help="Draw the whole dataset instead of loading lazily"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="YAML settings file", exists=True, dir_okay=False
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible layouts"),
) -> None:
    """🌳 Build a chart, apply gestures and print the visible tree.

    [bold cyan]Examples:[/bold cyan]

    [green]Expand two levels on load:[/green]
        $ lazy-radial explore data.json --depth 2

    [green]Expand then collapse:[/green]
        $ lazy-radial explore data.json -e tree0-root -e tree0-branch0 -x tree0-root
    """
    try:
        settings = load_settings(
            config, seed=seed, initial_depth=depth, lazy=False if eager else None
        )
        asyncio.run(_explore(read_dataset(input_path), settings, expand, collapse))

    except LazyRadialError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Explore failed: {e}")
        print_error(f"Explore failed: {e}")
        raise typer.Exit(1)
