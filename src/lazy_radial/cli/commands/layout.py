"""Layout command: run the initialization pipeline on a dataset file."""

import asyncio
from pathlib import Path

import typer
from loguru import logger

from ...core.exceptions import LazyRadialError
from ...core.progress import ConsoleProgressReporter
from ...pipeline.orchestrator import InitializationPipeline
from ..dataset import load_settings, read_dataset, write_json
from ..output import console, print_error, print_metrics, print_success


def layout(
    input_path: Path = typer.Argument(
        ...,
        help="Dataset JSON (nodes/edges, nested tree or trees)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the render-ready layout JSON here",
        rich_help_panel="📊 Output Options",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML settings file",
        exists=True,
        dir_okay=False,
        rich_help_panel="🔧 Global Options",
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for reproducible layouts",
        rich_help_panel="📐 Layout Options",
    ),
    width: float | None = typer.Option(
        None, "--width", help="Canvas width", min=1, rich_help_panel="📐 Layout Options"
    ),
    height: float | None = typer.Option(
        None, "--height", help="Canvas height", min=1, rich_help_panel="📐 Layout Options"
    ),
    batch_size: int | None = typer.Option(
        None,
        "--batch-size",
        help="Nodes per layout batch (default: max(100, total/10))",
        min=1,
        rich_help_panel="⚡ Performance Options",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show every stage message"
    ),
) -> None:
    """📐 Lay out a dataset and report per-stage timings.

    [bold cyan]Examples:[/bold cyan]

    [green]Lay out and save:[/green]
        $ lazy-radial layout data.json -o layout.json

    [green]Reproducible layout:[/green]
        $ lazy-radial layout data.json --seed 42
    """
    try:
        settings = load_settings(
            config, seed=seed, width=width, height=height, batch_size=batch_size
        )
        dataset = read_dataset(input_path)

        reporter = ConsoleProgressReporter(console, verbose=verbose)
        pipeline = InitializationPipeline(settings.layout, settings.pipeline)
        result = asyncio.run(pipeline.run(dataset, on_progress=reporter))
        reporter.complete(
            f"Laid out {len(result.nodes):,} nodes and {len(result.edges):,} edges",
            time_taken=result.performance_metrics.total_time / 1000,
        )

        print_metrics(result.performance_metrics)

        if output:
            write_json(output, result.to_dict())
            print_success(f"Layout written to {output}")

    except LazyRadialError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Layout failed: {e}")
        print_error(f"Layout failed: {e}")
        raise typer.Exit(1)
