"""Generate command: write a synthetic multi-root dataset."""

from pathlib import Path

import typer
from loguru import logger

from ...core.generator import generate_multi_tree_dataset
from ..dataset import write_json
from ..output import print_error, print_success


def generate(
    output: Path = typer.Argument(..., help="Where to write the dataset JSON"),
    trees: int = typer.Option(20, "--trees", "-t", help="Number of root trees", min=1),
    branches: int = typer.Option(
        2, "--branches", "-b", help="First-level nodes per tree", min=0
    ),
    min_children: int = typer.Option(
        3, "--min-children", help="Minimum children per branch", min=0
    ),
    max_children: int = typer.Option(
        5, "--max-children", help="Maximum children per branch", min=0
    ),
    seed: int | None = typer.Option(None, "--seed", help="Seed for reproducible output"),
) -> None:
    """🎲 Generate a synthetic forest for demos and benchmarks."""
    try:
        dataset = generate_multi_tree_dataset(
            trees=trees,
            branches=branches,
            min_children=min_children,
            max_children=max_children,
            seed=seed,
        )
        write_json(output, dataset)
        print_success(
            f"Wrote {len(dataset['nodes']):,} nodes in {trees} trees to {output}"
        )
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Generate failed: {e}")
        print_error(f"Generate failed: {e}")
        raise typer.Exit(1)
