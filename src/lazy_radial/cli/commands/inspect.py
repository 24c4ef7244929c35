"""Inspect command: dataset statistics and subtree previews."""

from pathlib import Path

import typer
from loguru import logger
from rich.tree import Tree

from ...core.catalog import DataCatalog
from ...core.exceptions import LazyRadialError
from ..dataset import read_dataset
from ..output import console, print_catalog_stats, print_error


def _subtree_to_rich(subtree: dict, max_depth: int) -> Tree:
    label = subtree["data"].get("label") or subtree["id"]
    tree = Tree(f"[bold]{label}[/bold] [dim]({subtree['id']})[/dim]")
    stack = [(child, tree, 1) for child in reversed(subtree["children"])]
    while stack:
        node, branch, depth = stack.pop()
        node_label = node["data"].get("label") or node["id"]
        child_branch = branch.add(f"{node_label} [dim]({node['id']})[/dim]")
        if depth >= max_depth:
            if node["children"]:
                child_branch.add(f"[dim]… {len(node['children'])} more[/dim]")
            continue
        stack.extend((child, child_branch, depth + 1) for child in reversed(node["children"]))
    return tree


def inspect(
    input_path: Path = typer.Argument(
        ...,
        help="Dataset JSON (nodes/edges, nested tree or trees)",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    node: str | None = typer.Option(
        None, "--node", "-n", help="Show the subtree below this node"
    ),
    depth: int = typer.Option(2, "--depth", "-d", help="Subtree depth to show", min=1),
) -> None:
    """📊 Show catalog statistics for a dataset."""
    try:
        catalog = DataCatalog.from_dataset(read_dataset(input_path))
        print_catalog_stats(catalog.get_stats())

        if node:
            console.print()
            console.print(_subtree_to_rich(catalog.get_subtree(node), depth))

    except LazyRadialError as e:
        print_error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        logger.error(f"Inspect failed: {e}")
        print_error(f"Inspect failed: {e}")
        raise typer.Exit(1)
