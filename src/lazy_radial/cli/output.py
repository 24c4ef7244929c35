"""Console output helpers shared by the CLI commands."""

from rich.console import Console
from rich.table import Table

from ..core.models import CatalogStats, PerformanceMetrics, TreeStats

console = Console()


def print_error(message: str) -> None:
    console.print(f"[red]✗ {message}[/red]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠ {message}[/yellow]")


def print_success(message: str) -> None:
    console.print(f"[green]✓ {message}[/green]")


def print_info(message: str) -> None:
    console.print(f"[blue]ℹ {message}[/blue]")


def print_metrics(metrics: PerformanceMetrics) -> None:
    """Print pipeline timings as a table."""
    table = Table(title="Initialization Metrics", show_header=True)
    table.add_column("Stage", style="cyan")
    table.add_column("Time", justify="right", style="green")

    table.add_row("Data adapt", f"{metrics.data_adapt_time} ms")
    table.add_row("Layout calc", f"{metrics.layout_calc_time} ms")
    table.add_row("Style gen", f"{metrics.style_gen_time} ms")
    table.add_row("[bold]Total[/bold]", f"[bold]{metrics.total_time} ms[/bold]")
    table.add_row("Throughput", f"{metrics.nodes_per_second:,} nodes/s")

    console.print(table)


def print_catalog_stats(stats: CatalogStats) -> None:
    table = Table(title="Dataset Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Nodes", f"{stats.total_nodes:,}")
    table.add_row("Edges", f"{stats.total_edges:,}")
    table.add_row("Roots", f"{stats.root_nodes:,}")
    table.add_row("Max hierarchy", str(stats.max_hierarchy))
    table.add_row("Avg children per parent", f"{stats.avg_children_per_parent:.2f}")

    console.print(table)


def print_tree_stats(stats: TreeStats) -> None:
    table = Table(title="Visible Tree", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Visible nodes", f"{stats.total_nodes:,}")
    table.add_row("Roots", f"{stats.root_nodes:,}")
    table.add_row("Expanded nodes", f"{stats.loaded_nodes:,}")
    table.add_row("Max level", str(stats.max_level))

    console.print(table)
