"""lazy-radial command-line entry point."""

import sys

import typer
from loguru import logger

from .. import __version__
from .commands.explore import explore
from .commands.generate import generate
from .commands.inspect import inspect
from .commands.layout import layout
from .output import console

app = typer.Typer(
    name="lazy-radial",
    help="🌌 Incremental multi-root radial tree layout for very large graphs",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("layout")(layout)
app.command("inspect")(inspect)
app.command("explore")(explore)
app.command("generate")(generate)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"lazy-radial version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging", rich_help_panel="🔧 Global Options"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only log errors", rich_help_panel="🔧 Global Options"
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """🌌 lazy-radial: radial trees that load on demand."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
    elif quiet:
        logger.add(sys.stderr, level="ERROR")
    else:
        logger.add(sys.stderr, level="WARNING")


if __name__ == "__main__":
    app()
