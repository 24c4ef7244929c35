"""lazy-radial - incremental multi-root radial tree layout for very large graphs."""

__version__ = "0.3.1"

from .core.exceptions import LazyRadialError

__all__ = ["LazyRadialError", "__version__"]
