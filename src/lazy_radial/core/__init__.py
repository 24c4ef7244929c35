"""Core functionality for lazy-radial."""

from .catalog import DataCatalog
from .exceptions import (
    ConfigError,
    LayoutError,
    LazyRadialError,
    NotFoundError,
    PipelineError,
    ValidationError,
)
from .models import (
    CatalogNode,
    GraphData,
    LayoutEdge,
    LayoutNode,
    PipelineResult,
    ProgressMessage,
    VisibleNode,
)
from .tree_state import TreeStateManager

__all__ = [
    # Exceptions
    "ConfigError",
    "LayoutError",
    "LazyRadialError",
    "NotFoundError",
    "PipelineError",
    "ValidationError",
    # Models
    "CatalogNode",
    "GraphData",
    "LayoutEdge",
    "LayoutNode",
    "PipelineResult",
    "ProgressMessage",
    "VisibleNode",
    # Components
    "DataCatalog",
    "TreeStateManager",
]
