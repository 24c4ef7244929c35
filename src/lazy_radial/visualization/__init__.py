"""Public API for layout and styling.

Exported symbols:

Layout:
    IncrementalLayoutEngine: Catalog-aware engine for the initial roots and
        for the children revealed by each expand.
    calculate_radial_layout: Eager layout of a whole graph in one call.
    calculate_child_layout: Lazy fan of one node's children around it.
    place_roots: Root ring placement.
    classify_edges: Straight/curved classification by hierarchy.

Styles:
    compute_node_style: Base, hierarchy and override styles merged.
    compute_edge_style: Edge style for straight or curved edges.
    LazyStyleService: Styles for lazily revealed nodes.

Example::

    from lazy_radial.visualization import calculate_radial_layout

    result = calculate_radial_layout(graph, LayoutOptions(seed=42))
"""

from lazy_radial.visualization.layout_engine import (
    IncrementalLayoutEngine,
    calculate_child_layout,
    calculate_radial_layout,
    classify_edges,
    place_roots,
)
from lazy_radial.visualization.styles import (
    LazyStyleService,
    build_hierarchy_table,
    compute_edge_style,
    compute_node_style,
)

__all__ = [
    # Layout
    "IncrementalLayoutEngine",
    "calculate_child_layout",
    "calculate_radial_layout",
    "classify_edges",
    "place_roots",
    # Styles
    "LazyStyleService",
    "build_hierarchy_table",
    "compute_edge_style",
    "compute_node_style",
]
