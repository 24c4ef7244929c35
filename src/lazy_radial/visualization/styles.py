"""Presentation attributes for nodes and edges.

Every function here is pure: the same (node, hierarchy) always yields the same
style, so styling can be re-run or moved to a worker freely.
"""

from __future__ import annotations

from typing import Any

from ..config.defaults import (
    DEFAULT_EDGE_STYLE,
    DEFAULT_NODE_STYLE,
    EDGE_TYPE_CURVED,
    EDGE_TYPE_LINE,
    HIERARCHY_STYLES,
    LAZY_BASE_HUE,
    LAZY_BASE_NODE_SIZE,
    LAZY_COLLAPSED_FILL,
    LAZY_HUE_STEP,
    LAZY_MIN_NODE_SIZE,
    LAZY_SIZE_STEP,
    STYLE_TABLE_DEPTH,
)
from ..core.models import LayoutEdge, LayoutNode


def hierarchy_style(hierarchy: int) -> dict[str, Any]:
    """Return size, fill and opacity for a hierarchy level.

    Levels 0-3 use the fixed palette. Deeper levels keep shrinking and fading
    from the level-3 entry while the hue keeps rotating.
    """
    if hierarchy in HIERARCHY_STYLES:
        return dict(HIERARCHY_STYLES[hierarchy])

    last_level = max(HIERARCHY_STYLES)
    base = HIERARCHY_STYLES[last_level]
    extra = max(0, hierarchy - last_level)
    return {
        "size": max(int(base["size"]) - 2 * extra, 10),
        "fill": f"hsl({(LAZY_BASE_HUE + hierarchy * LAZY_HUE_STEP) % 360}, 70%, 60%)",
        "opacity": max(round(float(base["opacity"]) - 0.05 * extra, 2), 0.4),
    }


def build_hierarchy_table(depth: int = STYLE_TABLE_DEPTH) -> dict[int, dict[str, Any]]:
    """Pre-generate hierarchy styles for levels 0..depth."""
    return {level: hierarchy_style(level) for level in range(depth + 1)}


def base_node_style(node: LayoutNode) -> dict[str, Any]:
    data = node.data
    style = dict(DEFAULT_NODE_STYLE)
    if data.get("color"):
        style["fill"] = data["color"]
        style["stroke"] = data["color"]
    style["labelText"] = str(data.get("label") or node.id)
    return style


def compute_node_style(
    node: LayoutNode,
    hierarchy: int,
    table: dict[int, dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Merge base style, hierarchy style and the node's own override.

    The override in ``node.data["style"]`` always wins.

    Args:
        node: Positioned node
        hierarchy: Hierarchy level used for the lookup
        table: Optional pre-generated hierarchy table

    Returns:
        New style dict
    """
    level_style = table.get(hierarchy) if table else None
    if level_style is None:
        level_style = hierarchy_style(hierarchy)

    override = node.data.get("style") or {}
    return {**base_node_style(node), **level_style, **override}


def compute_edge_style(edge: LayoutEdge, direct_line: bool) -> dict[str, Any]:
    """Straight root edges are drawn slightly heavier than curved ones."""
    line_style = {"lineWidth": 1.5, "opacity": 0.8} if direct_line else {"opacity": 0.6}
    override = edge.data.get("style") or {}
    return {
        **DEFAULT_EDGE_STYLE,
        **line_style,
        "type": EDGE_TYPE_LINE if direct_line else EDGE_TYPE_CURVED,
        **override,
    }


def style_nodes(
    nodes: list[LayoutNode], table: dict[int, dict[str, Any]] | None = None
) -> list[LayoutNode]:
    return [
        LayoutNode(
            id=node.id,
            data=node.data,
            x=node.x,
            y=node.y,
            style=compute_node_style(node, node.hierarchy, table),
        )
        for node in nodes
    ]


def style_edges(edges: list[LayoutEdge]) -> list[LayoutEdge]:
    return [
        LayoutEdge(
            source=edge.source,
            target=edge.target,
            data=edge.data,
            is_direct_line=edge.is_direct_line,
            style=compute_edge_style(edge, edge.is_direct_line),
        )
        for edge in edges
    ]


class LazyStyleService:
    """Styles for nodes revealed by expand.

    Collapsed nodes that still have children are painted in a single accent
    colour so the user can see what is expandable; everything else takes a
    depth-rotated hue and shrinks with depth.
    """

    def node_style(self, node: LayoutNode) -> dict[str, Any]:
        hierarchy = node.hierarchy
        collapsed = node.data.get("collapsed", False)
        has_children = node.data.get("hasChildren", False)

        if has_children and collapsed:
            fill = LAZY_COLLAPSED_FILL
        else:
            fill = f"hsl({LAZY_BASE_HUE + hierarchy * LAZY_HUE_STEP}, 70%, 60%)"

        return {
            **node.style,
            "size": max(LAZY_BASE_NODE_SIZE - hierarchy * LAZY_SIZE_STEP, LAZY_MIN_NODE_SIZE),
            "fill": fill,
            "stroke": "#fff",
            "lineWidth": 2,
            "opacity": 1,
            "labelText": str(node.data.get("label") or node.id),
            "labelFontSize": max(12 - hierarchy, 10),
            "labelFill": "#333",
            "labelPosition": "bottom",
            "labelOffsetY": 8,
            **(node.data.get("style") or {}),
        }

    def apply_node_styles(self, nodes: list[LayoutNode]) -> list[LayoutNode]:
        return [
            LayoutNode(id=n.id, data=n.data, x=n.x, y=n.y, style=self.node_style(n))
            for n in nodes
        ]

    def apply_edge_styles(self, edges: list[LayoutEdge]) -> list[LayoutEdge]:
        return style_edges(edges)
