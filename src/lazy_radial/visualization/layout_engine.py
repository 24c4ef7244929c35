"""Layout calculation for multi-root radial trees.

This module implements the placement algorithms used on first load and on
every expand:
    - Root Ring: roots spread around a circle with bounded random arc steps
    - Eager Fan: every non-root node fanned outward from its group's root
    - Lazy Fan: the children of one expanded node, evenly around the parent

Design Principles:
    - Pure: functions take immutable input and return new layout nodes
    - Deterministic: every random draw comes from a seedable generator;
      per-node draws are keyed by (seed, node id), so batches can run in any
      order, inline or in a worker pool, with identical output
    - Performance: O(n), no pairwise collision checks
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterable
from typing import Any

from loguru import logger

from ..config.defaults import DEFAULT_NODE_HIERARCHY, ROOT_NODE_SIZE
from ..config.settings import LayoutOptions
from ..core.catalog import DataCatalog
from ..core.exceptions import LayoutError
from ..core.models import GraphData, LayoutEdge, LayoutNode, LayoutResult, RootPosition


def resolve_seed(options: LayoutOptions) -> int:
    """Return the configured seed, or draw a fresh one for this run."""
    if options.seed is not None:
        return options.seed
    return random.getrandbits(64)


def node_rng(seed: int, node_id: str) -> random.Random:
    """Generator dedicated to one node so its draws do not depend on order."""
    return random.Random(f"{seed}:{node_id}")


def is_direct_line(source_hierarchy: int, target_hierarchy: int) -> bool:
    """Only root -> first-level edges are drawn straight."""
    return source_hierarchy == 0 and target_hierarchy == 1


def place_roots(
    root_ids: list[str], options: LayoutOptions, rng: random.Random
) -> dict[str, RootPosition]:
    """Calculate root positions around the canvas centre.

    Design Decision: random arc steps instead of repulsion

    Rationale: Starting from a random angle, each following root advances by
    ``arc_length / base_radius`` where ``arc_length`` is uniform between the
    configured bounds. Consecutive roots are therefore always at least
    ``min_arc_length`` apart along the ring, without pairwise checks.

    Trade-offs:
        - Speed: O(n) vs. O(n²) per iteration for force-based repulsion
        - Wrap-around: with many roots the ring may wrap past 2π; consecutive
          roots keep their spacing, distant ones may meet

    Args:
        root_ids: Root ids in placement order
        options: Layout options
        rng: Random generator for the start angle and arc steps

    Returns:
        Dictionary mapping root_id -> RootPosition

    Example:
        >>> options = LayoutOptions(seed=1)
        >>> positions = place_roots(["a", "b", "c"], options, random.Random(1))
        >>> len(positions)
        3
    """
    if not root_ids:
        logger.debug("No roots to place")
        return {}

    center_x = options.width / 2
    center_y = options.height / 2
    base_radius = ROOT_NODE_SIZE * options.base_radius_multiplier
    min_arc_length = ROOT_NODE_SIZE * options.min_arc_length_multiplier
    max_arc_length = ROOT_NODE_SIZE * options.max_arc_length_multiplier

    positions: dict[str, RootPosition] = {}
    current_angle = rng.random() * math.pi * 2

    for root_id in root_ids:
        positions[root_id] = RootPosition(
            x=center_x + base_radius * math.cos(current_angle),
            y=center_y + base_radius * math.sin(current_angle),
            angle=current_angle,
        )
        arc_length = rng.uniform(min_arc_length, max_arc_length)
        current_angle += arc_length / base_radius

    logger.debug(
        f"Root ring: {len(positions)} roots, radius={base_radius:.1f}, "
        f"arc=[{min_arc_length:.0f}, {max_arc_length:.0f}]"
    )
    return positions


def _resolve_root(
    node_id: str,
    group_id: Any,
    root_ids: list[str],
    root_positions: dict[str, RootPosition],
) -> RootPosition:
    valid_index = (
        isinstance(group_id, int)
        and not isinstance(group_id, bool)
        and 0 <= group_id < len(root_ids)
    )
    if valid_index:
        position = root_positions.get(root_ids[group_id])
        if position is not None:
            return position

    raise LayoutError(
        f"Cannot place node {node_id}: group {group_id!r} does not resolve to a root",
        {"node_id": node_id, "group_id": group_id, "root_count": len(root_ids)},
    )


def place_node(
    node_id: str,
    data: dict[str, Any],
    root_ids: list[str],
    root_positions: dict[str, RootPosition],
    options: LayoutOptions,
    seed: int,
) -> tuple[float, float]:
    """Calculate the eager position of one non-root node.

    ``distance = base_distance + hierarchy * hierarchy_step + jitter`` with
    jitter in ±random_offset/2, at the group root's angle ± angle_spread/2,
    measured from the group root.

    Raises:
        LayoutError: If ``data["groupId"]`` does not resolve to a root
    """
    root = _resolve_root(node_id, data.get("groupId"), root_ids, root_positions)
    hierarchy = data.get("hierarchy")
    if hierarchy is None:
        hierarchy = DEFAULT_NODE_HIERARCHY

    rng = node_rng(seed, node_id)
    distance = (
        options.base_distance
        + hierarchy * options.hierarchy_step
        + (rng.random() - 0.5) * options.random_offset
    )
    angle = root.angle + (rng.random() - 0.5) * options.angle_spread

    return root.x + distance * math.cos(angle), root.y + distance * math.sin(angle)


def layout_node_batch(
    nodes: Iterable[dict[str, Any]],
    root_ids: list[str],
    root_positions: dict[str, RootPosition],
    options: LayoutOptions,
    seed: int,
) -> list[LayoutNode]:
    """Position a batch of nodes; roots keep their ring position.

    Pure and order-independent, so batches may be dispatched to an executor.

    Raises:
        LayoutError: On the first node whose group cannot be resolved
    """
    placed = []
    for node in nodes:
        node_id = node["id"]
        data = dict(node.get("data") or {})
        root = root_positions.get(node_id)
        if root is not None:
            x, y = root.x, root.y
        else:
            x, y = place_node(node_id, data, root_ids, root_positions, options, seed)
        placed.append(LayoutNode(id=node_id, data=data, x=x, y=y))
    return placed


def classify_edges(
    edges: Iterable[dict[str, Any]], hierarchy_of: dict[str, int]
) -> list[LayoutEdge]:
    """Flag root -> first-level edges for straight rendering."""
    classified = []
    for edge in edges:
        source_h = hierarchy_of.get(edge["source"], 0)
        target_h = hierarchy_of.get(edge["target"], source_h + 1)
        classified.append(
            LayoutEdge(
                source=edge["source"],
                target=edge["target"],
                data={
                    **(edge.get("data") or {}),
                    "sourceHierarchy": source_h,
                    "targetHierarchy": target_h,
                },
                is_direct_line=is_direct_line(source_h, target_h),
            )
        )
    return classified


def hierarchy_index(graph: GraphData) -> dict[str, int]:
    """Map node id -> hierarchy for edge classification."""
    root_set = set(graph.root_ids)
    index = {}
    for node in graph.nodes:
        hierarchy = (node.get("data") or {}).get("hierarchy")
        if hierarchy is None:
            hierarchy = 0 if node["id"] in root_set else DEFAULT_NODE_HIERARCHY
        index[node["id"]] = int(hierarchy)
    return index


def calculate_radial_layout(graph: GraphData, options: LayoutOptions) -> LayoutResult:
    """Eager full layout in one call (no batching, no progress).

    Roots are placed first, then every other node. The whole computation is
    aborted on the first unresolvable node; no partial result is returned.

    Args:
        graph: Canonical, hierarchy-annotated graph data
        options: Layout options

    Returns:
        LayoutResult with every node positioned and every edge classified

    Raises:
        LayoutError: If a non-root node's group does not resolve to a root
    """
    if not graph.root_ids:
        logger.warning("No root ids provided, non-root nodes cannot be placed")

    seed = resolve_seed(options)
    root_positions = place_roots(graph.root_ids, options, random.Random(seed))
    nodes = layout_node_batch(graph.nodes, graph.root_ids, root_positions, options, seed)
    edges = classify_edges(graph.edges, hierarchy_index(graph))

    return LayoutResult(
        nodes=nodes, edges=edges, root_ids=list(graph.root_ids), root_positions=root_positions
    )


def calculate_child_layout(
    parent_position: tuple[float, float],
    parent_level: int,
    parent_group_id: int | None,
    children: list[LayoutNode],
    edges: list[LayoutEdge],
    options: LayoutOptions,
) -> tuple[list[LayoutNode], list[LayoutEdge]]:
    """Calculate positions for the newly revealed children of one node.

    Children sit on a full circle around the parent: child ``i`` of ``n`` at
    angle ``i * 2π / n`` and radius ``hierarchy_step * (parent_level + 1)``.

    Design Decision: no randomness, no cross-subtree collision avoidance

    Rationale: expanding one subtree must never move nodes already rendered
    elsewhere. Using only the parent's position keeps every expand local.

    Trade-offs:
        - Stability: siblings elsewhere never move vs. possible overlap with
          independently expanded subtrees
        - Radius: differs from the eager formula at equal depth (kept as is)

    Args:
        parent_position: (x, y) of the expanded node
        parent_level: Hierarchy of the expanded node
        parent_group_id: Group inherited by the children
        children: Unplaced child nodes (from the catalog)
        edges: Parent -> child edges
        options: Layout options

    Returns:
        Tuple of (positioned children, classified edges)

    Example:
        >>> kids = [LayoutNode(id=f"c{i}", data={}) for i in range(4)]
        >>> nodes, _ = calculate_child_layout((0, 0), 2, 0, kids, [], LayoutOptions())
        >>> round(nodes[1].y)  # angle π/2, radius 100 * 3
        300
    """
    if not children:
        logger.debug("No children to layout")
        return [], []

    parent_x, parent_y = parent_position
    radius = options.hierarchy_step * (parent_level + 1)
    angle_step = (math.pi * 2) / len(children)
    child_level = parent_level + 1

    positioned = []
    for index, child in enumerate(children):
        angle = angle_step * index
        positioned.append(
            LayoutNode(
                id=child.id,
                data={
                    **child.data,
                    "hierarchy": child_level,
                    "groupId": parent_group_id,
                    "collapsed": True,
                    "hasChildren": bool(child.data.get("hasChildren")),
                    "childrenIds": list(child.data.get("childrenIds") or []),
                },
                x=parent_x + radius * math.cos(angle),
                y=parent_y + radius * math.sin(angle),
                style=dict(child.style),
            )
        )

    classified = [
        LayoutEdge(
            source=edge.source,
            target=edge.target,
            data={
                **edge.data,
                "sourceHierarchy": parent_level,
                "targetHierarchy": child_level,
            },
            is_direct_line=is_direct_line(parent_level, child_level),
        )
        for edge in edges
    ]

    logger.debug(f"Child fan: {len(positioned)} children, radius={radius:.1f}")
    return positioned, classified


class IncrementalLayoutEngine:
    """Catalog-aware wrapper over the eager and lazy placement functions."""

    def __init__(self, catalog: DataCatalog, options: LayoutOptions | None = None):
        self.catalog = catalog
        self.options = options or LayoutOptions()

    def layout_initial_roots(
        self, root_positions: dict[str, RootPosition] | None = None
    ) -> LayoutResult:
        """Position the roots only (the initial lazy view).

        Args:
            root_positions: Positions already computed by the pipeline. Roots
                are placed exactly once, so these are reused when given.
        """
        root_ids = self.catalog.root_ids
        if root_positions is None:
            seed = resolve_seed(self.options)
            root_positions = place_roots(root_ids, self.options, random.Random(seed))

        nodes = []
        for node in self.catalog.get_initial_data():
            position = root_positions[node.id]
            nodes.append(LayoutNode(id=node.id, data=node.data, x=position.x, y=position.y))

        logger.info(f"Initial layout: {len(nodes)} roots")
        return LayoutResult(
            nodes=nodes, edges=[], root_ids=root_ids, root_positions=root_positions
        )

    def layout_children(
        self, parent_id: str, parent_node: dict[str, Any]
    ) -> tuple[list[LayoutNode], list[LayoutEdge]]:
        """Lazy layout for the children of ``parent_id``.

        Args:
            parent_id: Node being expanded
            parent_node: The parent's current render data (``x``/``y`` at the
                top level or under ``style``, hierarchy under ``data``)

        Raises:
            NotFoundError: If ``parent_id`` is not in the catalog
        """
        children = self.catalog.get_children(parent_id)
        if not children:
            logger.debug(f"Node {parent_id} has no children")
            return [], []

        style = parent_node.get("style") or {}
        parent_x = parent_node.get("x", style.get("x", 0.0))
        parent_y = parent_node.get("y", style.get("y", 0.0))
        data = parent_node.get("data") or {}
        catalog_node = self.catalog.get_node(parent_id)
        parent_level = data.get("hierarchy", catalog_node.hierarchy)
        group_id = data.get("groupId", catalog_node.group_id)

        return calculate_child_layout(
            (float(parent_x), float(parent_y)),
            int(parent_level),
            group_id,
            children,
            self.catalog.get_child_edges(parent_id),
            self.options,
        )
