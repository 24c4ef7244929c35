"""Dataset adaptation: format detection, tree flattening and validation.

Three input shapes are accepted:

- canonical graph: ``{"nodes": [{"id", "data"}], "edges": [{"source",
  "target", "data"}], "rootIds"?: [...]}``
- nested tree: ``{"id", "data", "children": [...]}``
- multi-tree: ``{"trees": [<nested tree>, ...], "rootIds"?: [...]}``
  (``treesData`` is accepted as an alias)

Whatever the shape, the result is a :class:`GraphData` whose nodes all carry
``hierarchy`` and ``groupId`` in their data when they are reachable from a
root. Input dicts are never mutated.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from loguru import logger

from .exceptions import ValidationError
from .models import GraphData


def is_graph_data(data: Any) -> bool:
    """Return True if ``data`` is already a canonical node/edge dataset."""
    return isinstance(data, dict) and "nodes" in data and "edges" in data


def is_multi_tree_data(data: Any) -> bool:
    """Return True if ``data`` holds several nested trees."""
    if not isinstance(data, dict):
        return False
    trees = data.get("trees", data.get("treesData"))
    return isinstance(trees, list) and len(trees) > 0


def is_tree_data(data: Any) -> bool:
    """Return True if ``data`` looks like a single nested tree."""
    return isinstance(data, dict) and isinstance(data.get("id"), str)


def flatten_tree(
    tree: dict[str, Any], group_id: int = 0
) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
    """Flatten a nested tree by pre-order traversal.

    Each visited node yields ``{"id", "data"}`` and, when it has a parent, a
    synthetic ``parent -> node`` edge. Depth and ``group_id`` are written into
    the node data unless the input already carries ``hierarchy``/``groupId``.

    An explicit stack is used instead of recursion so very deep trees do not
    hit the interpreter's recursion limit.

    Args:
        tree: Nested ``{"id", "data", "children"}`` structure
        group_id: Index of this tree's root in the final root id list

    Returns:
        Tuple of (nodes, edges)

    Raises:
        ValidationError: If a node has no string id or children is not a list
    """
    nodes: list[dict[str, Any]] = []
    edges: list[dict[str, Any]] = []

    # (node, parent_id, depth)
    stack: list[tuple[Any, str | None, int]] = [(tree, None, 0)]
    while stack:
        node, parent_id, depth = stack.pop()
        if not is_tree_data(node):
            raise ValidationError(
                "Tree node is missing a string 'id'",
                {"parent_id": parent_id, "depth": depth},
            )

        node_id = node["id"]
        data = dict(node.get("data") or {})
        data.setdefault("hierarchy", depth)
        data.setdefault("groupId", group_id)
        nodes.append({"id": node_id, "data": data})

        if parent_id is not None:
            edges.append({"source": parent_id, "target": node_id, "data": {}})

        children = node.get("children") or []
        if not isinstance(children, list):
            raise ValidationError(
                f"Children of node {node_id} must be a list",
                {"node_id": node_id},
            )
        # Reverse so the first child is popped (visited) first
        for child in reversed(children):
            stack.append((child, node_id, depth + 1))

    return nodes, edges


def convert_tree_to_graph(tree: dict[str, Any]) -> GraphData:
    """Convert a single nested tree into canonical graph data."""
    nodes, edges = flatten_tree(tree, group_id=0)
    return GraphData(nodes=nodes, edges=edges, root_ids=[tree["id"]])


def convert_trees_to_graph(
    trees: list[dict[str, Any]], root_ids: list[str] | None = None
) -> GraphData:
    """Convert several nested trees into one canonical graph.

    Tree ``i`` is assigned ``groupId = i`` so its nodes fan out from the
    ``i``-th root.
    """
    all_nodes: list[dict[str, Any]] = []
    all_edges: list[dict[str, Any]] = []
    for index, tree in enumerate(trees):
        nodes, edges = flatten_tree(tree, group_id=index)
        all_nodes.extend(nodes)
        all_edges.extend(edges)

    roots = list(root_ids) if root_ids else [tree["id"] for tree in trees]
    return GraphData(nodes=all_nodes, edges=all_edges, root_ids=roots)


def validate_graph_data(data: dict[str, Any]) -> None:
    """Validate a canonical dataset.

    Checks that ``nodes`` and ``edges`` are lists, every node has a non-empty
    string id, ids are unique, every edge names a source and target that
    exist, and any ``rootIds`` refer to known, parentless nodes. The edges
    must form a forest: no self-loops, no node with two parents and no
    cycles.

    Args:
        data: Canonical dataset dict

    Raises:
        ValidationError: On the first violation found
    """
    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list):
        raise ValidationError("Invalid graph data: 'nodes' must be a list")
    if not isinstance(edges, list):
        raise ValidationError("Invalid graph data: 'edges' must be a list")

    node_ids: set[str] = set()
    for index, node in enumerate(nodes):
        if not isinstance(node, dict) or not node.get("id"):
            raise ValidationError("Node is missing an 'id' field", {"index": index})
        node_id = node["id"]
        if not isinstance(node_id, str):
            raise ValidationError(
                f"Node id must be a string: {node_id!r}", {"index": index}
            )
        if node_id in node_ids:
            raise ValidationError(f"Duplicate node id: {node_id}", {"node_id": node_id})
        node_ids.add(node_id)

    parent_of: dict[str, str] = {}
    for index, edge in enumerate(edges):
        if not isinstance(edge, dict):
            raise ValidationError("Edge must be an object", {"index": index})
        source, target = edge.get("source"), edge.get("target")
        if source not in node_ids or target not in node_ids:
            raise ValidationError(
                f"Edge references unknown node: {source} -> {target}",
                {"index": index, "source": source, "target": target},
            )
        if source == target:
            raise ValidationError(
                f"Self-loop on node: {source}", {"index": index, "node_id": source}
            )
        if target in parent_of:
            raise ValidationError(
                f"Node {target} has more than one parent: "
                f"{parent_of[target]}, {source}",
                {"node_id": target, "parents": [parent_of[target], source]},
            )
        parent_of[target] = source

    root_ids = data.get("rootIds") or data.get("root_ids") or []
    unknown_roots = [root_id for root_id in root_ids if root_id not in node_ids]
    if unknown_roots:
        raise ValidationError(
            f"Unknown root ids: {unknown_roots[:5]}", {"root_ids": unknown_roots}
        )
    parented_roots = [root_id for root_id in root_ids if root_id in parent_of]
    if parented_roots:
        raise ValidationError(
            f"Root ids must not be edge targets: {parented_roots[:5]}",
            {"root_ids": parented_roots},
        )

    cyclic = find_cycle_nodes(parent_of)
    if cyclic:
        raise ValidationError(
            f"Cycle detected among nodes: {cyclic[:5]}", {"node_ids": cyclic}
        )

    logger.debug(f"Graph data validated: {len(nodes)} nodes, {len(edges)} edges")


def find_cycle_nodes(parent_of: dict[str, str]) -> list[str]:
    """Return ids of nodes whose parent chain loops back on itself.

    With at most one parent per node, a cycle is exactly a parent chain that
    revisits a node. Each chain is walked once; ``settled`` marks nodes known
    to reach a parentless ancestor.

    Args:
        parent_of: Child id to parent id

    Returns:
        Ids on a cycle, sorted (empty if the edges form a forest)
    """
    settled: set[str] = set()
    cyclic: set[str] = set()
    for start in parent_of:
        path: list[str] = []
        on_path: set[str] = set()
        node: str | None = start
        while node is not None and node not in settled and node not in cyclic:
            if node in on_path:
                cyclic.update(path[path.index(node) :])
                break
            path.append(node)
            on_path.add(node)
            node = parent_of.get(node)

        # Off-cycle nodes hanging below a cycle are settled too
        settled.update(n for n in path if n not in cyclic)

    return sorted(cyclic)


def infer_root_ids(nodes: list[dict[str, Any]], edges: list[dict[str, Any]]) -> list[str]:
    """Return ids of nodes that are never an edge target, in node order."""
    targets = {edge["target"] for edge in edges}
    return [node["id"] for node in nodes if node["id"] not in targets]


def annotate_hierarchy(graph: GraphData) -> GraphData:
    """Fill in missing ``hierarchy``/``groupId`` by BFS from each root.

    Values already present in node data are kept. Nodes unreachable from any
    root and lacking a ``groupId`` are left untouched; the layout stage
    rejects them.

    Args:
        graph: Canonical graph data

    Returns:
        New GraphData whose node dicts are copies
    """
    children: dict[str, list[str]] = {}
    for edge in graph.edges:
        children.setdefault(edge["source"], []).append(edge["target"])

    depth: dict[str, int] = {}
    group: dict[str, int] = {}
    for index, root_id in enumerate(graph.root_ids):
        if root_id in depth:
            continue
        depth[root_id] = 0
        group[root_id] = index
        queue = deque([root_id])
        while queue:
            current = queue.popleft()
            for child_id in children.get(current, []):
                if child_id in depth:
                    continue
                depth[child_id] = depth[current] + 1
                group[child_id] = index
                queue.append(child_id)

    annotated = []
    for node in graph.nodes:
        data = dict(node.get("data") or {})
        node_id = node["id"]
        if node_id in depth:
            data.setdefault("hierarchy", depth[node_id])
            data.setdefault("groupId", group[node_id])
        annotated.append({**node, "data": data})

    return GraphData(
        nodes=annotated,
        edges=[{**edge, "data": dict(edge.get("data") or {})} for edge in graph.edges],
        root_ids=list(graph.root_ids),
    )


def canonicalize(data: dict[str, Any]) -> GraphData:
    """Validate an already-canonical dataset and resolve its roots."""
    validate_graph_data(data)
    nodes = data["nodes"]
    edges = data["edges"]
    root_ids = list(data.get("rootIds") or data.get("root_ids") or [])
    if not root_ids:
        root_ids = infer_root_ids(nodes, edges)
        logger.debug(f"Inferred {len(root_ids)} root nodes from edges")

    return annotate_hierarchy(
        GraphData(
            nodes=nodes,
            edges=edges,
            root_ids=root_ids,
        )
    )


def adapt_tree_input(data: dict[str, Any]) -> GraphData:
    """Flatten nested-tree or multi-tree input and validate the result.

    Raises:
        ValidationError: If a tree node is malformed or ids repeat
    """
    if is_multi_tree_data(data):
        trees = data.get("trees", data.get("treesData"))
        graph = convert_trees_to_graph(trees, data.get("rootIds"))
    else:
        graph = convert_tree_to_graph(data)

    # Flattened trees still need the duplicate-id check
    validate_graph_data(
        {"nodes": graph.nodes, "edges": graph.edges, "rootIds": graph.root_ids}
    )
    return annotate_hierarchy(graph)


def adapt_dataset(data: Any) -> GraphData:
    """Turn any supported input shape into validated canonical graph data.

    Args:
        data: Canonical graph, nested tree or multi-tree dict

    Returns:
        Validated, hierarchy-annotated GraphData

    Raises:
        ValidationError: If the shape is unrecognized or the data is malformed
    """
    if is_graph_data(data):
        return canonicalize(data)

    if is_multi_tree_data(data) or is_tree_data(data):
        return adapt_tree_input(data)

    raise ValidationError(
        "Unrecognized dataset format: expected nodes/edges, a nested tree or trees",
        {"type": type(data).__name__},
    )
