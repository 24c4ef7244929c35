"""Read-only, id-indexed catalog of the full dataset.

The catalog is built once and never mutated afterwards, so it can be shared by
reference between the layout engine, the controller and any number of
queries. It is the source from which any visible subset is drawn.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from loguru import logger

from ..config.defaults import DEFAULT_NODE_HIERARCHY
from .adapter import adapt_dataset
from .exceptions import NotFoundError
from .models import CatalogNode, CatalogStats, GraphData, LayoutEdge, LayoutNode


class DataCatalog:
    """Flat index of every node plus the parent -> children map.

    Example:
        catalog = DataCatalog.from_dataset({"id": "root", "children": [...]})
        for child in catalog.get_children("root"):
            print(child.id, child.data["hasChildren"])
    """

    def __init__(self, graph: GraphData):
        """Build the index.

        Args:
            graph: Validated canonical graph data (see ``adapt_dataset``)
        """
        children_map: dict[str, list[str]] = {}
        for edge in graph.edges:
            children_map.setdefault(edge["source"], []).append(edge["target"])

        root_set = set(graph.root_ids)
        nodes: dict[str, CatalogNode] = {}
        for raw in graph.nodes:
            node_id = raw["id"]
            data = dict(raw.get("data") or {})
            hierarchy = data.get("hierarchy")
            if hierarchy is None:
                hierarchy = 0 if node_id in root_set else DEFAULT_NODE_HIERARCHY
            nodes[node_id] = CatalogNode(
                id=node_id,
                hierarchy=int(hierarchy),
                group_id=data.get("groupId"),
                children_ids=tuple(children_map.get(node_id, ())),
                data=data,
            )

        self._nodes = nodes
        self._children = {k: tuple(v) for k, v in children_map.items()}
        self._root_ids = tuple(graph.root_ids)
        self._edge_count = len(graph.edges)

        logger.info(
            f"Data catalog built: {len(self._nodes)} nodes, "
            f"{len(self._root_ids)} roots, {self._edge_count} edges"
        )

    @classmethod
    def from_dataset(cls, data: Any) -> DataCatalog:
        """Build a catalog from any supported raw input shape."""
        return cls(adapt_dataset(data))

    # ── lookups ─────────────────────────────────────────────────────────

    @property
    def root_ids(self) -> list[str]:
        return list(self._root_ids)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> CatalogNode:
        """Return the catalog entry for ``node_id``.

        Raises:
            NotFoundError: If the id is not in the dataset
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NotFoundError(
                f"Node not in catalog: {node_id}", {"node_id": node_id}
            ) from None

    def is_root(self, node_id: str) -> bool:
        return node_id in self._root_ids

    def _child_ids(self, node_id: str) -> tuple[str, ...]:
        self.get_node(node_id)
        return self._children.get(node_id, ())

    # ── queries used by the lazy path ───────────────────────────────────

    def to_layout_node(self, node: CatalogNode) -> LayoutNode:
        """Copy a catalog node into an unplaced, collapsed layout node."""
        return LayoutNode(
            id=node.id,
            data={
                **node.data,
                "hierarchy": node.hierarchy,
                "groupId": node.group_id,
                "hasChildren": node.has_children,
                "childrenIds": list(node.children_ids),
                "collapsed": True,
                "_lazyLoaded": False,
            },
        )

    def get_children(self, node_id: str) -> list[LayoutNode]:
        """Return the direct children of ``node_id``, reset to unloaded.

        Args:
            node_id: Parent node id

        Returns:
            Child layout nodes in edge order (empty for leaves)

        Raises:
            NotFoundError: If ``node_id`` is unknown
        """
        return [
            self.to_layout_node(self._nodes[child_id])
            for child_id in self._child_ids(node_id)
            if child_id in self._nodes
        ]

    def get_child_edges(self, node_id: str) -> list[LayoutEdge]:
        """Return edges from ``node_id`` to each of its children.

        ``is_direct_line`` is set only for root -> first-level edges.

        Raises:
            NotFoundError: If ``node_id`` is unknown
        """
        parent = self.get_node(node_id)
        edges = []
        for child_id in self._child_ids(node_id):
            child = self._nodes.get(child_id)
            child_hierarchy = child.hierarchy if child else parent.hierarchy + 1
            edges.append(
                LayoutEdge(
                    source=node_id,
                    target=child_id,
                    data={
                        "sourceHierarchy": parent.hierarchy,
                        "targetHierarchy": child_hierarchy,
                    },
                    is_direct_line=parent.hierarchy == 0 and child_hierarchy == 1,
                )
            )
        return edges

    def get_descendant_ids(self, node_id: str) -> list[str]:
        """Return every descendant of ``node_id`` in breadth-first order.

        Raises:
            NotFoundError: If ``node_id`` is unknown
        """
        self.get_node(node_id)
        result: list[str] = []
        seen = {node_id}
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            for child_id in self._children.get(current, ()):
                if child_id in seen:
                    continue
                seen.add(child_id)
                result.append(child_id)
                queue.append(child_id)
        return result

    def get_subtree(self, node_id: str) -> dict[str, Any]:
        """Return ``node_id`` and its descendants as a nested structure.

        The shape is ``{"id", "data", "children": [...]}``, the same shape the
        adapter accepts as nested-tree input.

        Raises:
            NotFoundError: If ``node_id`` is unknown
        """
        root = self.get_node(node_id)
        subtree: dict[str, Any] = {"id": root.id, "data": dict(root.data), "children": []}
        seen = {node_id}
        stack = [(node_id, subtree)]
        while stack:
            current, out = stack.pop()
            for child_id in self._children.get(current, ()):
                if child_id in seen or child_id not in self._nodes:
                    continue
                seen.add(child_id)
                child = {
                    "id": child_id,
                    "data": dict(self._nodes[child_id].data),
                    "children": [],
                }
                out["children"].append(child)
                stack.append((child_id, child))
        return subtree

    def get_initial_data(self) -> list[LayoutNode]:
        """Return the roots only; nothing else is visible at first load."""
        roots = [self.to_layout_node(self._nodes[r]) for r in self._root_ids]
        logger.debug(f"Initial data: {len(roots)} root nodes")
        return roots

    def get_stats(self) -> CatalogStats:
        parents = [ids for ids in self._children.values() if ids]
        avg_children = (
            sum(len(ids) for ids in parents) / len(parents) if parents else 0.0
        )
        max_hierarchy = max((n.hierarchy for n in self._nodes.values()), default=0)
        return CatalogStats(
            total_nodes=len(self._nodes),
            total_edges=self._edge_count,
            root_nodes=len(self._root_ids),
            max_hierarchy=max_hierarchy,
            avg_children_per_parent=round(avg_children, 2),
        )
