"""Rendering surface interface and an in-memory implementation.

The surface is whatever actually draws the graph. Only the operations the
controller needs are part of the interface; node and edge payloads are the
plain dicts produced by ``LayoutNode.to_dict()`` / ``LayoutEdge.to_dict()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from .exceptions import NotFoundError


class RenderSurface(ABC):
    """Abstract interface for a graph rendering surface."""

    @abstractmethod
    def add_data(self, nodes: list[dict[str, Any]], edges: list[dict[str, Any]]) -> None:
        """Add nodes and edges in one batch."""
        ...

    @abstractmethod
    def remove_data(self, node_ids: list[str]) -> None:
        """Remove nodes (and every edge touching them) in one batch."""
        ...

    @abstractmethod
    def update_data(self, nodes: list[dict[str, Any]]) -> None:
        """Merge ``data``/``style`` of existing nodes.

        Raises:
            NotFoundError: If a node is not on the surface
        """
        ...

    @abstractmethod
    def get_node_data(self, node_id: str) -> dict[str, Any] | None:
        """Return the node's current payload, or None if it is not drawn."""
        ...

    @abstractmethod
    def render(self) -> None:
        """Flush pending changes to the screen."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove everything."""
        ...


class InMemoryRenderSurface(RenderSurface):
    """Surface that only records what would be drawn.

    Used by the CLI and the tests; also a reference for host integrations.
    """

    def __init__(self) -> None:
        self.nodes: dict[str, dict[str, Any]] = {}
        self.edges: dict[str, dict[str, Any]] = {}
        self.render_count = 0

    def add_data(self, nodes: list[dict[str, Any]], edges: list[dict[str, Any]]) -> None:
        for node in nodes:
            self.nodes[node["id"]] = {
                **node,
                "data": dict(node.get("data") or {}),
                "style": dict(node.get("style") or {}),
            }
        for edge in edges:
            edge_id = edge.get("id") or f"{edge['source']}->{edge['target']}"
            self.edges[edge_id] = {**edge, "id": edge_id}
        logger.debug(f"Surface: added {len(nodes)} nodes, {len(edges)} edges")

    def remove_data(self, node_ids: list[str]) -> None:
        removed = set(node_ids)
        for node_id in removed:
            self.nodes.pop(node_id, None)
        self.edges = {
            edge_id: edge
            for edge_id, edge in self.edges.items()
            if edge["source"] not in removed and edge["target"] not in removed
        }
        logger.debug(f"Surface: removed {len(removed)} nodes")

    def update_data(self, nodes: list[dict[str, Any]]) -> None:
        for update in nodes:
            node_id = update["id"]
            current = self.nodes.get(node_id)
            if current is None:
                raise NotFoundError(f"Node not on surface: {node_id}", {"node_id": node_id})
            current["data"].update(update.get("data") or {})
            current["style"].update(update.get("style") or {})

    def get_node_data(self, node_id: str) -> dict[str, Any] | None:
        return self.nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    def render(self) -> None:
        self.render_count += 1

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
