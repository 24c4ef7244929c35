"""Expand/collapse controller.

The only component that changes what is drawn in response to the user. Each
node is either collapsed (children not materialized) or expanded, as
recorded by the tree state manager:

    collapsed --expand--> expanded    (children laid out, styled, added)
    expanded --collapse--> collapsed  (all descendants removed)

Failures inside a transition are logged and swallowed so one bad gesture
never takes the chart down. The tree state is only written after the surface
has accepted the delta, and a surface delta is rolled back when the tree
state cannot record it, so the two never disagree.
"""

from __future__ import annotations

import asyncio
import time

from loguru import logger

from ..config.defaults import DOUBLE_ACTIVATION_WINDOW
from ..visualization.layout_engine import IncrementalLayoutEngine
from ..visualization.styles import LazyStyleService
from .catalog import DataCatalog
from .exceptions import NotFoundError
from .surface import RenderSurface
from .tree_state import TreeStateManager


class ExpandCollapseController:
    """Drive expand/collapse transitions against a rendering surface.

    All transitions go through one lock, so overlapping gestures run one
    after another instead of interleaving.

    Example:
        controller = ExpandCollapseController(
            catalog, tree_state, engine, LazyStyleService(), surface
        )
        await controller.expand("root-1")
        await controller.collapse("root-1")
    """

    def __init__(
        self,
        catalog: DataCatalog,
        tree_state: TreeStateManager,
        layout_engine: IncrementalLayoutEngine,
        style_service: LazyStyleService,
        surface: RenderSurface,
        double_activation_window: float = DOUBLE_ACTIVATION_WINDOW,
    ) -> None:
        self.catalog = catalog
        self.tree_state = tree_state
        self.layout_engine = layout_engine
        self.style_service = style_service
        self.surface = surface
        self.double_activation_window = double_activation_window
        self._lock = asyncio.Lock()
        self._last_activation: tuple[str, float] | None = None

    async def expand(self, node_id: str) -> bool:
        """Materialize the children of ``node_id``.

        Returns:
            True if children were added; False for a no-op or a failure
        """
        async with self._lock:
            return self._expand(node_id)

    async def collapse(self, node_id: str) -> list[str]:
        """Remove every descendant of ``node_id``.

        Returns:
            Removed ids in pre-order (empty for a no-op or a failure)
        """
        async with self._lock:
            return self._collapse(node_id)

    async def toggle(self, node_id: str) -> bool:
        """Expand a collapsed node or collapse an expanded one.

        Returns:
            Whether ``node_id`` is expanded afterwards
        """
        async with self._lock:
            if self.tree_state.is_loaded(node_id):
                self._collapse(node_id)
            else:
                self._expand(node_id)
            return self.tree_state.is_loaded(node_id)

    async def handle_activation(self, node_id: str, timestamp: float | None = None) -> bool:
        """Feed one activation (click/tap) of ``node_id``.

        Two activations of the same node within ``double_activation_window``
        seconds toggle it. Leaves are ignored.

        Args:
            node_id: Activated node
            timestamp: Activation time in seconds (monotonic clock by default)

        Returns:
            True if this activation triggered a toggle
        """
        now = time.monotonic() if timestamp is None else timestamp
        last = self._last_activation
        if last is None or last[0] != node_id or now - last[1] > self.double_activation_window:
            self._last_activation = (node_id, now)
            return False

        self._last_activation = None
        is_leaf = (
            not self.catalog.has_node(node_id)
            or not self.catalog.get_node(node_id).has_children
        )
        if is_leaf:
            logger.debug(f"Ignoring activation of leaf {node_id}")
            return False

        await self.toggle(node_id)
        return True

    def _expand(self, node_id: str) -> bool:
        if self.tree_state.is_loaded(node_id):
            logger.debug(f"Node {node_id} is already expanded")
            return False
        if not self.tree_state.has_node(node_id):
            logger.warning(f"Cannot expand {node_id}: node is not visible")
            return False

        try:
            parent = self.surface.get_node_data(node_id)
            if parent is None:
                raise NotFoundError(f"Node not on surface: {node_id}", {"node_id": node_id})

            children, edges = self.layout_engine.layout_children(node_id, parent)
            visible = {child.id for child in children if self.tree_state.has_node(child.id)}
            if visible:
                # Already drawn elsewhere; re-adding would move them
                logger.warning(
                    f"Skipping {len(visible)} children of {node_id} that are already visible"
                )
                children = [child for child in children if child.id not in visible]
                edges = [edge for edge in edges if edge.target not in visible]
            if not children:
                logger.debug(f"Node {node_id} has no children to expand")
                return False

            children = self.style_service.apply_node_styles(children)
            edges = self.style_service.apply_edge_styles(edges)
            child_ids = [child.id for child in children]

            self.surface.add_data(
                [child.to_dict() for child in children], [edge.to_dict() for edge in edges]
            )
            try:
                if not self.tree_state.expand(node_id, child_ids):
                    raise NotFoundError(
                        f"Tree state rejected expand of {node_id}", {"node_id": node_id}
                    )
                self._set_collapsed(node_id, False)
            except Exception:
                self.tree_state.collapse(node_id)
                self.surface.remove_data(child_ids)
                raise

            self.surface.render()
            logger.info(f"Expanded {node_id}: {len(children)} children")
            return True

        except Exception as e:
            logger.exception(f"Expand of {node_id} failed: {e}")
            return False

    def _collapse(self, node_id: str) -> list[str]:
        if not self.tree_state.is_loaded(node_id):
            logger.debug(f"Node {node_id} is not expanded")
            return []

        try:
            descendants = self.tree_state.get_descendant_ids(node_id)
            on_surface = [d for d in descendants if self.surface.get_node_data(d) is not None]
            if len(on_surface) != len(descendants):
                logger.warning(
                    f"{len(descendants) - len(on_surface)} descendants of {node_id} "
                    f"were not on the surface"
                )

            self.surface.remove_data(on_surface)
            removed = self.tree_state.collapse(node_id)
            self._set_collapsed(node_id, True)
            self.surface.render()
            logger.info(f"Collapsed {node_id}: removed {len(removed)} nodes")
            return removed

        except Exception as e:
            logger.exception(f"Collapse of {node_id} failed: {e}")
            return []

    def _set_collapsed(self, node_id: str, collapsed: bool) -> None:
        self.surface.update_data(
            [{"id": node_id, "data": {"collapsed": collapsed, "_lazyLoaded": not collapsed}}]
        )
