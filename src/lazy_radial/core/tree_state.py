"""Self-maintained record of the visible tree.

Design Decision: own the visible-tree bookkeeping instead of relying on the
rendering surface's internal tree.

Rationale: two tree representations that can disagree are the classic
source of expand/collapse desynchronization. This manager is an arena of
``VisibleNode`` entries addressed by id and is the single answer to "what is
on screen". It knows nothing about the catalog or the surface.

Trade-offs:
    - Memory: one small record per visible node vs. none
    - Consistency: removal lists come from here, so the surface can be
      brought in line with one batch delete
"""

from __future__ import annotations

from collections import deque

from loguru import logger
from rich.tree import Tree

from .models import TreeStats, VisibleNode


class TreeStateManager:
    """Arena of visible nodes keyed by id, with parent/child links."""

    def __init__(self) -> None:
        self._nodes: dict[str, VisibleNode] = {}
        self._root_ids: list[str] = []

    def initialize_roots(self, root_ids: list[str]) -> None:
        """Seed the tree with unloaded level-0 entries.

        Args:
            root_ids: Root node ids in placement order
        """
        self._root_ids = list(root_ids)
        for root_id in root_ids:
            self._nodes[root_id] = VisibleNode(id=root_id, parent_id=None)

        logger.debug(f"Tree state initialized with {len(root_ids)} roots")

    def expand(self, parent_id: str, child_ids: list[str]) -> bool:
        """Attach children to a visible node and mark it loaded.

        Args:
            parent_id: Visible parent node id
            child_ids: Ids of the children now on screen, in order

        Returns:
            True if the parent was expanded, False if it is not visible
        """
        parent = self._nodes.get(parent_id)
        if parent is None:
            logger.warning(f"Cannot expand {parent_id}: node is not visible")
            return False

        attached: list[str] = []
        for child_id in child_ids:
            existing = self._nodes.get(child_id)
            if existing is None:
                self._nodes[child_id] = VisibleNode(
                    id=child_id, parent_id=parent_id, level=parent.level + 1
                )
            elif existing.parent_id != parent_id:
                # A visible node keeps the single parent it was attached under
                logger.warning(
                    f"Not attaching {child_id} under {parent_id}: "
                    f"already visible under {existing.parent_id}"
                )
                continue
            attached.append(child_id)

        parent.children = attached
        parent.loaded = True

        logger.debug(f"Expanded {parent_id}: {len(attached)} children")
        return True

    def collapse(self, parent_id: str) -> list[str]:
        """Detach every descendant of a visible node.

        Args:
            parent_id: Visible node to collapse

        Returns:
            Removed node ids in depth-first pre-order, so the caller can issue
            the matching deletions against the rendering surface. Empty if the
            node is unknown or has nothing attached.
        """
        parent = self._nodes.get(parent_id)
        if parent is None:
            logger.warning(f"Cannot collapse {parent_id}: node is not visible")
            return []

        removed: list[str] = []
        seen = {parent_id}
        stack = list(reversed(parent.children))
        while stack:
            node_id = stack.pop()
            node = self._nodes.get(node_id)
            if node is None or node_id in seen:
                continue
            seen.add(node_id)
            removed.append(node_id)
            stack.extend(reversed(node.children))

        for node_id in removed:
            self._nodes.pop(node_id, None)

        parent.children = []
        parent.loaded = False

        logger.debug(f"Collapsed {parent_id}: removed {len(removed)} descendants")
        return removed

    # ── queries ─────────────────────────────────────────────────────────

    def is_loaded(self, node_id: str) -> bool:
        node = self._nodes.get(node_id)
        return node.loaded if node else False

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_level(self, node_id: str) -> int:
        node = self._nodes.get(node_id)
        return node.level if node else 0

    def get_parent_id(self, node_id: str) -> str | None:
        node = self._nodes.get(node_id)
        return node.parent_id if node else None

    def get_children(self, node_id: str) -> list[str]:
        node = self._nodes.get(node_id)
        return list(node.children) if node else []

    def get_visible_node_ids(self) -> list[str]:
        return list(self._nodes)

    def get_root_ids(self) -> list[str]:
        return list(self._root_ids)

    def get_ancestor_chain(self, node_id: str) -> list[str]:
        """Return ancestor ids ordered from the root down to the parent."""
        chain: list[str] = []
        node = self._nodes.get(node_id)
        while node is not None and node.parent_id is not None:
            if node.parent_id in chain:
                break
            chain.append(node.parent_id)
            node = self._nodes.get(node.parent_id)
        chain.reverse()
        return chain

    def get_descendant_ids(self, node_id: str) -> list[str]:
        """Return visible descendants of ``node_id`` in breadth-first order."""
        result: list[str] = []
        seen = {node_id}
        queue = deque([node_id])
        while queue:
            node = self._nodes.get(queue.popleft())
            if node is None:
                continue
            for child_id in node.children:
                if child_id in seen:
                    continue
                seen.add(child_id)
                result.append(child_id)
                queue.append(child_id)
        return result

    def get_stats(self) -> TreeStats:
        max_level = 0
        loaded = 0
        for node in self._nodes.values():
            max_level = max(max_level, node.level)
            if node.loaded:
                loaded += 1
        return TreeStats(
            total_nodes=len(self._nodes),
            root_nodes=len(self._root_ids),
            loaded_nodes=loaded,
            max_level=max_level,
        )

    def snapshot(self) -> dict[str, tuple[str | None, tuple[str, ...], bool, int]]:
        """Return an immutable copy of the arena for comparison."""
        return {
            node_id: (node.parent_id, tuple(node.children), node.loaded, node.level)
            for node_id, node in self._nodes.items()
        }

    def clear(self) -> None:
        self._nodes.clear()
        self._root_ids = []
        logger.debug("Tree state cleared")

    def render_tree(self, title: str = "Visible tree") -> Tree:
        """Build a Rich tree of the visible nodes for console inspection."""
        tree = Tree(f"[bold]{title}[/bold]")
        seen: set[str] = set()
        stack = [(root_id, tree) for root_id in reversed(self._root_ids)]
        while stack:
            node_id, branch = stack.pop()
            node = self._nodes.get(node_id)
            if node is None or node_id in seen:
                continue
            seen.add(node_id)
            marker = "📂" if node.loaded else "📁"
            child_branch = branch.add(
                f"{marker} {node_id} [dim](level {node.level}, "
                f"{len(node.children)} children)[/dim]"
            )
            stack.extend((child_id, child_branch) for child_id in reversed(node.children))
        return tree
