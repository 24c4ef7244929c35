"""Synthetic multi-root datasets for demos and benchmarks."""

from __future__ import annotations

import random
from typing import Any

from loguru import logger

TREE_COLORS = [
    "#ff6b6b", "#f06595", "#cc5de8", "#845ef7", "#5c7cfa",
    "#339af0", "#22b8cf", "#20c997", "#51cf66", "#94d82d",
    "#ffd43b", "#ffc078", "#ff922b", "#fd7e14", "#f06595",
    "#e64980", "#be4bdb", "#7950f2", "#4c6ef5", "#228be6",
]  # fmt: skip


def generate_multi_tree_dataset(
    trees: int = 20,
    branches: int = 2,
    min_children: int = 3,
    max_children: int = 5,
    leaf_probability: float = 0.4,
    seed: int | None = None,
) -> dict[str, Any]:
    """Generate a forest of independent trees in canonical graph form.

    Each tree is ``root -> branches -> children``; every child has
    ``leaf_probability`` chance of one or two leaves below it. Every node
    carries ``label``, ``hierarchy``, ``groupId``, ``type`` and its tree's
    ``color``.

    Args:
        trees: Number of roots
        branches: First-level nodes per root
        min_children: Minimum children per branch
        max_children: Maximum children per branch
        leaf_probability: Chance that a child gets leaves
        seed: Seed for reproducible output

    Returns:
        ``{"nodes", "edges", "rootIds"}`` dataset
    """
    if min_children > max_children:
        raise ValueError("min_children cannot exceed max_children")

    rng = random.Random(seed)
    nodes: list[dict[str, Any]] = []
    edges: list[dict[str, Any]] = []
    root_ids: list[str] = []

    def add(node_id: str, label: str, hierarchy: int, group: int, kind: str) -> None:
        nodes.append(
            {
                "id": node_id,
                "data": {
                    "label": label,
                    "hierarchy": hierarchy,
                    "groupId": group,
                    "type": kind,
                    "color": TREE_COLORS[group % len(TREE_COLORS)],
                },
            }
        )

    for tree in range(trees):
        root_id = f"tree{tree}-root"
        add(root_id, f"Tree {tree}", 0, tree, "root")
        root_ids.append(root_id)

        for branch in range(branches):
            branch_id = f"tree{tree}-branch{branch}"
            add(branch_id, f"Tree {tree} / Branch {branch}", 1, tree, "branch")
            edges.append({"source": root_id, "target": branch_id, "data": {}})

            for child in range(rng.randint(min_children, max_children)):
                child_id = f"{branch_id}-child{child}"
                add(child_id, f"Node {child}", 2, tree, "node")
                edges.append({"source": branch_id, "target": child_id, "data": {}})

                if rng.random() < leaf_probability:
                    for leaf in range(rng.randint(1, 2)):
                        leaf_id = f"{child_id}-gc{leaf}"
                        add(leaf_id, f"Leaf {leaf}", 3, tree, "leaf")
                        edges.append({"source": child_id, "target": leaf_id, "data": {}})

    logger.debug(f"Generated {len(nodes)} nodes in {trees} trees")
    return {"nodes": nodes, "edges": edges, "rootIds": root_ids}
