"""Stage 2: layout calculation.

Roots are placed once, then every node is positioned in batches. Between
batches the stage yields to the event loop so progress messages reach the
host while a large dataset is being processed.
"""

from __future__ import annotations

import asyncio
import functools
import random
from concurrent.futures import Executor

from loguru import logger

from ..config.defaults import MIN_LAYOUT_BATCH_SIZE, TARGET_LAYOUT_BATCHES
from ..config.settings import LayoutOptions, PipelineSettings
from ..core.models import GraphData, LayoutNode, LayoutResult
from ..core.progress import (
    ProcessingSpeedCalculator,
    ProgressCalculator,
    ProgressCallback,
)
from ..visualization.layout_engine import (
    classify_edges,
    hierarchy_index,
    layout_node_batch,
    place_roots,
    resolve_seed,
)


def resolve_batch_size(total: int, configured: int | None = None) -> int:
    """Return the layout batch size for ``total`` nodes.

    Defaults to roughly ten batches and never fewer than 100 nodes per batch.
    """
    if configured is not None:
        return configured
    return max(MIN_LAYOUT_BATCH_SIZE, total // TARGET_LAYOUT_BATCHES)


class LayoutCalcStage:
    """Position roots and nodes (progress window 20-50%).

    Design Decision: cooperative batches with optional executor offload

    Rationale: per-node placement only depends on (seed, node id), so batches
    are independent. Without an executor each batch runs on the loop and the
    stage awaits ``asyncio.sleep(0)`` afterwards; with one, batches run via
    ``loop.run_in_executor`` and the loop stays free while they compute.

    Trade-offs:
        - Responsiveness: progress every batch vs. one opaque computation
        - Overhead: negligible for ten batches
    """

    name = "layout-calc"

    def __init__(
        self,
        settings: PipelineSettings | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.executor = executor
        self.progress_calc = ProgressCalculator(self.name)

    async def execute(
        self,
        graph: GraphData,
        options: LayoutOptions,
        on_progress: ProgressCallback,
    ) -> LayoutResult:
        """Run the stage.

        Args:
            graph: Output of the data-adapt stage
            options: Layout options
            on_progress: Progress callback

        Returns:
            Positioned nodes, classified edges and the root ring

        Raises:
            LayoutError: If any node's group does not resolve to a root
        """
        total = graph.node_count
        on_progress(
            self.progress_calc.create_message(
                0,
                "Calculating root positions...",
                {"processed_nodes": 0, "total_nodes": total},
            )
        )

        seed = resolve_seed(options)
        root_positions = place_roots(graph.root_ids, options, random.Random(seed))

        if total == 0:
            on_progress(
                self.progress_calc.create_message(
                    1.0,
                    "Layout complete (empty dataset)",
                    {"processed_nodes": 0, "total_nodes": 0},
                )
            )
            return LayoutResult(
                nodes=[],
                edges=[],
                root_ids=list(graph.root_ids),
                root_positions=root_positions,
            )

        batch_size = resolve_batch_size(total, self.settings.batch_size)
        speed = ProcessingSpeedCalculator()
        speed.start()
        loop = asyncio.get_running_loop()

        nodes: list[LayoutNode] = []
        for offset in range(0, total, batch_size):
            batch = graph.nodes[offset : offset + batch_size]
            compute = functools.partial(
                layout_node_batch, batch, graph.root_ids, root_positions, options, seed
            )
            if self.executor is not None:
                placed = await loop.run_in_executor(self.executor, compute)
            else:
                placed = compute()
                await asyncio.sleep(0)

            nodes.extend(placed)
            speed.update(len(placed))
            processed = len(nodes)
            on_progress(
                self.progress_calc.create_message(
                    processed / total,
                    f"Positioned {processed}/{total} nodes",
                    {
                        "processed_nodes": processed,
                        "total_nodes": total,
                        "speed": speed.speed(),
                        "elapsed_time": round(speed.elapsed_seconds() * 1000),
                        "estimated_remaining": speed.estimate_remaining(total - processed),
                    },
                )
            )

        edges = classify_edges(graph.edges, hierarchy_index(graph))
        logger.debug(
            f"Layout calculated: {len(nodes)} nodes in batches of {batch_size}, "
            f"{len(edges)} edges, seed={seed}"
        )
        return LayoutResult(
            nodes=nodes,
            edges=edges,
            root_ids=list(graph.root_ids),
            root_positions=root_positions,
        )
