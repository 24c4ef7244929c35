"""Chart context: wires catalog, tree state, layout, styles and controller.

Everything a chart needs is created here and passed through constructors;
there are no module-level singletons, so several charts can live side by
side and tests can build one from scratch.
"""

from __future__ import annotations

from collections import deque
from concurrent.futures import Executor
from typing import Any

from loguru import logger

from ..config.settings import ChartSettings
from ..pipeline.orchestrator import InitializationPipeline
from ..visualization.layout_engine import IncrementalLayoutEngine
from ..visualization.styles import LazyStyleService, build_hierarchy_table, style_nodes
from .catalog import DataCatalog
from .controller import ExpandCollapseController
from .exceptions import LazyRadialError
from .models import PipelineResult, TreeStats
from .progress import ProgressCallback, noop_progress
from .surface import InMemoryRenderSurface, RenderSurface
from .tree_state import TreeStateManager


class ChartContext:
    """Lifecycle owner of one radial tree chart.

    Example:
        async with ChartContext(ChartSettings(), surface) as chart:
            await chart.initialize(dataset, on_progress=reporter)
            await chart.expand(chart.catalog.root_ids[0])
    """

    def __init__(
        self,
        settings: ChartSettings | None = None,
        surface: RenderSurface | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.settings = settings or ChartSettings()
        self.surface = surface or InMemoryRenderSurface()
        self.executor = executor
        self.tree_state = TreeStateManager()
        self.style_service = LazyStyleService()
        self.catalog: DataCatalog | None = None
        self.layout_engine: IncrementalLayoutEngine | None = None
        self.controller: ExpandCollapseController | None = None
        self.result: PipelineResult | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(
        self, dataset: Any, on_progress: ProgressCallback = noop_progress
    ) -> PipelineResult:
        """Run the initialization pipeline and draw the initial view.

        In lazy mode only the roots are drawn, then ``initial_depth`` levels
        are expanded through the controller. With ``lazy=False`` the whole
        laid-out dataset is drawn at once.

        Args:
            dataset: Canonical graph, nested tree or multi-tree input
            on_progress: Pipeline progress callback

        Returns:
            The pipeline result

        Raises:
            ValidationError: If the dataset is malformed
            LayoutError: If a node cannot be resolved to a root
            PipelineError: For any other pipeline failure
        """
        if self._initialized:
            logger.debug("Chart context already initialized, tearing down first")
            await self.teardown()

        pipeline = InitializationPipeline(
            self.settings.layout, self.settings.pipeline, self.executor
        )
        result = await pipeline.run(dataset, on_progress)

        self.catalog = DataCatalog(result.graph)
        self.layout_engine = IncrementalLayoutEngine(self.catalog, self.settings.layout)
        self.controller = ExpandCollapseController(
            self.catalog,
            self.tree_state,
            self.layout_engine,
            self.style_service,
            self.surface,
            self.settings.double_activation_window,
        )
        self.result = result

        if self.settings.lazy:
            self._draw_roots(result)
            self._initialized = True
            await self._expand_initial_levels(self.settings.initial_depth)
        else:
            self._draw_everything(result)
            self._initialized = True

        self.surface.render()
        stats = self.tree_state.get_stats()
        logger.info(
            f"Chart ready: {stats.total_nodes} of {len(self.catalog)} nodes visible "
            f"({'lazy' if self.settings.lazy else 'eager'} mode)"
        )
        return result

    async def teardown(self) -> None:
        """Drop all chart state and clear the surface."""
        self.surface.clear()
        self.tree_state.clear()
        self.catalog = None
        self.layout_engine = None
        self.controller = None
        self.result = None
        self._initialized = False
        logger.debug("Chart context torn down")

    async def __aenter__(self) -> ChartContext:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.teardown()

    # ── gestures ────────────────────────────────────────────────────────

    async def expand(self, node_id: str) -> bool:
        return await self._require_controller().expand(node_id)

    async def collapse(self, node_id: str) -> list[str]:
        return await self._require_controller().collapse(node_id)

    async def toggle(self, node_id: str) -> bool:
        return await self._require_controller().toggle(node_id)

    async def handle_activation(self, node_id: str, timestamp: float | None = None) -> bool:
        return await self._require_controller().handle_activation(node_id, timestamp)

    def stats(self) -> TreeStats:
        return self.tree_state.get_stats()

    def _require_controller(self) -> ExpandCollapseController:
        if self.controller is None:
            raise LazyRadialError("Chart context is not initialized")
        return self.controller

    # ── initial view ────────────────────────────────────────────────────

    def _draw_roots(self, result: PipelineResult) -> None:
        initial = self.layout_engine.layout_initial_roots(result.root_positions)
        roots = style_nodes(initial.nodes, build_hierarchy_table())
        self.surface.add_data([root.to_dict() for root in roots], [])
        self.tree_state.initialize_roots(initial.root_ids)

    async def _expand_initial_levels(self, depth: int) -> None:
        frontier = self.tree_state.get_root_ids()
        for _ in range(depth):
            next_frontier: list[str] = []
            for node_id in frontier:
                if await self.controller.expand(node_id):
                    next_frontier.extend(self.tree_state.get_children(node_id))
            if not next_frontier:
                break
            frontier = next_frontier

    def _draw_everything(self, result: PipelineResult) -> None:
        catalog = self.catalog
        nodes = []
        for node in result.nodes:
            entry = catalog.get_node(node.id)
            payload = node.to_dict()
            payload["data"].update(
                {
                    "hasChildren": entry.has_children,
                    "childrenIds": list(entry.children_ids),
                    "collapsed": not entry.has_children,
                    "_lazyLoaded": entry.has_children,
                }
            )
            nodes.append(payload)
        self.surface.add_data(nodes, [edge.to_dict() for edge in result.edges])

        # Mirror the drawn graph in the tree state, breadth-first from the roots
        self.tree_state.initialize_roots(result.root_ids)
        queue = deque(result.root_ids)
        while queue:
            node_id = queue.popleft()
            child_ids = list(catalog.get_node(node_id).children_ids)
            if not child_ids or self.tree_state.is_loaded(node_id):
                continue
            self.tree_state.expand(node_id, child_ids)
            queue.extend(child_ids)
