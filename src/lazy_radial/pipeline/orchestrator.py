"""Initialization pipeline orchestrator.

Runs data-adapt, layout-calc and style-gen strictly in order. A failure in any
stage aborts the rest: one ``stage="error"`` progress message is emitted with
the error text and formatted traceback, then the exception propagates.
"""

from __future__ import annotations

import traceback
from concurrent.futures import Executor
from typing import Any

from loguru import logger

from ..config.settings import LayoutOptions, PipelineSettings
from ..core.exceptions import LazyRadialError, PipelineError
from ..core.models import PerformanceMetrics, PipelineResult, ProgressMessage
from ..core.progress import PerformanceTimer, ProgressCallback, noop_progress
from .data_adapt import DataAdaptStage
from .layout_calc import LayoutCalcStage
from .style_gen import StyleGenStage


class InitializationPipeline:
    """Three-stage first-load pipeline.

    Example:
        pipeline = InitializationPipeline(LayoutOptions(seed=7))
        result = await pipeline.run(dataset, on_progress=print)
        surface.add_data(
            [n.to_dict() for n in result.nodes], [e.to_dict() for e in result.edges]
        )
    """

    def __init__(
        self,
        options: LayoutOptions | None = None,
        settings: PipelineSettings | None = None,
        executor: Executor | None = None,
    ) -> None:
        self.options = options or LayoutOptions()
        self.settings = settings or PipelineSettings()
        self.data_adapt = DataAdaptStage()
        self.layout_calc = LayoutCalcStage(self.settings, executor)
        self.style_gen = StyleGenStage()
        self.timer = PerformanceTimer()

    async def run(
        self, data: Any, on_progress: ProgressCallback = noop_progress
    ) -> PipelineResult:
        """Run all stages on ``data``.

        Args:
            data: Canonical graph, nested tree or multi-tree input
            on_progress: Receives every progress message, including the
                final error message on failure

        Returns:
            Render-ready nodes and edges plus performance metrics

        Raises:
            ValidationError: If the data-adapt stage rejects the input
            LayoutError: If a node cannot be resolved to a root
            PipelineError: For any other failure, chained from the original
        """
        self.timer.start()
        stage = self.data_adapt.name
        last_progress = 0

        def report(message: ProgressMessage) -> None:
            nonlocal last_progress
            last_progress = message.progress
            on_progress(message)

        try:
            graph = self.data_adapt.execute(data, report)
            self.timer.mark("data-adapt-complete")

            stage = self.layout_calc.name
            layout = await self.layout_calc.execute(graph, self.options, report)
            self.timer.mark("layout-calc-complete")

            stage = self.style_gen.name
            styled = self.style_gen.execute(layout, report)
            self.timer.mark("style-gen-complete")
        except Exception as e:
            logger.error(f"Initialization failed in {stage}: {e}")
            on_progress(
                ProgressMessage(
                    stage="error",
                    stage_progress=0,
                    progress=last_progress,
                    message=f"Initialization failed during {stage}",
                    details={"failed_stage": stage},
                    error=str(e),
                    error_stack=traceback.format_exc(),
                )
            )
            if isinstance(e, LazyRadialError):
                raise
            raise PipelineError(f"Stage {stage} failed: {e}", stage=stage) from e

        metrics = self._metrics(graph.node_count)
        logger.info(
            f"Initialization complete: {len(styled.nodes)} nodes, "
            f"{len(styled.edges)} edges in {metrics.total_time}ms"
        )
        return PipelineResult(
            nodes=styled.nodes,
            edges=styled.edges,
            root_ids=styled.root_ids,
            performance_metrics=metrics,
            graph=graph,
            root_positions=styled.root_positions,
        )

    def _metrics(self, node_count: int) -> PerformanceMetrics:
        data_adapt = self.timer.measure("data-adapt-complete")
        layout_calc = self.timer.measure_between("data-adapt-complete", "layout-calc-complete")
        style_gen = self.timer.measure_between("layout-calc-complete", "style-gen-complete")
        total = self.timer.measure("style-gen-complete")
        nodes_per_second = round(node_count / (total / 1000)) if total > 0 else 0
        return PerformanceMetrics(
            data_adapt_time=round(data_adapt),
            layout_calc_time=round(layout_calc),
            style_gen_time=round(style_gen),
            total_time=round(total),
            nodes_per_second=nodes_per_second,
        )
