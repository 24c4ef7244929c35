"""Stage 3: style generation."""

from loguru import logger

from ..core.models import LayoutResult
from ..core.progress import ProgressCalculator, ProgressCallback
from ..visualization.styles import build_hierarchy_table, style_edges, style_nodes


class StyleGenStage:
    """Attach presentation attributes to every node and edge (50-70%)."""

    name = "style-gen"

    def __init__(self) -> None:
        self.progress_calc = ProgressCalculator(self.name)

    def execute(self, layout: LayoutResult, on_progress: ProgressCallback) -> LayoutResult:
        """Style the laid-out graph.

        Positions, ids and data are carried over unchanged; only ``style``
        is replaced.
        """
        on_progress(self.progress_calc.create_message(0, "Generating styles..."))

        table = build_hierarchy_table()
        on_progress(
            self.progress_calc.create_message(0.2, f"Style table ready ({len(table)} levels)")
        )

        nodes = style_nodes(layout.nodes, table)
        on_progress(
            self.progress_calc.create_message(
                0.6, f"Styled {len(nodes)} nodes", {"total_nodes": len(nodes)}
            )
        )

        edges = style_edges(layout.edges)
        on_progress(self.progress_calc.create_message(0.8, f"Styled {len(edges)} edges"))

        on_progress(self.progress_calc.create_message(1.0, "Style generation complete"))
        logger.debug(f"Styles generated: {len(nodes)} nodes, {len(edges)} edges")

        return LayoutResult(
            nodes=nodes,
            edges=edges,
            root_ids=layout.root_ids,
            root_positions=layout.root_positions,
        )
