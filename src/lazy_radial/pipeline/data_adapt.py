"""Stage 1: data adaptation.

Decides whether the input is already a canonical node/edge dataset or a
nested tree (or list of trees) that must be flattened, and validates it.
"""

from typing import Any

from loguru import logger

from ..core.adapter import (
    adapt_tree_input,
    canonicalize,
    is_graph_data,
    is_multi_tree_data,
    is_tree_data,
)
from ..core.exceptions import ValidationError
from ..core.models import GraphData
from ..core.progress import ProgressCalculator, ProgressCallback


class DataAdaptStage:
    """Validate and normalize the raw dataset (progress window 0-20%)."""

    name = "data-adapt"

    def __init__(self) -> None:
        self.progress_calc = ProgressCalculator(self.name)

    def execute(self, data: Any, on_progress: ProgressCallback) -> GraphData:
        """Run the stage.

        Args:
            data: Canonical graph, nested tree or multi-tree input
            on_progress: Progress callback

        Returns:
            Validated canonical graph data

        Raises:
            ValidationError: If the input is malformed or has duplicate ids
        """
        on_progress(self.progress_calc.create_message(0, "Validating input data..."))

        if is_graph_data(data):
            on_progress(self.progress_calc.create_message(0.5, "Graph format detected"))
            graph = canonicalize(data)
        elif is_multi_tree_data(data) or is_tree_data(data):
            on_progress(
                self.progress_calc.create_message(0.3, "Converting tree data to graph data...")
            )
            graph = adapt_tree_input(data)
            on_progress(
                self.progress_calc.create_message(
                    0.8,
                    f"Converted {graph.node_count} nodes",
                    {"total_nodes": graph.node_count},
                )
            )
        else:
            raise ValidationError(
                "Unrecognized dataset format: expected nodes/edges, a nested tree or trees",
                {"type": type(data).__name__},
            )

        on_progress(
            self.progress_calc.create_message(
                1.0, "Data adaptation complete", {"total_nodes": graph.node_count}
            )
        )
        logger.debug(
            f"Data adapted: {graph.node_count} nodes, {len(graph.edges)} edges, "
            f"{len(graph.root_ids)} roots"
        )
        return graph
