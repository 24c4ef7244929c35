"""Three-stage initialization pipeline: data-adapt, layout-calc, style-gen."""

from .data_adapt import DataAdaptStage
from .layout_calc import LayoutCalcStage, resolve_batch_size
from .orchestrator import InitializationPipeline
from .style_gen import StyleGenStage

__all__ = [
    "DataAdaptStage",
    "InitializationPipeline",
    "LayoutCalcStage",
    "StyleGenStage",
    "resolve_batch_size",
]
