"""Data models for the radial tree: catalog entries, visible-tree nodes and
layout output.

Catalog entries are frozen; layout output is rebuilt on every pass and
serialized with ``to_dict()`` for the rendering surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..config.defaults import EDGE_TYPE_CURVED, EDGE_TYPE_LINE


@dataclass(frozen=True)
class CatalogNode:
    """A node of the full dataset (read-only after load)."""

    id: str  # Globally unique identifier
    hierarchy: int  # Distance from the nearest root (0 = root)
    group_id: int | None  # Index of the owning root in the root id list
    children_ids: tuple[str, ...] = ()  # Derived from edges at construction
    data: dict[str, Any] = field(default_factory=dict)  # Opaque payload

    @property
    def has_children(self) -> bool:
        return bool(self.children_ids)

    @property
    def label(self) -> str:
        return str(self.data.get("label") or self.id)


@dataclass(frozen=True)
class CatalogEdge:
    """A parent -> child relationship."""

    source: str
    target: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class GraphData:
    """Canonical dataset: flat node and edge lists plus root ids.

    Nodes and edges are kept as plain ``{"id", "data"}`` /
    ``{"source", "target", "data"}`` dicts, the way hosts deliver them.
    """

    nodes: list[dict[str, Any]]
    edges: list[dict[str, Any]]
    root_ids: list[str] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)


@dataclass
class LayoutNode:
    """A positioned (and eventually styled) node."""

    id: str
    data: dict[str, Any]
    x: float = 0.0
    y: float = 0.0
    style: dict[str, Any] = field(default_factory=dict)

    @property
    def hierarchy(self) -> int:
        return int(self.data.get("hierarchy", 0) or 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "data": dict(self.data),
            "x": self.x,
            "y": self.y,
            "style": {**self.style, "x": self.x, "y": self.y},
        }


@dataclass
class LayoutEdge:
    """An edge classified for straight or curved rendering."""

    source: str
    target: str
    data: dict[str, Any] = field(default_factory=dict)
    is_direct_line: bool = False
    style: dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"

    @property
    def edge_type(self) -> str:
        return EDGE_TYPE_LINE if self.is_direct_line else EDGE_TYPE_CURVED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.edge_type,
            "data": {**self.data, "isDirectLine": self.is_direct_line},
            "style": dict(self.style),
        }


@dataclass
class VisibleNode:
    """A node currently materialized on screen."""

    id: str
    parent_id: str | None  # None for roots
    children: list[str] = field(default_factory=list)
    loaded: bool = False  # True iff children are materialized
    level: int = 0  # 0 = root


@dataclass(frozen=True)
class TreeStats:
    """Counts describing the visible tree."""

    total_nodes: int
    root_nodes: int
    loaded_nodes: int
    max_level: int


@dataclass(frozen=True)
class CatalogStats:
    """Counts describing the full dataset."""

    total_nodes: int
    total_edges: int
    root_nodes: int
    max_hierarchy: int
    avg_children_per_parent: float


@dataclass(frozen=True)
class RootPosition:
    """Placement of a root on the root ring."""

    x: float
    y: float
    angle: float  # Radians


@dataclass
class ProgressMessage:
    """One progress update from the initialization pipeline.

    Attributes:
        stage: ``data-adapt``, ``layout-calc``, ``style-gen`` or ``error``
        stage_progress: Fraction of the current stage completed (0-1)
        progress: Overall percentage (0-100) inside the stage's window
        message: Human-readable status
        details: processed_nodes, total_nodes, speed, elapsed_time,
            estimated_remaining (when known)
        error: Error message (error stage only)
        error_stack: Formatted traceback (error stage only)
    """

    stage: str
    stage_progress: float
    progress: int
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    error_stack: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": "progress",
            "stage": self.stage,
            "stageProgress": self.stage_progress,
            "progress": self.progress,
            "message": self.message,
            "details": dict(self.details),
        }
        if self.error is not None:
            payload["error"] = self.error
        if self.error_stack is not None:
            payload["errorStack"] = self.error_stack
        return payload


@dataclass(frozen=True)
class PerformanceMetrics:
    """Per-stage timings in milliseconds plus overall throughput."""

    data_adapt_time: int
    layout_calc_time: int
    style_gen_time: int
    total_time: int
    nodes_per_second: int

    def to_dict(self) -> dict[str, int]:
        return {
            "dataAdaptTime": self.data_adapt_time,
            "layoutCalcTime": self.layout_calc_time,
            "styleGenTime": self.style_gen_time,
            "totalTime": self.total_time,
            "nodesPerSecond": self.nodes_per_second,
        }


@dataclass
class LayoutResult:
    """Positioned nodes and classified edges."""

    nodes: list[LayoutNode]
    edges: list[LayoutEdge]
    root_ids: list[str]
    root_positions: dict[str, RootPosition] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """Render-ready output of the initialization pipeline."""

    nodes: list[LayoutNode]
    edges: list[LayoutEdge]
    root_ids: list[str]
    performance_metrics: PerformanceMetrics
    graph: GraphData | None = None  # Adapted input, for catalog construction
    root_positions: dict[str, RootPosition] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "rootIds": list(self.root_ids),
            "performanceMetrics": self.performance_metrics.to_dict(),
        }
