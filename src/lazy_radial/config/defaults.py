"""Default configuration values for lazy-radial."""

import math

# Root nodes are drawn at this size; the root ring and arc bounds scale from it
ROOT_NODE_SIZE = 35

# Layout defaults (all lengths in canvas units)
DEFAULT_LAYOUT = {
    "width": 800,
    "height": 600,
    "base_distance": 300,
    "hierarchy_step": 100,
    "base_radius_multiplier": 5,
    "min_arc_length_multiplier": 3,
    "max_arc_length_multiplier": 5,
    "angle_spread": math.pi / 3,
    "random_offset": 20,
}

# Hierarchy assumed for a non-root node whose data carries none
DEFAULT_NODE_HIERARCHY = 1

# Overall progress windows (percent) owned by each initialization stage.
# 70-100 is left to the host for surface creation and the first render.
STAGE_WINDOWS: dict[str, tuple[int, int]] = {
    "data-adapt": (0, 20),
    "layout-calc": (20, 50),
    "style-gen": (50, 70),
}

STAGE_LABELS = {
    "data-adapt": "Adapting data",
    "layout-calc": "Calculating layout",
    "style-gen": "Generating styles",
    "error": "Failed",
}

# Layout-calc batches: at least this many nodes, about ten batches overall
MIN_LAYOUT_BATCH_SIZE = 100
TARGET_LAYOUT_BATCHES = 10

# Edge types handed to the rendering surface
EDGE_TYPE_LINE = "line"
EDGE_TYPE_CURVED = "cubic-radial"

# Base styles applied before hierarchy styles and per-node overrides
DEFAULT_NODE_STYLE = {
    "fill": "#5B8FF9",
    "stroke": "#5B8FF9",
    "lineWidth": 2,
    "size": 30,
    "opacity": 1,
    "labelFontSize": 12,
    "labelFill": "#000",
    "labelPosition": "bottom",
    "labelOffsetY": 10,
}

DEFAULT_EDGE_STYLE = {
    "stroke": "#e2e2e2",
    "lineWidth": 1,
    "opacity": 0.6,
}

# Per-hierarchy look; deeper levels fall back to the last entry
HIERARCHY_STYLES: dict[int, dict[str, object]] = {
    0: {"size": 35, "fill": "#ff6b6b", "opacity": 1.0},  # Roots
    1: {"size": 28, "fill": "#4c6ef5", "opacity": 0.9},
    2: {"size": 22, "fill": "#20c997", "opacity": 0.8},
    3: {"size": 18, "fill": "#fcc419", "opacity": 0.7},
}

# Pre-generated hierarchy levels in the style table
STYLE_TABLE_DEPTH = 10

# Lazily expanded nodes: size shrinks and hue rotates with depth
LAZY_BASE_NODE_SIZE = 30
LAZY_MIN_NODE_SIZE = 16
LAZY_SIZE_STEP = 3
LAZY_BASE_HUE = 200
LAZY_HUE_STEP = 40
LAZY_COLLAPSED_FILL = "#1890ff"

# Two activations of the same node within this many seconds toggle it
DOUBLE_ACTIVATION_WINDOW = 0.3

# Environment overrides
ENV_BATCH_SIZE = "LAZY_RADIAL_BATCH_SIZE"
ENV_SEED = "LAZY_RADIAL_SEED"
