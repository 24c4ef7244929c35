"""Typed configuration for layout, pipeline and chart behaviour."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from ..core.exceptions import ConfigError
from .defaults import (
    DEFAULT_LAYOUT,
    DOUBLE_ACTIVATION_WINDOW,
    ENV_BATCH_SIZE,
    ENV_SEED,
)

# Hosts usually send camelCase option names; map them onto our fields
_CAMEL_ALIASES = {
    "baseDistance": "base_distance",
    "hierarchyStep": "hierarchy_step",
    "baseRadiusMultiplier": "base_radius_multiplier",
    "minArcLengthMultiplier": "min_arc_length_multiplier",
    "maxArcLengthMultiplier": "max_arc_length_multiplier",
    "angleSpread": "angle_spread",
    "randomOffset": "random_offset",
    "batchSize": "batch_size",
    "initialDepth": "initial_depth",
    "doubleActivationWindow": "double_activation_window",
}


def _normalize_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_CAMEL_ALIASES.get(key, key): value for key, value in data.items()}


@dataclass(frozen=True)
class LayoutOptions:
    """Geometric parameters shared by root, eager and lazy placement.

    All fields are optional; defaults come from ``DEFAULT_LAYOUT``.
    ``seed`` makes every random draw reproducible.
    """

    width: float = DEFAULT_LAYOUT["width"]
    height: float = DEFAULT_LAYOUT["height"]
    base_distance: float = DEFAULT_LAYOUT["base_distance"]
    hierarchy_step: float = DEFAULT_LAYOUT["hierarchy_step"]
    base_radius_multiplier: float = DEFAULT_LAYOUT["base_radius_multiplier"]
    min_arc_length_multiplier: float = DEFAULT_LAYOUT["min_arc_length_multiplier"]
    max_arc_length_multiplier: float = DEFAULT_LAYOUT["max_arc_length_multiplier"]
    angle_spread: float = DEFAULT_LAYOUT["angle_spread"]
    random_offset: float = DEFAULT_LAYOUT["random_offset"]
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                "Canvas width and height must be positive",
                {"width": self.width, "height": self.height},
            )
        if self.base_radius_multiplier <= 0:
            raise ConfigError(
                "base_radius_multiplier must be positive",
                {"base_radius_multiplier": self.base_radius_multiplier},
            )
        if self.min_arc_length_multiplier > self.max_arc_length_multiplier:
            raise ConfigError(
                "min_arc_length_multiplier cannot exceed max_arc_length_multiplier",
                {
                    "min": self.min_arc_length_multiplier,
                    "max": self.max_arc_length_multiplier,
                },
            )
        if self.hierarchy_step < 0 or self.angle_spread < 0 or self.random_offset < 0:
            raise ConfigError("Layout steps and spreads cannot be negative")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LayoutOptions:
        """Create options from a dict with camelCase or snake_case keys.

        Unknown keys are ignored (logged at debug level), so a host can pass
        its whole option bag without filtering it first.

        Args:
            data: Option mapping, may be None

        Returns:
            LayoutOptions instance
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        normalized = _normalize_keys(data)
        unknown = set(normalized) - known
        if unknown:
            logger.debug(f"Ignoring unknown layout options: {sorted(unknown)}")

        values = {k: v for k, v in normalized.items() if k in known and v is not None}
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(f"Invalid layout options: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PipelineSettings:
    """Initialization pipeline tuning.

    ``batch_size`` of None means "about ten batches, never under 100 nodes".
    """

    batch_size: int | None = None

    def __post_init__(self) -> None:
        if self.batch_size is not None and self.batch_size <= 0:
            raise ConfigError(
                "batch_size must be positive", {"batch_size": self.batch_size}
            )


@dataclass(frozen=True)
class ChartSettings:
    """Complete chart configuration.

    Attributes:
        layout: Geometric layout options
        pipeline: Initialization pipeline settings
        initial_depth: Levels materialized below the roots after first load
            (0 = roots only)
        lazy: Materialize nodes on demand (True) or the whole dataset (False)
        double_activation_window: Max seconds between two activations that
            count as one expand/collapse gesture
    """

    layout: LayoutOptions = field(default_factory=LayoutOptions)
    pipeline: PipelineSettings = field(default_factory=PipelineSettings)
    initial_depth: int = 0
    lazy: bool = True
    double_activation_window: float = DOUBLE_ACTIVATION_WINDOW

    def __post_init__(self) -> None:
        if self.initial_depth < 0:
            raise ConfigError(
                "initial_depth cannot be negative",
                {"initial_depth": self.initial_depth},
            )

    @classmethod
    def load(cls, path: Path) -> ChartSettings:
        """Load configuration from a YAML file, then apply env overrides.

        Args:
            path: Path to YAML configuration file

        Returns:
            ChartSettings instance (defaults when the file does not exist)
        """
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return cls.from_dict({})

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {path}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChartSettings:
        """Create settings from a dictionary.

        Recognized sections are ``layout`` and ``pipeline``; top-level keys
        ``initial_depth``, ``lazy`` and ``double_activation_window`` are read
        directly. Environment variables win over file values.

        Args:
            data: Configuration dictionary

        Returns:
            ChartSettings instance
        """
        data = _normalize_keys(data)
        layout_data = dict(data.get("layout") or {})
        pipeline_data = _normalize_keys(dict(data.get("pipeline") or {}))

        env_seed = os.environ.get(ENV_SEED)
        if env_seed:
            try:
                layout_data["seed"] = int(env_seed)
                logger.info(f"Layout seed from environment: {env_seed} ({ENV_SEED})")
            except ValueError:
                logger.warning(f"Invalid {ENV_SEED} value: {env_seed}, ignoring")

        env_batch = os.environ.get(ENV_BATCH_SIZE)
        if env_batch:
            try:
                pipeline_data["batch_size"] = int(env_batch)
                logger.info(f"Batch size from environment: {env_batch} ({ENV_BATCH_SIZE})")
            except ValueError:
                logger.warning(f"Invalid {ENV_BATCH_SIZE} value: {env_batch}, ignoring")

        try:
            return cls(
                layout=LayoutOptions.from_dict(layout_data),
                pipeline=PipelineSettings(batch_size=pipeline_data.get("batch_size")),
                initial_depth=int(data.get("initial_depth", 0)),
                lazy=bool(data.get("lazy", True)),
                double_activation_window=float(
                    data.get("double_activation_window", DOUBLE_ACTIVATION_WINDOW)
                ),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid chart settings: {e}") from e
