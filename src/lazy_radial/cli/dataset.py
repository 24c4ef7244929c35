"""Dataset and settings loading for the CLI commands."""

from dataclasses import replace
from pathlib import Path
from typing import Any

import orjson

from ..config.settings import ChartSettings
from ..core.exceptions import ValidationError


def read_dataset(path: Path) -> Any:
    """Read a JSON dataset.

    Raises:
        ValidationError: If the file is not valid JSON
    """
    try:
        return orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e}", {"path": str(path)}) from e


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))


def load_settings(
    config: Path | None = None,
    seed: int | None = None,
    width: float | None = None,
    height: float | None = None,
    batch_size: int | None = None,
    initial_depth: int | None = None,
    lazy: bool | None = None,
) -> ChartSettings:
    """Load settings from YAML (or defaults) and apply command-line overrides.

    Command-line values win over the file and the environment.
    """
    settings = ChartSettings.load(config) if config else ChartSettings.from_dict({})

    layout_overrides = {
        key: value
        for key, value in {"seed": seed, "width": width, "height": height}.items()
        if value is not None
    }
    if layout_overrides:
        settings = replace(settings, layout=replace(settings.layout, **layout_overrides))
    if batch_size is not None:
        pipeline = replace(settings.pipeline, batch_size=batch_size)
        settings = replace(settings, pipeline=pipeline)
    if initial_depth is not None:
        settings = replace(settings, initial_depth=initial_depth)
    if lazy is not None:
        settings = replace(settings, lazy=lazy)
    return settings
