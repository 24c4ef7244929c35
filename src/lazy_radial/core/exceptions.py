"""Typed exception hierarchy for lazy-radial.

Hierarchy
---------
LazyRadialError (base)
├── ValidationError   – malformed or duplicate-id input (aborts initialization)
├── LayoutError       – a node's group cannot be resolved to a known root
├── NotFoundError     – id absent from the catalog, tree state or surface
├── PipelineError     – unexpected failure inside a pipeline stage
└── ConfigError       – invalid layout / pipeline configuration

Every error carries an optional ``context`` dict so callers (and the
progress channel) can report structured details without parsing messages.
"""

from typing import Any


class LazyRadialError(Exception):
    """Base exception for lazy-radial."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Input layer ─────────────────────────────────────────────────────────


class ValidationError(LazyRadialError):
    """Dataset is malformed (missing lists, missing ids, duplicate ids).

    Raised by the data-adapt stage before anything is laid out or rendered.
    """

    pass


# ── Layout layer ────────────────────────────────────────────────────────


class LayoutError(LazyRadialError):
    """A non-root node references a group that does not resolve to a root.

    The whole layout computation is aborted; no partial result is returned.
    """

    pass


# ── Lookup layer ────────────────────────────────────────────────────────


class NotFoundError(LazyRadialError):
    """Operation referenced an id that is not known.

    Non-fatal: the operation is aborted, the rest of the system carries on.
    """

    pass


# ── Pipeline layer ──────────────────────────────────────────────────────


class PipelineError(LazyRadialError):
    """Unexpected failure inside an initialization stage.

    The original exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.stage = stage


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(LazyRadialError):
    """Configuration could not be loaded or failed validation."""

    pass
