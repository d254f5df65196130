# src/logging/context.py — v1
"""Contextual logging support: attach crop_id, request_id and step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Set per analysis request; each asyncio task sees its own copy.
_crop_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "crop_id", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    crop_id: str | None = None
    request_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        crop_id=_crop_id.get(),
        request_id=_request_id.get(),
        step=_step.get(),
    )


def set_request_context(request_id: str, crop_id: str | None = None) -> None:
    """Set request-level context (called once per photo analysis)."""
    _request_id.set(request_id)
    _crop_id.set(crop_id)


def set_step_context(step: str | None) -> None:
    """Set the pipeline step currently executing (call, normalize, schedule)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _crop_id.set(None)
    _request_id.set(None)
    _step.set(None)
