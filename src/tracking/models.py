# src/tracking/models.py — v2
"""Tracking models: one record per upstream attempt."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class AttemptRecord(BaseModel):
    """Single upstream attempt. Holds the pool slot, never the credential."""

    call_id: str
    timestamp: datetime
    request_id: str | None = None
    attempt: int
    key_slot: int | None = None
    provider: str
    model: str
    latency_ms: int
    status: Literal["success", "failed"]
    error: str | None = None
