# src/tracking/call_logger.py — v2
"""Upstream attempt logging: records every attempt, successful or not."""

from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

from cropwatch.logging.context import get_context
from cropwatch.tracking.models import AttemptRecord


class CallLogger:
    """Accumulates attempt records; safe to share between concurrent calls."""

    def __init__(self) -> None:
        self._records: list[AttemptRecord] = []
        self._lock = threading.Lock()

    def record(
        self,
        attempt: int,
        provider: str,
        model: str,
        latency_ms: int,
        key_slot: int | None = None,
        error: BaseException | None = None,
    ) -> AttemptRecord:
        """Record one attempt; `error` marks it as failed."""
        record = AttemptRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            request_id=get_context().request_id,
            attempt=attempt,
            key_slot=key_slot,
            provider=provider,
            model=model,
            latency_ms=latency_ms,
            status="failed" if error is not None else "success",
            error=str(error) if error is not None else None,
        )
        with self._lock:
            self._records.append(record)
        return record

    @property
    def records(self) -> list[AttemptRecord]:
        with self._lock:
            return list(self._records)

    @property
    def total_calls(self) -> int:
        return len(self.records)

    @property
    def failed_calls(self) -> int:
        return sum(1 for r in self.records if r.status == "failed")

    def save(self, path: Path) -> None:
        """Save all records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            for record in self.records:
                f.write(json.dumps(record.model_dump(), default=str) + "\n")
