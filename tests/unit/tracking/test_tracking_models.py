# tests/unit/tracking/test_tracking_models.py — v2
"""Tests for tracking/models.py."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from cropwatch.tracking.models import AttemptRecord


class TestAttemptRecord:
    def test_create(self):
        r = AttemptRecord(
            call_id="c1", timestamp=datetime.now(timezone.utc), attempt=1,
            provider="gemini", model="gemini-2.0-flash", latency_ms=300, status="success",
        )
        assert r.key_slot is None
        assert r.error is None

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            AttemptRecord(
                call_id="c1", timestamp=datetime.now(timezone.utc), attempt=1,
                provider="gemini", model="m", latency_ms=1, status="retry",
            )
