# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides settings without .env, a mock upstream client, a recording sleep
and sample upstream replies. No network access: all I/O is mocked.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from cropwatch.config.settings import Settings
from cropwatch.core.crops import CropContext
from cropwatch.core.models import NormalizedAnalysis
from cropwatch.logging.context import clear_context


# === FIXTURES: Settings / context ===


@pytest.fixture
def settings() -> Settings:
    """Settings with a two-key pool and no .env lookup."""
    return Settings(
        _env_file=None,
        gemini_api_key="legacy-key",
        gemini_api_keys="key-a,key-b",
        gemini_key_batch_size=3,
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 1, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def tomato_crop() -> CropContext:
    return CropContext(crop_type="Tomato", day_number=12, language="en", crop_id="crop_001")


# === FIXTURES: Sample data ===


@pytest.fixture
def healthy_reply_data() -> dict:
    return {
        "growthStage": "flowering",
        "healthScore": 90,
        "issues": [],
        "observations": "Strong stems, first flower clusters opening.",
        "recommendations": ["Keep watering schedule", "Stake main stem"],
        "nextPhotoDays": 5,
        "urgency": "routine",
    }


@pytest.fixture
def healthy_reply(healthy_reply_data: dict) -> str:
    """Upstream reply wrapped in prose and a code fence, as models often do."""
    return (
        "Here is the analysis of your plant:\n```json\n"
        + json.dumps(healthy_reply_data)
        + "\n```\nLet me know if you need anything else."
    )


@pytest.fixture
def sample_analysis() -> NormalizedAnalysis:
    return NormalizedAnalysis(
        health_score=90,
        growth_stage="flowering",
        issues=[],
        observations="Healthy",
        recommendations=[],
        next_photo_days_hint=5,
        urgency="routine",
    )


# === FIXTURES: Mock upstream ===


@pytest.fixture
def mock_client(healthy_reply: str) -> AsyncMock:
    """Mock BaseAnalysisClient returning the healthy reply."""
    client = AsyncMock()
    client.generate = AsyncMock(return_value=healthy_reply)
    client.provider_name = "mock"
    return client


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
