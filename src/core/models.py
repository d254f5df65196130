# src/core/models.py — v1
"""Shared Pydantic domain models for photo analysis and scheduling.

Field names are snake_case in Python; JSON uses the camelCase aliases that
mobile and web clients consume (healthScore, growthStage, nextPhotoDays, ...).
Always serialize with ``by_alias=True``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GrowthStage = Literal[
    "germination", "vegetative", "flowering", "fruiting", "maturity", "unknown"
]
AnalysisUrgency = Literal["routine", "important", "critical", "urgent"]
ScheduleUrgency = Literal["routine", "important", "critical"]
DegradedReason = Literal["no_json_object", "invalid_json", "not_an_object", "call_failed"]

GROWTH_STAGES: frozenset[str] = frozenset(
    ("germination", "vegetative", "flowering", "fruiting", "maturity", "unknown")
)
ANALYSIS_URGENCIES: frozenset[str] = frozenset(("routine", "important", "critical", "urgent"))


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# === ANALYSIS ===


class NormalizedAnalysis(_CamelModel):
    """Validated, always well-formed result of one photo analysis."""

    health_score: int = Field(ge=0, le=100)
    growth_stage: GrowthStage = "unknown"
    issues: list[str] = Field(default_factory=list)
    observations: str = ""
    recommendations: list[str] = Field(default_factory=list)
    # The upstream reply and the stored record both call this nextPhotoDays.
    next_photo_days_hint: int = Field(default=4, ge=1, le=7, alias="nextPhotoDays")
    urgency: AnalysisUrgency = "routine"


class ScheduleDecision(_CamelModel):
    """Computed next-capture date, day offset and urgency."""

    next_capture_date: datetime = Field(alias="nextPhotoDate")
    next_photo_days: int = Field(ge=1, le=7)
    urgency: ScheduleUrgency


# === NORMALIZATION OUTCOME ===


@dataclass(frozen=True)
class Parsed:
    """Upstream text contained a usable JSON object."""

    analysis: NormalizedAnalysis

    @property
    def degraded(self) -> bool:
        return False


@dataclass(frozen=True)
class Degraded:
    """Fallback record plus the reason it had to be synthesized."""

    analysis: NormalizedAnalysis
    reason: DegradedReason
    detail: str | None = None

    @property
    def degraded(self) -> bool:
        return True


NormalizationResult = Union[Parsed, Degraded]
