# src/analysis/normalizer.py — v1
"""Turn an upstream outcome into an always-valid NormalizedAnalysis.

The reply text is searched for the first balanced ``{...}`` object, parsed,
and every field is clamped or defaulted. Unparseable text and failed calls
produce fixed fallback records tagged with the reason, so callers always get
a complete analysis and never an exception.
"""

from __future__ import annotations

import json
import logging
import math
import sys
from typing import Any

from cropwatch.core.models import (
    ANALYSIS_URGENCIES,
    GROWTH_STAGES,
    Degraded,
    NormalizationResult,
    NormalizedAnalysis,
    Parsed,
)

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_SCORE = 50
DEFAULT_NEXT_PHOTO_DAYS = 4
FALLBACK_NEXT_PHOTO_DAYS = 3
DEFAULT_OBSERVATIONS = "No observations available"


def degraded_record(raw_text: str | None) -> NormalizedAnalysis:
    """Record used when the reply text held no parseable object."""
    return NormalizedAnalysis(
        health_score=DEFAULT_HEALTH_SCORE,
        growth_stage="unknown",
        issues=["Unable to parse AI response"],
        observations=raw_text or "Analysis unavailable",
        recommendations=["Manual review needed"],
        next_photo_days_hint=FALLBACK_NEXT_PHOTO_DAYS,
        urgency="important",
    )


def unavailable_record() -> NormalizedAnalysis:
    """Record used when the upstream call failed after all retries."""
    return NormalizedAnalysis(
        health_score=DEFAULT_HEALTH_SCORE,
        growth_stage="unknown",
        issues=["Analysis failed - manual review needed"],
        observations="AI analysis unavailable",
        recommendations=["Upload photo again", "Check image quality"],
        next_photo_days_hint=FALLBACK_NEXT_PHOTO_DAYS,
        urgency="important",
    )


# === EXTRACTION ===


def _balanced_end(text: str, start: int) -> int | None:
    """Index of the brace closing the one at `start`, or None if unbalanced.

    Braces inside JSON string literals are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` substring of `text`, if any."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


# === VALIDATION ===


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            number = float(value)
        except OverflowError:
            number = sys.float_info.max if value > 0 else -sys.float_info.max
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _clamped_int(value: Any, low: int, high: int, default: int) -> int:
    number = _as_number(value)
    if number is None:
        return default
    return max(low, min(high, round(number)))


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def _growth_stage(value: Any) -> str:
    if not isinstance(value, str):
        return "unknown"
    stage = value.strip().lower()
    return stage if stage in GROWTH_STAGES else "unknown"


def _urgency(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in ANALYSIS_URGENCIES:
        return value.strip().lower()
    return "routine"


def validate_fields(data: dict[str, Any]) -> NormalizedAnalysis:
    """Clamp and default every field of a parsed reply object."""
    observations = data.get("observations")
    if not isinstance(observations, str) or not observations.strip():
        observations = DEFAULT_OBSERVATIONS

    return NormalizedAnalysis(
        health_score=_clamped_int(data.get("healthScore"), 0, 100, DEFAULT_HEALTH_SCORE),
        growth_stage=_growth_stage(data.get("growthStage")),
        issues=_string_list(data.get("issues")),
        observations=observations,
        recommendations=_string_list(data.get("recommendations")),
        next_photo_days_hint=_clamped_int(
            data.get("nextPhotoDays"), 1, 7, DEFAULT_NEXT_PHOTO_DAYS,
        ),
        urgency=_urgency(data.get("urgency")),
    )


# === ENTRY POINT ===


def normalize(outcome: str | BaseException | None) -> NormalizationResult:
    """Convert reply text or a call failure into a NormalizationResult.

    Never raises. A failure (AnalysisFailed or any other exception) or a
    missing reply yields the unavailable record.
    """
    if outcome is None or isinstance(outcome, BaseException):
        logger.warning("Upstream analysis unavailable: %s", outcome)
        return Degraded(
            analysis=unavailable_record(),
            reason="call_failed",
            detail=str(outcome) if outcome is not None else None,
        )

    candidate = extract_json_object(outcome)
    if candidate is None:
        logger.warning("No JSON object found in reply (%d chars)", len(outcome))
        return Degraded(analysis=degraded_record(outcome), reason="no_json_object")

    try:
        data = json.loads(candidate)
    except (ValueError, RecursionError) as e:
        logger.warning("Reply JSON could not be parsed: %s", e)
        return Degraded(
            analysis=degraded_record(outcome), reason="invalid_json", detail=str(e),
        )

    if not isinstance(data, dict):
        return Degraded(analysis=degraded_record(outcome), reason="not_an_object")

    return Parsed(analysis=validate_fields(data))


def normalize_analysis(outcome: str | BaseException | None) -> NormalizedAnalysis:
    """Shortcut for ``normalize(outcome).analysis``."""
    return normalize(outcome).analysis
