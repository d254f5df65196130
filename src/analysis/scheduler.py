# src/analysis/scheduler.py — v1
"""Next-capture scheduling from a normalized analysis and crop context."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from cropwatch.core.models import NormalizedAnalysis, ScheduleDecision, ScheduleUrgency

logger = logging.getLogger(__name__)

MIN_DAYS = 1
MAX_DAYS = 7
DEFAULT_DAYS = 4
LOW_HEALTH_THRESHOLD = 70

# Plain substring match: "pest" also hits "pesticide". Kept for parity with
# existing schedules; see DESIGN.md before tightening it.
CRITICAL_ISSUE_KEYWORDS: tuple[str, ...] = ("disease", "pest", "dying")

STAGE_ADJUSTMENTS: dict[str, int] = {
    "germination": 1,
    "flowering": -1,
    "fruiting": -1,
    "maturity": 1,
}


def has_critical_issue(issues: list[str]) -> bool:
    """True if any issue mentions a critical keyword, case-insensitively."""
    return any(
        keyword in issue.lower()
        for issue in issues
        for keyword in CRITICAL_ISSUE_KEYWORDS
    )


def urgency_for_days(days: int) -> ScheduleUrgency:
    if days <= 2:
        return "critical"
    if days <= 3:
        return "important"
    return "routine"


def compute_schedule(
    analysis: NormalizedAnalysis,
    crop_type: str | None,
    growth_stage: str | None,
    now: datetime | None = None,
) -> ScheduleDecision:
    """Derive the next capture decision.

    Steps, in order: start from the analysis hint, shorten by a day for
    health below 70, cap at 2 days for disease/pest/dying issues, apply the
    growth-stage adjustment, clamp to [1, 7], then map days to urgency.

    Args:
        analysis: Normalized analysis of the latest photo.
        crop_type: Crop being tracked (logged only).
        growth_stage: Stage used for the adjustment; unknown stages add 0.
        now: Reference time; defaults to the current UTC time.
    """
    days = analysis.next_photo_days_hint or DEFAULT_DAYS

    if analysis.health_score < LOW_HEALTH_THRESHOLD:
        days = max(MIN_DAYS, days - 1)

    if has_critical_issue(analysis.issues):
        days = min(2, days)

    stage = (growth_stage or "").strip().lower()
    days += STAGE_ADJUSTMENTS.get(stage, 0)

    days = max(MIN_DAYS, min(MAX_DAYS, days))
    urgency = urgency_for_days(days)

    reference = now or datetime.now(timezone.utc)
    logger.debug(
        "Schedule for %s (%s): next photo in %d days, %s",
        crop_type or "unknown crop", stage or "unknown", days, urgency,
    )
    return ScheduleDecision(
        next_capture_date=reference + timedelta(days=days),
        next_photo_days=days,
        urgency=urgency,
    )
