# tests/unit/analysis/test_unit_scheduler.py — v1
"""Tests for analysis/scheduler.py: next-capture derivation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from cropwatch.analysis.scheduler import (
    compute_schedule,
    has_critical_issue,
    urgency_for_days,
)
from cropwatch.core.models import NormalizedAnalysis


def _analysis(health=90, issues=None, hint=4, stage="vegetative") -> NormalizedAnalysis:
    return NormalizedAnalysis(
        health_score=health,
        growth_stage=stage,
        issues=issues or [],
        observations="",
        recommendations=[],
        next_photo_days_hint=hint,
        urgency="routine",
    )


class TestScenarios:
    def test_healthy_flowering(self, fixed_now):
        a = _analysis(health=90, issues=[], hint=5, stage="flowering")
        d = compute_schedule(a, "tomato", "flowering", now=fixed_now)
        assert d.next_photo_days == 4
        assert d.urgency == "routine"
        assert d.next_capture_date == fixed_now + timedelta(days=4)

    def test_unhealthy_pest_germination(self, fixed_now):
        a = _analysis(health=60, issues=["pest damage observed"], hint=4, stage="germination")
        d = compute_schedule(a, "tomato", "germination", now=fixed_now)
        assert d.next_photo_days == 3
        assert d.urgency == "important"

    def test_critical_disease_fruiting(self, fixed_now):
        a = _analysis(health=40, issues=["Early blight DISEASE spreading"], hint=6)
        d = compute_schedule(a, "potato", "fruiting", now=fixed_now)
        # 6 -> 5 (health) -> 2 (disease) -> 1 (fruiting)
        assert d.next_photo_days == 1
        assert d.urgency == "critical"

    def test_maturity_clamped_to_seven(self, fixed_now):
        a = _analysis(health=95, hint=7)
        assert compute_schedule(a, "wheat", "maturity", now=fixed_now).next_photo_days == 7

    def test_low_health_floor_is_one(self, fixed_now):
        a = _analysis(health=10, hint=1)
        assert compute_schedule(a, "rice", "vegetative", now=fixed_now).next_photo_days == 1

    def test_health_seventy_not_reduced(self, fixed_now):
        a = _analysis(health=70, hint=5)
        assert compute_schedule(a, "corn", None, now=fixed_now).next_photo_days == 5

    def test_unknown_stage_no_adjustment(self, fixed_now):
        a = _analysis(health=80, hint=5)
        assert compute_schedule(a, "onion", "unknown", now=fixed_now).next_photo_days == 5

    def test_stage_case_insensitive(self, fixed_now):
        a = _analysis(health=80, hint=5)
        assert compute_schedule(a, "onion", "Flowering", now=fixed_now).next_photo_days == 4

    def test_unavailable_record_schedule(self, fixed_now):
        a = _analysis(health=50, issues=["Analysis failed - manual review needed"], hint=3,
                      stage="unknown")
        d = compute_schedule(a, "tomato", "unknown", now=fixed_now)
        assert d.next_photo_days == 2
        assert d.urgency == "critical"


class TestProperties:
    @pytest.mark.parametrize("health", [0, 50, 69, 70, 100])
    @pytest.mark.parametrize("hint", [1, 4, 7])
    @pytest.mark.parametrize("stage", ["germination", "flowering", "maturity", "unknown"])
    def test_days_always_in_range(self, health, hint, stage, fixed_now):
        d = compute_schedule(_analysis(health=health, hint=hint), "tomato", stage, now=fixed_now)
        assert 1 <= d.next_photo_days <= 7

    def test_deterministic(self, fixed_now):
        a = _analysis(health=65, issues=["dying leaves"], hint=6)
        first = compute_schedule(a, "chili", "flowering", now=fixed_now)
        second = compute_schedule(a, "chili", "flowering", now=fixed_now)
        assert first == second

    def test_default_now_is_utc(self):
        d = compute_schedule(_analysis(), "tomato", "vegetative")
        assert d.next_capture_date.tzinfo is not None


class TestHelpers:
    def test_keyword_substring_semantics(self):
        # Substring matching is intentional: "pesticide" counts as "pest".
        assert has_critical_issue(["Pesticide residue on leaves"])
        assert not has_critical_issue(["Mild nitrogen deficiency"])
        assert not has_critical_issue([])

    @pytest.mark.parametrize("days, expected", [
        (1, "critical"), (2, "critical"), (3, "important"), (4, "routine"), (7, "routine"),
    ])
    def test_urgency_for_days(self, days, expected):
        assert urgency_for_days(days) == expected


class TestSerialization:
    def test_json_field_names(self, fixed_now):
        d = compute_schedule(_analysis(), "tomato", "vegetative", now=fixed_now)
        dumped = d.model_dump(mode="json", by_alias=True)
        assert set(dumped) == {"nextPhotoDate", "nextPhotoDays", "urgency"}
