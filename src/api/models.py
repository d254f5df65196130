# src/api/models.py — v2
"""API-level result: GrowthPhotoResult and its client JSON shape."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from cropwatch.core.crops import CropContext
from cropwatch.core.models import DegradedReason, NormalizedAnalysis, ScheduleDecision


class GrowthPhotoResult(BaseModel):
    """Return value of CropAnalysisService.analyze_growth_photo()."""

    analysis: NormalizedAnalysis
    schedule: ScheduleDecision
    crop: CropContext
    degraded_reason: DegradedReason | None = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None

    def to_response(self) -> dict[str, Any]:
        """JSON body expected by mobile and web clients."""
        analysis = self.analysis.model_dump(mode="json", by_alias=True)
        analysis.pop("nextPhotoDays", None)
        return {
            "success": True,
            "analysis": analysis,
            "nextPhoto": {
                "date": self.schedule.next_capture_date.isoformat(),
                "days": self.schedule.next_photo_days,
                "urgency": self.schedule.urgency,
            },
            "cropInfo": self.crop.to_response(),
            "message": "Analysis complete",
        }
