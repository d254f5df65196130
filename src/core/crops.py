# src/core/crops.py — v1
"""Supported crop catalogue and per-request crop context."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field, field_validator

SUPPORTED_CROPS: tuple[str, ...] = (
    "tomato", "chili", "onion", "potato", "wheat", "rice", "corn", "lettuce",
)

# Rough days from planting to harvest.
HARVEST_DAYS: dict[str, int] = {
    "tomato": 75,
    "chili": 90,
    "onion": 120,
    "potato": 90,
    "wheat": 120,
    "rice": 120,
    "corn": 100,
    "lettuce": 45,
}
DEFAULT_HARVEST_DAYS = 90

Language = Literal["en", "hi", "mr"]


class UnsupportedCropError(ValueError):
    """Raised when a crop type is not in SUPPORTED_CROPS."""

    def __init__(self, crop_type: str):
        self.crop_type = crop_type
        super().__init__(
            f"Invalid cropType: {crop_type!r}. "
            f"Valid types: {', '.join(SUPPORTED_CROPS)}"
        )


def normalize_crop_type(crop_type: str) -> str:
    """Lower-case and validate a crop type.

    Raises:
        UnsupportedCropError: If the crop is not supported.
    """
    value = crop_type.strip().lower()
    if value not in SUPPORTED_CROPS:
        raise UnsupportedCropError(crop_type)
    return value


def estimate_harvest_date(crop_type: str, planting_date: date | datetime) -> date | datetime:
    """Planting date plus the crop's typical days to harvest (90 if unknown)."""
    days = HARVEST_DAYS.get(crop_type.lower(), DEFAULT_HARVEST_DAYS)
    return planting_date + timedelta(days=days)


class CropContext(BaseModel):
    """Crop information supplied with a photo."""

    crop_type: str
    day_number: int = Field(default=1, ge=1)
    language: Language = "en"
    crop_id: str | None = None

    @field_validator("crop_type")
    @classmethod
    def validate_crop_type(cls, v: str) -> str:  # noqa: N805
        return normalize_crop_type(v)

    def to_response(self) -> dict[str, object]:
        """cropInfo block of the client response."""
        return {
            "cropType": self.crop_type,
            "dayNumber": self.day_number,
            "language": self.language,
        }
