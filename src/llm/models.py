# src/llm/models.py — v2
"""Upstream call types: AnalysisRequest and AnalysisOptions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TEMPERATURE = 0.4
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TOP_K = 32
DEFAULT_TOP_P = 1.0

_OPTION_FIELDS = {"maxTokens": "max_tokens"}


class AnalysisOptions(BaseModel):
    """Caller-tunable knobs for one analyze() call.

    Accepts both ``max_tokens`` and the client-facing ``maxTokens`` key.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, alias="maxTokens", gt=0)
    model: str = Field(default=DEFAULT_MODEL, min_length=1)

    @classmethod
    def from_mapping(
        cls, options: Mapping[str, Any] | None, **defaults: Any
    ) -> AnalysisOptions:
        """Build options from a loose mapping, falling back to `defaults`.

        Overrides that fail validation are dropped with a warning and the
        matching default is used instead, so this never raises for bad
        caller input.
        """
        merged: dict[str, Any] = dict(defaults)
        for key, value in (options or {}).items():
            if value is None:
                continue
            merged[_OPTION_FIELDS.get(key, key)] = value
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            rejected = sorted({
                _OPTION_FIELDS.get(str(err["loc"][0]), str(err["loc"][0]))
                for err in e.errors() if err["loc"]
            })
            logger.warning("Ignoring invalid analysis options: %s", ", ".join(rejected))
            for name in rejected:
                if name in defaults:
                    merged[name] = defaults[name]
                else:
                    merged.pop(name, None)
            return cls.model_validate(merged)


class AnalysisRequest(BaseModel):
    """One upstream analysis call. Immutable, discarded after the call."""

    model_config = ConfigDict(frozen=True)

    prompt_text: str
    image_bytes: bytes | None = None
    model_name: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    top_k: int = DEFAULT_TOP_K
    top_p: float = DEFAULT_TOP_P
    max_output_tokens: int = DEFAULT_MAX_TOKENS
