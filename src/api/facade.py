# src/api/facade.py — v2
"""Public API facade: the functions route handlers and jobs call.

Usage:
    from cropwatch.api.facade import CropAnalysisService
    service = CropAnalysisService()
    result = await service.analyze_growth_photo(image_bytes, crop)

``normalize``, ``compute_schedule`` and ``select_credential`` are
re-exported here so collaborators have a single import point.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from typing import Any

from cropwatch.analysis.normalizer import normalize
from cropwatch.analysis.prompts import build_growth_prompt
from cropwatch.analysis.scheduler import compute_schedule
from cropwatch.api.models import GrowthPhotoResult
from cropwatch.config.settings import Settings
from cropwatch.core.crops import CropContext
from cropwatch.core.models import Degraded
from cropwatch.llm.adapters.gemini_adapter import GeminiAdapter
from cropwatch.llm.base_client import BaseAnalysisClient
from cropwatch.llm.executor import RequestExecutor
from cropwatch.llm.key_pool import KeyPool, select_credential
from cropwatch.llm.models import AnalysisOptions, AnalysisRequest
from cropwatch.llm.retry import AnalysisFailed, RetryConfig, SleepFn
from cropwatch.logging.context import set_request_context, set_step_context
from cropwatch.tracking.call_logger import CallLogger

__all__ = [
    "CropAnalysisService",
    "compute_schedule",
    "normalize",
    "select_credential",
]

logger = logging.getLogger(__name__)


class CropAnalysisService:
    """Owns the key pool and executor for one process.

    Create once at startup and share it; the rotation counter lives in the
    pool held here.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: BaseAnalysisClient | None = None,
        key_pool: KeyPool | None = None,
        sleep: SleepFn = asyncio.sleep,
        call_logger: CallLogger | None = None,
    ):
        self._settings = settings or Settings()
        self._key_pool = key_pool or KeyPool.from_settings(self._settings)
        self._client = client or GeminiAdapter(
            base_url=self._settings.gemini_base_url,
            timeout_s=self._settings.request_timeout_s,
        )
        self._executor = RequestExecutor(
            client=self._client,
            key_pool=self._key_pool,
            retry_config=RetryConfig(
                max_attempts=self._settings.retry_max_attempts,
                base_delay_s=self._settings.retry_base_delay_s,
            ),
            sleep=sleep,
            call_logger=call_logger,
        )

    @property
    def key_pool(self) -> KeyPool:
        return self._key_pool

    def build_request(
        self,
        prompt_text: str,
        image_bytes: bytes | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> AnalysisRequest:
        """Merge caller options over configured defaults."""
        opts = AnalysisOptions.from_mapping(
            options,
            temperature=self._settings.gemini_temperature,
            max_tokens=self._settings.gemini_max_output_tokens,
            model=self._settings.gemini_model,
        )
        return AnalysisRequest(
            prompt_text=prompt_text,
            image_bytes=image_bytes,
            model_name=opts.model,
            temperature=opts.temperature,
            top_k=self._settings.gemini_top_k,
            top_p=self._settings.gemini_top_p,
            max_output_tokens=opts.max_tokens,
        )

    async def analyze(
        self,
        prompt_text: str,
        image_bytes: bytes | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> str:
        """Call the upstream model and return its raw reply text.

        Args:
            prompt_text: Prompt sent as the first content part.
            image_bytes: Optional JPEG photo.
            options: ``temperature``, ``maxTokens`` and ``model`` overrides.
                Invalid values are ignored in favour of the configured
                defaults.

        Raises:
            AnalysisFailed: If every attempt failed.
        """
        request = self.build_request(prompt_text, image_bytes, options)
        return await self._executor.execute(request)

    async def analyze_growth_photo(
        self,
        image_bytes: bytes,
        crop: CropContext,
        previous_summary: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> GrowthPhotoResult:
        """Analyze a crop photo and schedule the next one.

        Never raises for upstream, parse or option failures: those yield a
        degraded analysis with a short schedule, or fall back to defaults.
        """
        set_request_context(uuid.uuid4().hex[:12], crop.crop_id)
        prompt = build_growth_prompt(
            crop.crop_type, crop.day_number, previous_summary, crop.language,
        )

        set_step_context("call")
        outcome: str | AnalysisFailed
        try:
            outcome = await self.analyze(prompt, image_bytes, options)
        except AnalysisFailed as e:
            outcome = e

        set_step_context("normalize")
        result = normalize(outcome)
        if isinstance(result, Degraded):
            logger.warning("Analysis degraded (%s) for %s", result.reason, crop.crop_type)

        set_step_context("schedule")
        schedule = compute_schedule(
            result.analysis, crop.crop_type, result.analysis.growth_stage,
        )
        set_step_context(None)

        logger.info(
            "Analysis complete: crop=%s, health=%d, stage=%s, next photo in %d days (%s)",
            crop.crop_type, result.analysis.health_score, result.analysis.growth_stage,
            schedule.next_photo_days, schedule.urgency,
        )
        return GrowthPhotoResult(
            analysis=result.analysis,
            schedule=schedule,
            crop=crop,
            degraded_reason=result.reason if isinstance(result, Degraded) else None,
        )
