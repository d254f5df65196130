# src/llm/executor.py — v1
"""Run one logical analyze call: credential per attempt, bounded retries."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from cropwatch.llm.retry import RetryConfig, SleepFn, with_retry

if TYPE_CHECKING:
    from cropwatch.llm.base_client import BaseAnalysisClient
    from cropwatch.llm.key_pool import KeyPool
    from cropwatch.llm.models import AnalysisRequest
    from cropwatch.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Execute an AnalysisRequest against the upstream provider."""

    def __init__(
        self,
        client: BaseAnalysisClient,
        key_pool: KeyPool,
        retry_config: RetryConfig | None = None,
        sleep: SleepFn = asyncio.sleep,
        call_logger: CallLogger | None = None,
    ):
        self._client = client
        self._key_pool = key_pool
        self._retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._call_logger = call_logger

    @property
    def key_pool(self) -> KeyPool:
        return self._key_pool

    async def execute(self, request: AnalysisRequest) -> str:
        """Return the upstream reply text.

        A new credential is drawn from the pool before every attempt, so
        retries advance rotation too.

        Raises:
            AnalysisFailed: When every attempt failed; chained from the last error.
        """

        async def _attempt(attempt: int) -> str:
            credential, slot = self._key_pool.select_with_slot()
            logger.debug(
                "Attempt %d/%d via %s key slot %s",
                attempt + 1, self._retry_config.max_attempts,
                self._client.provider_name, "legacy" if slot is None else slot,
            )
            t0 = time.monotonic()
            try:
                text = await self._client.generate(request, credential)
            except Exception as e:
                self._record(attempt, slot, request.model_name, t0, e)
                raise
            self._record(attempt, slot, request.model_name, t0, None)
            return text

        return await with_retry(_attempt, config=self._retry_config, sleep=self._sleep)

    def _record(
        self,
        attempt: int,
        slot: int | None,
        model: str,
        started: float,
        error: BaseException | None,
    ) -> None:
        if self._call_logger is None:
            return
        self._call_logger.record(
            attempt=attempt + 1,
            provider=self._client.provider_name,
            model=model,
            latency_ms=int((time.monotonic() - started) * 1000),
            key_slot=slot,
            error=error,
        )
