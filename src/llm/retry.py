# src/llm/retry.py — v2
"""Bounded retry with linear backoff for upstream analysis calls.

Every failure is retried the same way; transient and permanent upstream
errors are not told apart.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


class TransientCallError(Exception):
    """A single upstream attempt failed (network, status, or envelope)."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AnalysisFailed(Exception):
    """All attempts exhausted for an upstream analysis call."""

    def __init__(self, attempts: int, last_error: BaseException | None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Upstream analysis failed after {attempts} attempts: {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration: total attempts and linear backoff unit."""

    max_attempts: int = 3
    base_delay_s: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_s < 0:
            raise ValueError("base_delay_s must be >= 0")


def compute_delay(config: RetryConfig, attempt: int) -> float:
    """Delay before 0-based `attempt`: 0 for the first, then attempt * base."""
    return attempt * config.base_delay_s


async def with_retry(
    fn: Callable[[int], Awaitable[Any]],
    config: RetryConfig | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> Any:
    """Call ``fn(attempt)`` until it succeeds or attempts run out.

    `fn` receives the 0-based attempt index. Any Exception counts as a
    failed attempt; cancellation is not caught.

    Raises:
        AnalysisFailed: If all attempts are exhausted.
    """
    config = config or RetryConfig()
    last_error: Exception | None = None

    for attempt in range(config.max_attempts):
        if attempt > 0:
            delay = compute_delay(config, attempt)
            logger.warning(
                "Upstream call failed (attempt %d/%d), retrying in %.1fs: %s",
                attempt, config.max_attempts, delay, last_error,
            )
            await sleep(delay)
        try:
            return await fn(attempt)
        except Exception as e:
            last_error = e

    logger.error(
        "Upstream call failed after %d attempts: %s", config.max_attempts, last_error,
    )
    raise AnalysisFailed(config.max_attempts, last_error) from last_error
