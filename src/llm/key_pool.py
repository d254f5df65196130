# src/llm/key_pool.py — v1
"""Credential pool with batched round-robin rotation.

Each credential serves ``batch_size`` consecutive calls before the pool
advances to the next one, then wraps. With no pool configured the single
legacy credential is returned and rotation is disabled.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cropwatch.config.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPoolState:
    """Point-in-time snapshot of a KeyPool."""

    credentials: tuple[str, ...]
    rotation_counter: int
    batch_size: int


class KeyPool:
    """Owns the credential list and the only shared mutable counter."""

    def __init__(
        self,
        credentials: Iterable[str] = (),
        legacy_credential: str = "",
        batch_size: int = 1,
    ):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._credentials = tuple(c for c in credentials if c)
        self._legacy = legacy_credential
        self._batch_size = batch_size
        self._counter = 0
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> KeyPool:
        pool = cls(
            credentials=settings.gemini_api_keys_list,
            legacy_credential=settings.gemini_api_key,
            batch_size=settings.gemini_key_batch_size,
        )
        if pool.rotating:
            logger.info(
                "Key pool: %d credentials, batch size %d",
                len(pool._credentials), pool._batch_size,
            )
        else:
            logger.info("Key pool empty, using single legacy credential")
        return pool

    @property
    def rotating(self) -> bool:
        """False when falling back to the legacy credential."""
        return bool(self._credentials)

    @property
    def state(self) -> KeyPoolState:
        with self._lock:
            return KeyPoolState(
                credentials=self._credentials,
                rotation_counter=self._counter,
                batch_size=self._batch_size,
            )

    def select_with_slot(self) -> tuple[str, int | None]:
        """Return the credential for the next call and its pool index.

        The index is None in legacy mode. Log the index, never the key.
        """
        if not self._credentials:
            return self._legacy, None
        with self._lock:
            counter = self._counter
            self._counter = counter + 1
        index = (counter // self._batch_size) % len(self._credentials)
        return self._credentials[index], index

    def select(self) -> str:
        """Return the credential for the next call, advancing rotation."""
        credential, _ = self.select_with_slot()
        return credential


def select_credential(pool: KeyPool) -> str:
    """Credential for the next upstream call from `pool`."""
    return pool.select()
