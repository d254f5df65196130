# src/llm/base_client.py — v2
"""Abstract upstream client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cropwatch.llm.models import AnalysisRequest


class BaseAnalysisClient(ABC):
    """One attempt against an AI provider, with an explicit credential."""

    @abstractmethod
    async def generate(self, request: AnalysisRequest, credential: str) -> str:
        """Perform a single call and return the reply text.

        Raises:
            TransientCallError: On any failure of this attempt.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (e.g. gemini)."""
