# src/llm/adapters/gemini_adapter.py — v2
"""Google Gemini adapter implementing BaseAnalysisClient.

Talks to the generateContent REST endpoint through httpx so each attempt can
carry its own credential. Photos are sent as an inline JPEG part.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any

import httpx

from cropwatch.llm.base_client import BaseAnalysisClient
from cropwatch.llm.models import AnalysisRequest
from cropwatch.llm.retry import TransientCallError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def build_payload(request: AnalysisRequest) -> dict[str, Any]:
    """Build the generateContent JSON body for `request`."""
    parts: list[dict[str, Any]] = [{"text": request.prompt_text}]
    if request.image_bytes:
        parts.append({
            "inlineData": {
                "mimeType": "image/jpeg",
                "data": base64.b64encode(request.image_bytes).decode("ascii"),
            }
        })
    return {
        "contents": [{"parts": parts}],
        "generationConfig": {
            "temperature": request.temperature,
            "topK": request.top_k,
            "topP": request.top_p,
            "maxOutputTokens": request.max_output_tokens,
        },
    }


def extract_text(envelope: Any) -> str:
    """Pull candidates[0].content.parts[0].text out of a reply envelope.

    Raises:
        TransientCallError: If the envelope does not have that shape.
    """
    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise TransientCallError(f"Malformed Gemini envelope: missing {e}") from e
    if not isinstance(text, str):
        raise TransientCallError("Malformed Gemini envelope: text is not a string")
    return text


class GeminiAdapter(BaseAnalysisClient):
    """Gemini REST adapter."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._http_client = http_client

    def endpoint(self, model_name: str) -> str:
        return f"{self._base_url}/models/{model_name}:generateContent"

    async def generate(self, request: AnalysisRequest, credential: str) -> str:
        url = self.endpoint(request.model_name)
        headers = {"Content-Type": "application/json", "x-goog-api-key": credential}
        payload = build_payload(request)

        t0 = time.monotonic()
        try:
            if self._http_client is not None:
                resp = await self._http_client.post(
                    url, json=payload, headers=headers, timeout=self._timeout_s,
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                    resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise TransientCallError(f"{type(e).__name__}: {e}") from e
        latency = int((time.monotonic() - t0) * 1000)

        if not resp.is_success:
            raise TransientCallError(
                f"Gemini returned HTTP {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )

        try:
            envelope = resp.json()
        except ValueError as e:
            raise TransientCallError("Gemini reply is not JSON") from e

        text = extract_text(envelope)
        logger.debug(
            "Gemini %s replied in %dms (%d chars)", request.model_name, latency, len(text),
        )
        return text

    @property
    def provider_name(self) -> str:
        return "gemini"
