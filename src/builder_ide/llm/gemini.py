"""Google Gemini ``generateContent`` over ``httpx``."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from builder_ide.core.errors import InvalidRequestError, UpstreamError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"
VERIFIABLE_MODELS = frozenset({"gemini-2.5-pro", "gemini-2.5-flash"})


def _model_path(model: str) -> str:
    return model if model.startswith("models/") else f"models/{quote(model, safe='')}"


class GeminiGenerator:
    """Implements the ``CodeGenerator`` protocol."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str = DEFAULT_GEMINI_MODEL,
        api_base: str = GEMINI_API_BASE,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self.model = model or DEFAULT_GEMINI_MODEL
        self._api_base = api_base.rstrip("/")

    async def _generate(self, body: dict[str, Any]) -> httpx.Response:
        url = f"{self._api_base}/{_model_path(self.model)}:generateContent"
        try:
            return await self._client.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Gemini request failed: {exc}") from exc

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 8192,
    ) -> str:
        body: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature, "maxOutputTokens": max_tokens},
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        response = await self._generate(body)
        if response.status_code >= 400:
            logger.warning("Gemini returned %d for model %s", response.status_code, self.model)
            raise UpstreamError(f"Upstream error ({response.status_code})", response.text)

        candidates = response.json().get("candidates") or []
        if not candidates:
            raise UpstreamError("No response from Gemini")
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text:
            raise UpstreamError("No response from Gemini")
        return text

    async def verify(self) -> dict[str, Any]:
        """Spend one output token to check that the key works for this model.

        Returns the provider's JSON body; raises ``UpstreamError`` on rejection.
        """
        if self.model not in VERIFIABLE_MODELS:
            raise InvalidRequestError("Unsupported model")
        body = {
            "contents": [{"role": "user", "parts": [{"text": "ping"}]}],
            "generationConfig": {"maxOutputTokens": 1},
        }
        response = await self._generate(body)
        if response.status_code >= 400:
            raise UpstreamError(f"Upstream error ({response.status_code}): {response.text[:500]}", response.text)
        data: dict[str, Any] = response.json()
        return data
