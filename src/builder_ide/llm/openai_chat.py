"""OpenAI-compatible chat completions over ``httpx``."""

from __future__ import annotations

import logging

import httpx

from builder_ide.core.errors import UpstreamError

logger = logging.getLogger(__name__)

OPENAI_API_BASE = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4"


class OpenAIChatGenerator:
    """Implements the ``CodeGenerator`` protocol."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str = DEFAULT_OPENAI_MODEL,
        api_base: str = OPENAI_API_BASE,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self.model = model or DEFAULT_OPENAI_MODEL
        self._api_base = api_base.rstrip("/")

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 2000,
    ) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        headers = {"Authorization": f"Bearer {self._api_key}", "Content-Type": "application/json"}
        try:
            response = await self._client.post(f"{self._api_base}/chat/completions", headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"OpenAI request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("OpenAI returned %d for model %s", response.status_code, self.model)
            raise UpstreamError(f"Upstream error ({response.status_code})", response.text)

        data = response.json()
        choices = data.get("choices") or [{}]
        return (choices[0].get("message") or {}).get("content") or ""
