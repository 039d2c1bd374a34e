from typing import Literal

import httpx

from builder_ide.core.ports.generator import CodeGenerator
from builder_ide.llm.gemini import GeminiGenerator
from builder_ide.llm.openai_chat import OpenAIChatGenerator

Provider = Literal["openai", "gemini"]


def provider_for_model(model: str | None) -> Provider:
    return "gemini" if model and model.removeprefix("models/").startswith("gemini") else "openai"


def create_generator(client: httpx.AsyncClient, api_key: str, model: str | None = None) -> CodeGenerator:
    """Pick the provider adapter from the model name."""
    if provider_for_model(model) == "gemini":
        return GeminiGenerator(client, api_key, model or "")
    return OpenAIChatGenerator(client, api_key, model or "")
