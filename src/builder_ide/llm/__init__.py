from builder_ide.llm.factory import Provider, create_generator, provider_for_model
from builder_ide.llm.gemini import DEFAULT_GEMINI_MODEL, VERIFIABLE_MODELS, GeminiGenerator
from builder_ide.llm.openai_chat import DEFAULT_OPENAI_MODEL, OpenAIChatGenerator

__all__ = [
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_OPENAI_MODEL",
    "VERIFIABLE_MODELS",
    "GeminiGenerator",
    "OpenAIChatGenerator",
    "Provider",
    "create_generator",
    "provider_for_model",
]
