"""LLM adapters and factory helpers."""

from backendforge.config import STRUCTURED_FAMILY, ProviderConfig
from backendforge.llm.base import (
    Completion,
    EmptyCompletionError,
    LLMError,
    ProviderConnectionError,
    ProviderHTTPError,
    ResponseFormatError,
    ResultGenerator,
)
from backendforge.llm.gemini_adapter import DEFAULT_GEMINI_BASE_URL, GeminiAdapter
from backendforge.llm.openai_adapter import OpenAICompatibleAdapter


def create_generator(config: ProviderConfig, *, timeout_seconds: int = 60) -> ResultGenerator:
    """Create the adapter matching the configured provider family."""
    if config.family == STRUCTURED_FAMILY:
        return GeminiAdapter(
            api_key=config.api_key,
            model=config.model_name,
            base_url=config.base_url or DEFAULT_GEMINI_BASE_URL,
            provider_name=config.provider,
            timeout_seconds=timeout_seconds,
        )
    if not config.base_url:
        raise LLMError(f"Base URL is required for provider '{config.provider}'.")
    return OpenAICompatibleAdapter(
        api_key=config.api_key,
        model=config.model_name,
        base_url=config.base_url,
        provider_name=config.provider,
        timeout_seconds=timeout_seconds,
    )


__all__ = [
    "Completion",
    "EmptyCompletionError",
    "LLMError",
    "ProviderConnectionError",
    "ProviderHTTPError",
    "ResponseFormatError",
    "ResultGenerator",
    "GeminiAdapter",
    "OpenAICompatibleAdapter",
    "create_generator",
]
