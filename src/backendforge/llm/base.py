"""Provider-independent LLM interface for backend generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from backendforge.models.generation import GeneratedResult
from backendforge.prompts.generation import PromptBundle
from backendforge.reconcile.decode import (
    PayloadDecodeError,
    append_truncation_note,
    decode_payload,
)
from backendforge.reconcile.normalize import normalize_result


class LLMError(RuntimeError):
    """Raised when LLM generation fails or returns invalid output."""


class ProviderConnectionError(LLMError):
    """Raised when the provider cannot be reached at all."""


class ProviderHTTPError(LLMError):
    """Raised when the provider answers with a non-success HTTP status."""

    def __init__(self, provider: str, status: int, body: str) -> None:
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(f"{provider} API error (HTTP {status}): {body}")


class EmptyCompletionError(LLMError):
    """Raised when the provider succeeded but returned no usable text."""


class ResponseFormatError(LLMError):
    """Raised when the returned text cannot be decoded into a result."""


@dataclass(frozen=True)
class Completion:
    """Raw model text plus the provider's stop reason."""

    text: str
    finish_reason: str | None = None


class ResultGenerator(ABC):
    """Abstract LLM adapter interface.

    Subclasses only perform the network exchange in ``complete``; decoding,
    truncation repair and schema normalization are shared by ``generate``.
    """

    provider_name: str = "llm"

    @abstractmethod
    def complete(self, prompt: PromptBundle) -> Completion:
        """Send the prompt and return the raw completion text."""

    def generate(self, prompt: PromptBundle) -> GeneratedResult:
        """Generate a normalized (not yet merged) result for a prompt bundle."""
        completion = self.complete(prompt)
        if not completion.text.strip():
            raise EmptyCompletionError(f"{self.provider_name} returned empty content.")

        try:
            decoded = decode_payload(
                completion.text, finish_reason=completion.finish_reason
            )
        except PayloadDecodeError as exc:
            raise ResponseFormatError(str(exc)) from exc

        result = normalize_result(decoded.payload)
        if decoded.repaired:
            result = result.model_copy(
                update={"chat_response": append_truncation_note(result.chat_response)}
            )
        return result
