"""Structured-output adapter for the Gemini generateContent API."""

from __future__ import annotations

from dataclasses import dataclass

from backendforge.llm.base import Completion, LLMError, ResultGenerator
from backendforge.llm.http import post_json
from backendforge.prompts.generation import RESPONSE_SCHEMA, PromptBundle
from backendforge.reconcile.decode import TRUNCATION_FINISH_REASON

DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_FINISH_REASONS = {"MAX_TOKENS": TRUNCATION_FINISH_REASON}


@dataclass(frozen=True)
class GeminiAdapter(ResultGenerator):
    """Generate results with a response schema enforced by the provider."""

    api_key: str
    model: str
    base_url: str = DEFAULT_GEMINI_BASE_URL
    provider_name: str = "google"
    timeout_seconds: int = 60

    def complete(self, prompt: PromptBundle) -> Completion:
        body = {
            "systemInstruction": {"parts": [{"text": prompt.system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt.user_prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

        payload = post_json(
            f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent",
            body,
            headers={"x-goog-api-key": self.api_key},
            provider=self.provider_name,
            timeout_seconds=self.timeout_seconds,
        )
        return self._extract_completion(payload)

    def _extract_completion(self, payload: dict[str, object]) -> Completion:
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            feedback = payload.get("promptFeedback")
            raise LLMError(
                f"Gemini response has no candidates (prompt feedback: {feedback!r})."
            )

        first = candidates[0]
        if not isinstance(first, dict):
            raise LLMError("Gemini response has invalid candidate format.")

        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        texts = [
            part["text"]
            for part in parts or []
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        finish_reason = first.get("finishReason")
        if isinstance(finish_reason, str):
            finish_reason = _FINISH_REASONS.get(finish_reason, finish_reason.lower())
        else:
            finish_reason = None
        return Completion(text="".join(texts), finish_reason=finish_reason)
