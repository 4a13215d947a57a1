"""OpenAI-compatible chat completions adapter (DeepSeek, Qwen, Doubao, custom)."""

from __future__ import annotations

from dataclasses import dataclass

from backendforge.llm.base import Completion, LLMError, ResultGenerator
from backendforge.llm.http import post_json
from backendforge.prompts.generation import PromptBundle

JSON_REMINDER = (
    "Always return valid JSON. If the content is long, "
    "make sure the JSON is properly closed first."
)


@dataclass(frozen=True)
class OpenAICompatibleAdapter(ResultGenerator):
    """Generate results through any ``/chat/completions`` endpoint."""

    api_key: str
    model: str
    base_url: str
    provider_name: str = "openai-compatible"
    temperature: float = 0.2
    max_tokens: int = 4096
    timeout_seconds: int = 60

    def complete(self, prompt: PromptBundle) -> Completion:
        body = {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": f"{prompt.system_prompt}\n\n{JSON_REMINDER}",
                },
                {"role": "user", "content": prompt.user_prompt},
            ],
            "temperature": self.temperature,
            "stream": False,
            "max_tokens": self.max_tokens,
        }

        payload = post_json(
            self.base_url.rstrip("/") + "/chat/completions",
            body,
            headers={"Authorization": f"Bearer {self.api_key}"},
            provider=self.provider_name,
            timeout_seconds=self.timeout_seconds,
        )
        return self._extract_completion(payload)

    def _extract_completion(self, payload: dict[str, object]) -> Completion:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise LLMError(f"{self.provider_name} response is missing choices.")

        first = choices[0]
        if not isinstance(first, dict):
            raise LLMError(f"{self.provider_name} response has invalid choice format.")

        message = first.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        finish_reason = first.get("finish_reason")
        return Completion(
            text=content if isinstance(content, str) else "",
            finish_reason=finish_reason if isinstance(finish_reason, str) else None,
        )
