import http.client
import io
import json
from urllib import error

import pytest

from backendforge.config import ProviderConfig
from backendforge.llm import (
    EmptyCompletionError,
    GeminiAdapter,
    LLMError,
    OpenAICompatibleAdapter,
    ProviderConnectionError,
    ProviderHTTPError,
    ResponseFormatError,
    create_generator,
)
from backendforge.models.stack import get_stack_preset
from backendforge.prompts.generation import RESPONSE_SCHEMA, build_generation_prompt
from backendforge.reconcile.decode import TRUNCATION_NOTE

RESULT = {
    "chatResponse": "Created a user table.",
    "explanation": "Users.",
    "projectSetupGuide": "npm install",
    "apiDoc": "GET /users",
    "schema": [{"name": "User", "fields": [{"name": "id", "attributes": ["@id"]}]}],
    "snippets": [{"title": "UserController", "language": "javascript", "code": "x"}],
}


def _prompt():
    return build_generation_prompt("Build a user module", get_stack_preset("node-lite"))


def _chat_payload(content: str | None, finish_reason: str = "stop") -> dict:
    return {"choices": [{"message": {"content": content}, "finish_reason": finish_reason}]}


def _openai_adapter() -> OpenAICompatibleAdapter:
    return OpenAICompatibleAdapter(
        api_key="sk-test",
        model="deepseek-chat",
        base_url="https://api.deepseek.com/",
        provider_name="deepseek",
    )


def test_openai_adapter_builds_request_and_normalizes(fake_urlopen) -> None:
    fake_urlopen.queue(_chat_payload(json.dumps(RESULT)))

    result = _openai_adapter().generate(_prompt())

    req = fake_urlopen.requests[0]
    assert req.full_url == "https://api.deepseek.com/chat/completions"
    assert req.get_method() == "POST"
    assert req.get_header("Authorization") == "Bearer sk-test"
    body = fake_urlopen.body()
    assert body["model"] == "deepseek-chat"
    assert body["stream"] is False
    assert body["temperature"] == 0.2
    assert body["max_tokens"] == 4096
    assert [message["role"] for message in body["messages"]] == ["system", "user"]
    assert "valid JSON" in body["messages"][0]["content"]

    assert result.tables[0].table_name == "User"
    assert result.tables[0].columns[0].is_primary is True
    assert result.chat_response == "Created a user table."


def test_openai_adapter_repairs_length_truncation(fake_urlopen) -> None:
    truncated = '```json\n{"chatResponse": "Partial", "schema": [], "snippets": [{"title": "A", "code": "let x'
    fake_urlopen.queue(_chat_payload(truncated, finish_reason="length"))

    result = _openai_adapter().generate(_prompt())

    assert result.snippets[0].code == "let x"
    assert result.chat_response == f"Partial\n\n{TRUNCATION_NOTE}"


def test_openai_adapter_unrecoverable_json(fake_urlopen) -> None:
    fake_urlopen.queue(_chat_payload('{"schema": [], "snippets": [], "apiDoc": oops'))

    with pytest.raises(ResponseFormatError, match="Raw tail"):
        _openai_adapter().generate(_prompt())


@pytest.mark.parametrize("content", [None, "", "   "])
def test_openai_adapter_empty_content(fake_urlopen, content) -> None:
    fake_urlopen.queue(_chat_payload(content))

    with pytest.raises(EmptyCompletionError, match="deepseek"):
        _openai_adapter().generate(_prompt())


def test_openai_adapter_missing_choices(fake_urlopen) -> None:
    fake_urlopen.queue({"choices": []})

    with pytest.raises(LLMError, match="missing choices"):
        _openai_adapter().generate(_prompt())


def test_http_error_carries_status_and_body(fake_urlopen) -> None:
    fake_urlopen.queue(
        error.HTTPError(
            "https://api.deepseek.com/chat/completions",
            401,
            "Unauthorized",
            hdrs=None,
            fp=io.BytesIO(b'{"error": "invalid api key"}'),
        )
    )

    with pytest.raises(ProviderHTTPError) as excinfo:
        _openai_adapter().generate(_prompt())

    assert excinfo.value.status == 401
    assert "invalid api key" in excinfo.value.body
    assert "HTTP 401" in str(excinfo.value)


def test_transport_error_names_provider(fake_urlopen) -> None:
    fake_urlopen.queue(error.URLError("connection refused"))

    with pytest.raises(ProviderConnectionError, match="deepseek"):
        _openai_adapter().generate(_prompt())


class _FailingBodyResponse:
    def __init__(self, failure: Exception | None = None, body: bytes = b""):
        self.failure = failure
        self.body = body

    def read(self) -> bytes:
        if self.failure is not None:
            raise self.failure
        return self.body

    def __enter__(self) -> "_FailingBodyResponse":
        return self

    def __exit__(self, *exc_info: object) -> bool:
        return False


@pytest.mark.parametrize(
    "failure",
    [ConnectionResetError("reset by peer"), http.client.IncompleteRead(b'{"choi', 120)],
)
def test_body_read_failure_is_connection_error(monkeypatch, failure) -> None:
    monkeypatch.setattr(
        "backendforge.llm.http.request.urlopen",
        lambda req, timeout=None: _FailingBodyResponse(failure),
    )

    with pytest.raises(ProviderConnectionError, match="deepseek"):
        _openai_adapter().generate(_prompt())


def test_undecodable_body_is_llm_error(monkeypatch) -> None:
    monkeypatch.setattr(
        "backendforge.llm.http.request.urlopen",
        lambda req, timeout=None: _FailingBodyResponse(body=b"\xff\xfe{"),
    )

    with pytest.raises(LLMError, match="not valid UTF-8"):
        _openai_adapter().generate(_prompt())


def test_gemini_adapter_sends_response_schema(fake_urlopen) -> None:
    text = json.dumps(RESULT)
    fake_urlopen.queue(
        {
            "candidates": [
                {
                    "content": {"parts": [{"text": text[:20]}, {"text": text[20:]}]},
                    "finishReason": "STOP",
                }
            ]
        }
    )
    adapter = GeminiAdapter(api_key="g-key", model="gemini-2.5-flash")

    result = adapter.generate(_prompt())

    req = fake_urlopen.requests[0]
    assert req.full_url == (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.5-flash:generateContent"
    )
    assert req.get_header("X-goog-api-key") == "g-key"
    body = fake_urlopen.body()
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["responseSchema"] == RESPONSE_SCHEMA
    assert body["contents"][0]["role"] == "user"
    assert result.snippets[0].title == "UserController"


def test_gemini_adapter_maps_max_tokens_to_truncation(fake_urlopen) -> None:
    fake_urlopen.queue(
        {
            "candidates": [
                {
                    "content": {"parts": [{"text": '{"schema": [], "snippets": ['}]},
                    "finishReason": "MAX_TOKENS",
                }
            ]
        }
    )
    adapter = GeminiAdapter(api_key="g-key", model="gemini-2.5-flash")

    completion = adapter.complete(_prompt())

    assert completion.finish_reason == "length"


def test_gemini_adapter_without_candidates(fake_urlopen) -> None:
    fake_urlopen.queue({"promptFeedback": {"blockReason": "SAFETY"}})
    adapter = GeminiAdapter(api_key="g-key", model="gemini-2.5-flash")

    with pytest.raises(LLMError, match="no candidates"):
        adapter.generate(_prompt())


def test_create_generator_dispatches_by_family() -> None:
    google = create_generator(ProviderConfig.from_preset("google", api_key="k"))
    qwen = create_generator(ProviderConfig.from_preset("qwen", api_key="k"), timeout_seconds=5)

    assert isinstance(google, GeminiAdapter)
    assert google.model == "gemini-2.5-flash"
    assert isinstance(qwen, OpenAICompatibleAdapter)
    assert qwen.base_url == "https://dashscope.aliyuncs.com/compatible-mode/v1"
    assert qwen.provider_name == "qwen"
    assert qwen.timeout_seconds == 5


def test_create_generator_requires_base_url_for_custom() -> None:
    with pytest.raises(LLMError, match="Base URL"):
        create_generator(ProviderConfig.from_preset("custom", api_key="k", model_name="m"))
