import json
from typing import Any

import pytest


class FakeHTTPResponse:
    def __init__(self, payload: Any):
        self._body = json.dumps(payload).encode("utf-8")

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeHTTPResponse":
        return self

    def __exit__(self, *exc_info: object) -> bool:
        return False


class FakeUrlopen:
    """Stand-in for urllib.request.urlopen that records every request."""

    def __init__(self) -> None:
        self.requests: list[Any] = []
        self.responses: list[Any] = []

    def queue(self, payload: Any) -> None:
        self.responses.append(payload)

    def __call__(self, req, timeout=None):  # noqa: ANN001
        self.requests.append(req)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return FakeHTTPResponse(response)

    def body(self, index: int = -1) -> dict[str, Any]:
        return json.loads(self.requests[index].data.decode("utf-8"))


@pytest.fixture
def fake_urlopen(monkeypatch) -> FakeUrlopen:
    fake = FakeUrlopen()
    monkeypatch.setattr("backendforge.llm.http.request.urlopen", fake)
    return fake


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for key in [
        "BACKENDFORGE_PROVIDER",
        "BACKENDFORGE_API_KEY",
        "BACKENDFORGE_BASE_URL",
        "BACKENDFORGE_MODEL",
        "BACKENDFORGE_STACK",
        "BACKENDFORGE_RESULT_PATH",
        "BACKENDFORGE_TIMEOUT_SECONDS",
    ]:
        monkeypatch.delenv(key, raising=False)
    yield
