from __future__ import annotations

from typing import Any

import pytest
import requests

from infrastructure.ai.completion_client import CompletionClient, parse_json_reply
from shared.errors import ConfigurationError, ExternalAPIError, NetworkError, TimeoutError


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response: FakeResponse | Exception) -> None:
        self.response = response
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client(session: FakeSession, api_key: str | None = "sk-test") -> CompletionClient:
    return CompletionClient(
        api_key=api_key,
        base_url="https://llm.example/v1/",
        model="test-model",
        timeout=7,
        session=session,  # type: ignore[arg-type]
    )


def _reply(content: Any) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_complete_posts_chat_payload_and_returns_first_choice() -> None:
    session = FakeSession(FakeResponse(payload=_reply("  hola  ")))
    client = _client(session)

    text = client.complete([{"role": "user", "content": "hi"}], temperature=0.2, max_tokens=50)

    assert text == "hola"
    sent = session.requests[0]
    assert sent["url"] == "https://llm.example/v1/chat/completions"
    assert sent["headers"] == {"Authorization": "Bearer sk-test"}
    assert sent["timeout"] == 7.0
    assert sent["json"] == {
        "model": "test-model",
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.2,
        "max_tokens": 50,
    }


def test_per_call_timeout_overrides_default() -> None:
    session = FakeSession(FakeResponse(payload=_reply("ok")))

    _client(session).complete([{"role": "user", "content": "hi"}], timeout=2)

    assert session.requests[0]["timeout"] == 2.0


def test_missing_api_key_raises_configuration_error() -> None:
    session = FakeSession(FakeResponse(payload=_reply("ok")))
    client = _client(session, api_key="")

    assert client.configured is False
    with pytest.raises(ConfigurationError):
        client.complete([{"role": "user", "content": "hi"}])
    assert session.requests == []


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (requests.Timeout("slow"), TimeoutError),
        (requests.ConnectionError("down"), NetworkError),
    ],
)
def test_transport_errors_are_mapped(error: Exception, expected: type[Exception]) -> None:
    with pytest.raises(expected):
        _client(FakeSession(error)).complete([{"role": "user", "content": "hi"}])


def test_http_error_includes_provider_message() -> None:
    response = FakeResponse(401, payload={"error": {"message": "Invalid API key"}})

    with pytest.raises(ExternalAPIError, match="401: Invalid API key"):
        _client(FakeSession(response)).complete([{"role": "user", "content": "hi"}])


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, payload=None, text="<html>"),
        FakeResponse(200, payload={"choices": []}),
        FakeResponse(200, payload=_reply("   ")),
        FakeResponse(200, payload=_reply(None)),
    ],
)
def test_unusable_replies_raise_external_api_error(response: FakeResponse) -> None:
    with pytest.raises(ExternalAPIError):
        _client(FakeSession(response)).complete([{"role": "user", "content": "hi"}])


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"a": 1}', {"a": 1}),
        ('```json\n{"a": 1}\n```', {"a": 1}),
        ('Aquí está el análisis:\n{"a": {"b": 2}}\nSaludos', {"a": {"b": 2}}),
        ("42", 42),
    ],
)
def test_parse_json_reply(text: str, expected: Any) -> None:
    assert parse_json_reply(text) == expected


@pytest.mark.parametrize("text", ["", None, "sin json", "{roto"])
def test_parse_json_reply_rejects_non_json(text: str | None) -> None:
    with pytest.raises(ValueError):
        parse_json_reply(text)
