from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from src.app.domain.errors import (
    ProcessingError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from src.app.infra.llm.openai_client import OpenAIClient, rejection_message


class RecordingHandler:
    """MockTransport handler that records requests and replays one canned response."""

    def __init__(self, status_code: int = 200, body=None, text: str | None = None, exc: Exception | None = None):
        self.status_code = status_code
        self.body = body
        self.text = text
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.body)


def _client(handler: RecordingHandler, api_key: str | None = "sk-test", organization: str | None = None) -> OpenAIClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIClient(http=http, api_key=api_key, organization=organization)


def _chat(client: OpenAIClient) -> str:
    return asyncio.run(
        client.chat_completion([{"role": "user", "content": "hi"}], max_tokens=1000, temperature=0.7)
    )


class TestRejectionMessage:
    def test_unauthorized_hides_provider_detail(self) -> None:
        assert rejection_message(401, "Incorrect API key") == "Service temporarily unavailable. Please try again."

    def test_rate_limited(self) -> None:
        assert "overloaded" in rejection_message(429, "Rate limit reached")

    def test_bad_request_passes_provider_text(self) -> None:
        assert rejection_message(400, "Invalid image URL") == "Processing error: Invalid image URL"

    def test_other_status_generic_passthrough(self) -> None:
        assert rejection_message(502, "Bad gateway") == "Service error (502): Bad gateway"


class TestChatCompletion:
    def test_returns_first_choice_content(self) -> None:
        handler = RecordingHandler(body={"choices": [{"message": {"content": "hello"}}]})

        assert _chat(_client(handler)) == "hello"

        request = handler.requests[0]
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert "OpenAI-Organization" not in request.headers
        sent = json.loads(request.content)
        assert sent["model"] == "gpt-4o-mini"
        assert sent["max_tokens"] == 1000
        assert sent["temperature"] == 0.7

    def test_organization_header(self) -> None:
        handler = RecordingHandler(body={"choices": [{"message": {"content": "hello"}}]})
        _chat(_client(handler, organization="org-123"))
        assert handler.requests[0].headers["OpenAI-Organization"] == "org-123"

    def test_missing_key_makes_no_call(self) -> None:
        handler = RecordingHandler(body={})
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            _chat(_client(handler, api_key=None))
        assert exc_info.value.status_code == 503
        assert handler.requests == []

    def test_network_error_is_unavailable(self) -> None:
        handler = RecordingHandler(exc=httpx.ConnectError("connection refused"))
        with pytest.raises(UpstreamUnavailableError) as exc_info:
            _chat(_client(handler))
        assert exc_info.value.status_code == 503

    def test_timeout_is_unavailable(self) -> None:
        handler = RecordingHandler(exc=httpx.ReadTimeout("timed out"))
        with pytest.raises(UpstreamUnavailableError):
            _chat(_client(handler))

    @pytest.mark.parametrize("status_code", [400, 401, 429, 500])
    def test_non_2xx_status_is_passed_through(self, status_code: int) -> None:
        handler = RecordingHandler(status_code=status_code, body={"error": {"message": "provider says no"}})
        with pytest.raises(UpstreamRejectedError) as exc_info:
            _chat(_client(handler))
        assert exc_info.value.status_code == status_code
        assert exc_info.value.provider_message == "provider says no"
        assert exc_info.value.message == rejection_message(status_code, "provider says no")

    def test_non_json_error_body_uses_raw_text(self) -> None:
        handler = RecordingHandler(status_code=503, text="upstream down")
        with pytest.raises(UpstreamRejectedError) as exc_info:
            _chat(_client(handler))
        assert exc_info.value.message == "Service error (503): upstream down"

    def test_unparseable_success_body(self) -> None:
        handler = RecordingHandler(status_code=200, text="<html>oops</html>")
        with pytest.raises(ProcessingError):
            _chat(_client(handler))

    def test_empty_choices(self) -> None:
        handler = RecordingHandler(body={"choices": []})
        with pytest.raises(ProcessingError):
            _chat(_client(handler))


class TestGenerateImage:
    def test_returns_url_and_requests_one_square_image(self) -> None:
        handler = RecordingHandler(body={"data": [{"url": "https://img.example/tmp.png"}]})

        url = asyncio.run(_client(handler).generate_image("a dish"))

        assert url == "https://img.example/tmp.png"
        sent = json.loads(handler.requests[0].content)
        assert handler.requests[0].url.path == "/v1/images/generations"
        assert sent["n"] == 1
        assert sent["size"] == "1024x1024"
        assert sent["model"] == "dall-e-3"

    def test_missing_url(self) -> None:
        handler = RecordingHandler(body={"data": [{}]})
        with pytest.raises(ProcessingError):
            asyncio.run(_client(handler).generate_image("a dish"))
