import json
import time

import httpx
import pytest

from analytics_ai.errors import MalformedResponseError, NetworkError, RemoteAPIError
from analytics_ai.services.gemini_client import DEFAULT_ENDPOINT, GeminiClient


def test_request_shape_and_headers(make_client, captured):
    client = make_client(reply_text="hello")

    assert client.generate("the prompt") == "hello"

    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == DEFAULT_ENDPOINT
    assert request.headers["x-goog-api-key"] == "test-key"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {
        "contents": [{"parts": [{"text": "the prompt"}]}],
        "generationConfig": {"temperature": 0.3, "topP": 0.8, "topK": 40, "maxOutputTokens": 1024},
    }


def test_non_2xx_is_remote_api_error(make_client, captured):
    body = '{"error": {"code": 429, "message": "Resource has been exhausted"}}'
    client = make_client(status=429, body=body)

    with pytest.raises(RemoteAPIError) as exc_info:
        client.generate("p")

    assert exc_info.value.status_code == 429
    assert exc_info.value.body == body
    assert len(captured) == 1  # no retry


def test_timeout_is_network_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = GeminiClient("k", transport=httpx.MockTransport(handler))

    with pytest.raises(NetworkError) as exc_info:
        client.generate("p")

    assert isinstance(exc_info.value.cause, httpx.ReadTimeout)


def test_connect_failure_is_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with GeminiClient("k", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            client.generate("p")


@pytest.mark.parametrize(
    "payload, field",
    [
        ({}, "candidates"),
        ({"candidates": []}, "candidates"),
        ({"candidates": [{}]}, "content"),
        ({"candidates": [{"content": {"parts": []}}]}, "parts"),
        ({"candidates": [{"content": {"parts": [{"text": 7}]}}]}, "text"),
    ],
)
def test_missing_envelope_field(make_client, payload, field):
    raw = json.dumps(payload)
    client = make_client(body=raw)

    with pytest.raises(MalformedResponseError) as exc_info:
        client.generate("p")

    assert exc_info.value.field == field
    assert exc_info.value.body == raw


def test_body_not_json(make_client):
    client = make_client(body="<html>oops</html>")

    with pytest.raises(MalformedResponseError) as exc_info:
        client.generate("p")

    assert exc_info.value.body == "<html>oops</html>"


def test_timeout_is_fifteen_seconds():
    client = GeminiClient("k")
    try:
        assert client._client.timeout.read == 15.0
    finally:
        client.close()


def test_slow_body_hits_total_deadline():
    def drip():
        for _ in range(100):
            time.sleep(0.05)
            yield b" "

    def handler(request):
        return httpx.Response(200, content=drip())

    client = GeminiClient("k", timeout=0.3, transport=httpx.MockTransport(handler))

    started = time.monotonic()
    with pytest.raises(NetworkError) as exc_info:
        client.generate("p")

    assert time.monotonic() - started < 2.0
    assert isinstance(exc_info.value.cause, httpx.TimeoutException)


def test_bad_content_encoding_is_network_error():
    def handler(request):
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

    client = GeminiClient("k", transport=httpx.MockTransport(handler))

    with pytest.raises(NetworkError) as exc_info:
        client.generate("p")

    assert isinstance(exc_info.value.cause, httpx.DecodingError)


def test_invalid_endpoint_is_network_error():
    client = GeminiClient("k", endpoint="https://example.com/\n", transport=httpx.MockTransport(lambda r: None))

    with pytest.raises(NetworkError) as exc_info:
        client.generate("p")

    assert isinstance(exc_info.value.cause, httpx.InvalidURL)
