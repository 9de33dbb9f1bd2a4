"""
GeminiClient - Remote analysis client

Sends a prompt to the Gemini generateContent endpoint and returns the
generated text. A single attempt per call; failures are raised, never retried.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

import httpx

from analytics_ai.errors import MalformedResponseError, NetworkError, RemoteAPIError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent"
)
DEFAULT_TIMEOUT = 15.0

GENERATION_CONFIG: Dict[str, Any] = {
    "temperature": 0.3,
    "topP": 0.8,
    "topK": 40,
    "maxOutputTokens": 1024,
}


class GeminiClient:
    """
    Thin wrapper around httpx.Client for the generative-text endpoint.
    The API key is sent in the x-goog-api-key header.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": api_key,
            },
        )

    @staticmethod
    def build_request(prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": dict(GENERATION_CONFIG),
        }

    def generate(self, prompt: str) -> str:
        """
        POST the prompt and return candidates[0].content.parts[0].text.
        Raises NetworkError, RemoteAPIError or MalformedResponseError.
        """
        deadline = time.monotonic() + self.timeout
        try:
            with self._client.stream("POST", self.endpoint, json=self.build_request(prompt)) as resp:
                chunks = []
                # httpx timeouts apply per read; the whole call gets one deadline.
                for chunk in resp.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        raise httpx.TimeoutException(
                            f"response not complete after {self.timeout}s"
                        )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error("Gemini request failed: %s", e)
            raise NetworkError(e) from e

        raw = b"".join(chunks)
        body = raw.decode(resp.encoding or "utf-8", errors="replace")
        if not resp.is_success:
            logger.error("Gemini API error (status %d): %s", resp.status_code, body)
            raise RemoteAPIError(resp.status_code, body)

        try:
            parsed = json.loads(body)
        except ValueError as e:
            raise MalformedResponseError("body", body, reason=f"body is not valid JSON ({e})") from e

        return self.extract_text(parsed, body)

    @staticmethod
    def extract_text(parsed: Any, body: str) -> str:
        """Walk the response envelope, naming the first field that is absent"""
        candidates = parsed.get("candidates") if isinstance(parsed, dict) else None
        if not isinstance(candidates, list) or not candidates:
            raise MalformedResponseError("candidates", body)

        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        if not isinstance(content, dict):
            raise MalformedResponseError("content", body)

        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise MalformedResponseError("parts", body)

        part = parts[0]
        text = part.get("text") if isinstance(part, dict) else None
        if not isinstance(text, str):
            raise MalformedResponseError("text", body)

        return text

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
