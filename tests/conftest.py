import json
from typing import Callable, List

import httpx
import pytest

from analytics_ai.models.data_models import LogEntry
from analytics_ai.services.gemini_client import GeminiClient

ANALYSIS_JSON = {
    "popular_pages": ["/api/users"],
    "slow_pages": [{"path": "/api/slow", "avg_duration": 2000, "request_count": 1, "error_rate": 100.0}],
    "potential_issues": [{"type": "error", "description": "500s on slow path", "severity": "high", "path": "/api/slow"}],
    "insights": ["slow endpoint fails"],
}

PERFORMANCE_JSON = {
    "slow_endpoints": [{"path": "/api/slow", "avg_duration": 2000, "request_count": 1, "error_rate": 100.0}],
    "performance_patterns": ["one slow endpoint"],
    "resource_issues": [{"type": "cpu", "description": "spikes", "severity": "medium"}],
    "recommendations": ["cache /api/slow"],
}


def gemini_body(text: str) -> dict:
    """Response envelope returned by generateContent"""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def entry() -> Callable[..., LogEntry]:
    def _make(**overrides) -> LogEntry:
        fields = dict(
            timestamp="2024-01-01T00:00:00Z",
            level="info",
            message="ok",
            path="/",
            method="GET",
            duration=10,
            status=200,
        )
        fields.update(overrides)
        return LogEntry(**fields)
    return _make


@pytest.fixture
def scenario_entries(entry) -> List[LogEntry]:
    """Two fast /api/users requests and one failing slow request"""
    return [
        entry(path="/api/users", duration=100),
        entry(path="/api/users", duration=300),
        entry(timestamp="2024-01-01T00:00:05Z", level="error", path="/api/slow", duration=2000, status=500),
    ]


@pytest.fixture
def captured() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(captured) -> Callable[..., GeminiClient]:
    """GeminiClient whose transport answers with a fixed response"""
    def _make(reply_text: str = json.dumps(ANALYSIS_JSON), status: int = 200, body=None) -> GeminiClient:
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            if body is not None:
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=gemini_body(reply_text))
        return GeminiClient("test-key", transport=httpx.MockTransport(handler))
    return _make
