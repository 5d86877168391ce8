"""
Pytest configuration and fixtures for enrichment tests
"""
from datetime import datetime, timezone
from typing import Any, Callable, List

import httpx
import pytest

from packages.common.config import Settings
from packages.domain.enrichment.enrichment_service import EnrichmentService
from packages.domain.enrichment.heuristic_classifier import HeuristicClassifier
from packages.domain.enrichment.rate_limiter import RemoteCallLimiter
from packages.domain.enrichment.remote_client import HuggingFaceClient

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
FIXED_EPOCH_MS = int(FIXED_NOW.timestamp() * 1000)


@pytest.fixture
def settings():
    """Settings with a fake key and no pause between remote calls."""
    return Settings(
        hf_api_key="hf_test_key",
        hf_base_url="https://inference.test",
        environment="test",
        enrichment_request_delay_seconds=0.0,
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def classifier():
    """Classifier with confidence pinned to 90.0."""
    return HeuristicClassifier(confidence_source=lambda: 0.5)


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def captured_requests():
    return []


@pytest.fixture
def make_http_client(captured_requests):
    """
    Build an httpx.AsyncClient backed by MockTransport.

    handler receives the request and returns an httpx.Response.
    """
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        def _record(request: httpx.Request) -> httpx.Response:
            captured_requests.append(request)
            return handler(request)
        return httpx.AsyncClient(transport=httpx.MockTransport(_record))
    return _make


@pytest.fixture
def ok_http_client(make_http_client):
    """Inference API that always answers 200 with a generated-text payload."""
    return make_http_client(
        lambda request: httpx.Response(200, json=[{"generated_text": "Looks like consumer electronics."}])
    )


@pytest.fixture
def failing_http_client(make_http_client):
    """Inference API that always answers 503."""
    return make_http_client(
        lambda request: httpx.Response(503, json={"error": "Model is currently loading"})
    )


@pytest.fixture
def make_service(settings, classifier, fixed_clock, recording_sleep):
    """Build an EnrichmentService around a given http client."""
    def _make(http_client: httpx.AsyncClient, **overrides: Any) -> EnrichmentService:
        client = overrides.pop("client", None) or HuggingFaceClient(
            settings=settings,
            http_client=http_client,
        )
        limiter = overrides.pop("limiter", None) or RemoteCallLimiter(
            max_concurrency=1,
            min_interval=0.1,
            sleep=recording_sleep,
        )
        return EnrichmentService(
            client=client,
            classifier=classifier,
            limiter=limiter,
            clock=fixed_clock,
            settings=settings,
            **overrides,
        )
    return _make


@pytest.fixture
def fixed_epoch_ms():
    return FIXED_EPOCH_MS
