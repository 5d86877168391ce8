"""
Tests for the inventory API endpoints
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from apps.api.main import app
from packages.domain.enrichment.enrichment_service import get_enrichment_service


@pytest.fixture
def api_client(make_service, make_http_client):
    """TestClient with the enrichment service swapped for a mocked one."""
    def handler(request):
        if request.url.path.endswith("facebook/bart-large-mnli"):
            return httpx.Response(200, json={"labels": ["electronics"], "scores": [0.97]})
        if request.url.path.endswith("gpt2"):
            return httpx.Response(200, json=[{"generated_text": "A sturdy oak desk."}])
        return httpx.Response(200, json=[{"generated_text": "ok"}])

    service = make_service(make_http_client(handler))
    app.dependency_overrides[get_enrichment_service] = lambda: service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_enrich_endpoint(api_client):
    response = api_client.post("/api/v1/inventory/enrich", json={
        "rows": [
            {"name": "Wireless Headphones", "availability": "15"},
            {"availability": "0"},
            None,
        ]
    })

    assert response.status_code == 200
    body = response.json()

    assert len(body["items"]) == 3
    first, second, third = body["items"]

    assert first["category"] == "Electronics - Audio"
    assert first["status"] == "low-stock"
    assert first["price"] == 194
    assert first["aiClassified"] is True
    assert first["hsCode"] == "8518.30.00"

    assert second["name"] == "Product 2"
    assert second["status"] == "out-of-stock"

    assert third["aiClassified"] is False
    assert third["aiAnalysis"]["confidence"] == 70

    assert body["summary"] == {
        "totalItems": 3,
        "aiClassified": 2,
        "fallback": 1,
        "inStock": 0,
        "lowStock": 1,
        "outOfStock": 2,
    }


def test_enrich_endpoint_requires_rows(api_client):
    response = api_client.post("/api/v1/inventory/enrich", json={})

    assert response.status_code == 422


def test_classify_text_endpoint(api_client):
    response = api_client.post("/api/v1/inventory/classify-text", json={"text": "noise cancelling headphones"})

    assert response.status_code == 200
    assert response.json() == {"result": {"labels": ["electronics"], "scores": [0.97]}}


def test_describe_endpoint(api_client):
    response = api_client.post("/api/v1/inventory/describe", json={"productName": "Oak Desk"})

    assert response.status_code == 200
    assert response.json() == {"productName": "Oak Desk", "description": "A sturdy oak desk."}


def test_health_endpoint(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_metrics_endpoint(api_client):
    api_client.post("/api/v1/inventory/enrich", json={"rows": [{"name": "Laptop"}]})

    response = api_client.get("/metrics")

    assert response.status_code == 200
    assert "inventory_rows_enriched_total" in response.text
