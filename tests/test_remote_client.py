"""
Tests for the Hugging Face inference client
"""
import json

import httpx
import pytest

from packages.domain.enrichment.exceptions import RemoteUnavailableError
from packages.domain.enrichment.remote_client import CANDIDATE_LABELS, HuggingFaceClient


@pytest.mark.asyncio
async def test_analyze_product_posts_prompt(settings, ok_http_client, captured_requests):
    client = HuggingFaceClient(settings=settings, http_client=ok_http_client)

    result = await client.analyze_product("Wireless Headphones", "Over-ear")

    assert result == [{"generated_text": "Looks like consumer electronics."}]
    assert len(captured_requests) == 1

    request = captured_requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://inference.test/models/microsoft/DialoGPT-medium"
    assert request.headers["Authorization"] == "Bearer hf_test_key"

    body = json.loads(request.content)
    assert "Product: Wireless Headphones" in body["inputs"]
    assert "Description: Over-ear" in body["inputs"]
    assert body["parameters"] == {
        "max_length": 200,
        "temperature": 0.7,
        "return_full_text": False,
    }


@pytest.mark.asyncio
async def test_constructor_overrides_settings(settings, ok_http_client, captured_requests):
    client = HuggingFaceClient(
        api_key="hf_other",
        base_url="https://other.test/",
        analysis_model="org/analysis",
        settings=settings,
        http_client=ok_http_client,
    )

    await client.analyze_product("Lamp")

    request = captured_requests[0]
    assert str(request.url) == "https://other.test/models/org/analysis"
    assert request.headers["Authorization"] == "Bearer hf_other"


@pytest.mark.asyncio
async def test_analyze_product_non_2xx_raises(settings, failing_http_client):
    client = HuggingFaceClient(settings=settings, http_client=failing_http_client)

    with pytest.raises(RemoteUnavailableError) as exc_info:
        await client.analyze_product("Lamp")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_analyze_product_transport_error_raises(settings, make_http_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = HuggingFaceClient(settings=settings, http_client=make_http_client(handler))

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")


@pytest.mark.asyncio
async def test_analyze_product_timeout_raises(settings, make_http_client):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    client = HuggingFaceClient(settings=settings, http_client=make_http_client(handler))

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")


@pytest.mark.asyncio
async def test_analyze_product_non_json_body_raises(settings, make_http_client):
    client = HuggingFaceClient(
        settings=settings,
        http_client=make_http_client(lambda request: httpx.Response(200, text="<html>oops</html>")),
    )

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")


@pytest.mark.asyncio
async def test_missing_api_key_skips_network(settings, ok_http_client, captured_requests):
    client = HuggingFaceClient(api_key="", settings=settings, http_client=ok_http_client)

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")

    assert captured_requests == []


@pytest.mark.asyncio
async def test_classify_text_sends_candidate_labels(settings, make_http_client, captured_requests):
    payload = {"labels": ["electronics", "toys"], "scores": [0.9, 0.1]}
    client = HuggingFaceClient(
        settings=settings,
        http_client=make_http_client(lambda request: httpx.Response(200, json=payload)),
    )

    result = await client.classify_text("noise cancelling headphones")

    assert result == payload
    request = captured_requests[0]
    assert str(request.url) == "https://inference.test/models/facebook/bart-large-mnli"
    assert json.loads(request.content)["parameters"]["candidate_labels"] == CANDIDATE_LABELS


@pytest.mark.asyncio
async def test_classify_text_returns_none_on_failure(settings, failing_http_client):
    client = HuggingFaceClient(settings=settings, http_client=failing_http_client)

    assert await client.classify_text("anything") is None


@pytest.mark.asyncio
async def test_generate_description_uses_generated_text(settings, make_http_client, captured_requests):
    client = HuggingFaceClient(
        settings=settings,
        http_client=make_http_client(
            lambda request: httpx.Response(200, json=[{"generated_text": "A sturdy oak desk."}])
        ),
    )

    assert await client.generate_product_description("Oak Desk") == "A sturdy oak desk."

    request = captured_requests[0]
    assert str(request.url) == "https://inference.test/models/gpt2"
    assert json.loads(request.content)["inputs"] == "Product description for Oak Desk:"


@pytest.mark.asyncio
async def test_generate_description_default_on_failure(settings, failing_http_client):
    client = HuggingFaceClient(settings=settings, http_client=failing_http_client)

    description = await client.generate_product_description("Oak Desk")

    assert description == "High-quality Oak Desk for international trade."


@pytest.mark.asyncio
async def test_generate_description_default_on_empty_result(settings, make_http_client):
    client = HuggingFaceClient(
        settings=settings,
        http_client=make_http_client(lambda request: httpx.Response(200, json=[])),
    )

    description = await client.generate_product_description("Oak Desk")

    assert description == "High-quality Oak Desk for international trade."


@pytest.mark.asyncio
async def test_analyze_product_invalid_base_url_raises(settings, ok_http_client, captured_requests):
    client = HuggingFaceClient(
        base_url="https://exa mple\x00.test",
        settings=settings,
        http_client=ok_http_client,
    )

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")

    assert captured_requests == []


@pytest.mark.asyncio
async def test_analyze_product_non_ascii_key_raises(settings, ok_http_client):
    client = HuggingFaceClient(api_key="hf_ключ", settings=settings, http_client=ok_http_client)

    with pytest.raises(RemoteUnavailableError):
        await client.analyze_product("Lamp")


@pytest.mark.asyncio
async def test_analyze_product_unexpected_transport_bug_raises(settings, make_http_client):
    def handler(request):
        raise RuntimeError("unexpected bug in transport")

    client = HuggingFaceClient(settings=settings, http_client=make_http_client(handler))

    with pytest.raises(RemoteUnavailableError) as exc_info:
        await client.analyze_product("Lamp")

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_secondary_calls_degrade_on_unexpected_errors(settings, ok_http_client):
    client = HuggingFaceClient(api_key="hf_ключ", settings=settings, http_client=ok_http_client)

    assert await client.classify_text("Wireless Headphones") is None
    assert await client.generate_product_description("Lamp") == (
        "High-quality Lamp for international trade."
    )
