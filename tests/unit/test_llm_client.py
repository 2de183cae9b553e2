"""Tests for LLM clients with the HTTP layer mocked."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from openinterviewer.core.exceptions import (
    ConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from openinterviewer.llm import client as client_module
from openinterviewer.llm.client import (
    AnthropicClient,
    GeminiClient,
    get_llm_client,
    resolve_provider,
)


def http_response(status_code=200, json_body=None):
    request = httpx.Request("POST", "https://example.test")
    return httpx.Response(status_code, json=json_body or {}, request=request)


def make_gemini():
    return GeminiClient(
        model="gemini-test", temperature=0.7, max_tokens=100, timeout=5, api_key="g-key"
    )


def make_anthropic():
    return AnthropicClient(
        model="claude-test", temperature=0.7, max_tokens=100, timeout=5, api_key="a-key"
    )


@pytest.mark.asyncio
async def test_gemini_request_and_response():
    body = {
        "candidates": [{"content": {"parts": [{"text": '{"message": '}, {"text": '"hi"}'}]}}],
        "usageMetadata": {"promptTokenCount": 12, "candidatesTokenCount": 4},
    }
    post = AsyncMock(return_value=http_response(json_body=body))

    with patch.object(httpx.AsyncClient, "post", post):
        response = await make_gemini().complete("prompt", system="sys", json_mode=True)

    assert response.content == '{"message": "hi"}'
    assert response.usage == {"input_tokens": 12, "output_tokens": 4}

    url = post.call_args.args[0]
    payload = post.call_args.kwargs["json"]
    assert url.endswith("/models/gemini-test:generateContent")
    assert post.call_args.kwargs["params"] == {"key": "g-key"}
    assert payload["systemInstruction"] == {"parts": [{"text": "sys"}]}
    assert payload["generationConfig"]["responseMimeType"] == "application/json"


@pytest.mark.asyncio
async def test_anthropic_request_and_response():
    body = {
        "content": [{"type": "text", "text": "Hello there"}],
        "model": "claude-test",
        "usage": {"input_tokens": 3, "output_tokens": 2},
    }
    post = AsyncMock(return_value=http_response(json_body=body))

    with patch.object(httpx.AsyncClient, "post", post):
        response = await make_anthropic().complete("prompt", system="sys", temperature=0.1)

    assert response.content == "Hello there"
    payload = post.call_args.kwargs["json"]
    headers = post.call_args.kwargs["headers"]
    assert payload["system"] == "sys"
    assert payload["temperature"] == 0.1
    assert headers["x-api-key"] == "a-key"


@pytest.mark.asyncio
async def test_timeout_maps_to_llm_timeout_error():
    post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))

    with patch.object(httpx.AsyncClient, "post", post):
        with pytest.raises(LLMTimeoutError):
            await make_gemini().complete("prompt")

    assert post.await_count == 1


@pytest.mark.asyncio
async def test_rate_limit_maps_to_rate_limit_error():
    post = AsyncMock(return_value=http_response(status_code=429))

    with patch.object(httpx.AsyncClient, "post", post):
        with pytest.raises(LLMRateLimitError):
            await make_anthropic().complete("prompt")


@pytest.mark.asyncio
async def test_server_error_maps_to_llm_error():
    post = AsyncMock(return_value=http_response(status_code=500))

    with patch.object(httpx.AsyncClient, "post", post):
        with pytest.raises(LLMError):
            await make_gemini().complete("prompt")


@pytest.mark.asyncio
async def test_transport_error_maps_to_llm_error():
    post = AsyncMock(side_effect=httpx.ConnectError("refused"))

    with patch.object(httpx.AsyncClient, "post", post):
        with pytest.raises(LLMError):
            await make_gemini().complete("prompt")


def test_provider_resolution_order(monkeypatch):
    monkeypatch.setattr(client_module.settings, "ai_provider", None)
    assert resolve_provider() == "gemini"
    assert resolve_provider("claude") == "claude"

    monkeypatch.setattr(client_module.settings, "ai_provider", "claude")
    assert resolve_provider() == "claude"
    assert resolve_provider("gemini") == "gemini"


def test_factory_uses_model_priority(monkeypatch):
    monkeypatch.setattr(client_module.settings, "ai_provider", None)
    monkeypatch.setattr(client_module.settings, "ai_model", None)
    monkeypatch.setattr(client_module.settings, "gemini_api_key", "g-key")

    client = get_llm_client()
    assert isinstance(client, GeminiClient)
    assert client.model == "gemini-3-pro-preview"

    monkeypatch.setattr(client_module.settings, "ai_model", "gemini-env")
    assert get_llm_client().model == "gemini-env"
    assert get_llm_client(model="gemini-study").model == "gemini-study"


def test_factory_rejects_missing_key_and_unknown_provider(monkeypatch):
    monkeypatch.setattr(client_module.settings, "anthropic_api_key", None)

    with pytest.raises(ConfigurationError):
        get_llm_client(provider="claude")

    with pytest.raises(ConfigurationError):
        get_llm_client(provider="kimi")
