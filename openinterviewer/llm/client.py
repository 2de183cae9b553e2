"""
LLM provider clients.

Each provider describes how to build its HTTP request and how to read its
response body; LLMClient.complete() does the rest: resolving per-call
overrides, one httpx POST (no retries), mapping transport failures onto
the LLM error hierarchy, and logging latency and token usage.

Supported providers:
- gemini: Google Gemini models via the generateContent REST endpoint (default)
- claude: Anthropic Claude models via the Messages API
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import httpx
import structlog

from openinterviewer.core.config import settings
from openinterviewer.core.exceptions import (
    ConfigurationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

log = structlog.get_logger(__name__)


DEFAULT_PROVIDER = "gemini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2048

# Default model per provider; AI_MODEL or the study config override it
DEFAULT_MODELS = {
    "gemini": "gemini-3-pro-preview",
    "claude": "claude-sonnet-4-5",
}

API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "claude": "ANTHROPIC_API_KEY",
}


@dataclass
class LLMRequest:
    """One provider call, fully resolved."""

    url: str
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, str]] = None


@dataclass
class LLMResponse:
    """Text returned by a provider, with usage and timing."""

    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    latency_ms: float = 0.0
    raw_response: Optional[Dict[str, Any]] = None


class LLMClient(ABC):
    """Single-attempt completion against one provider and model."""

    provider_name: str = ""

    def __init__(
        self,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        api_key: str,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.api_key = api_key

    @abstractmethod
    def build_request(
        self,
        prompt: str,
        system: Optional[str],
        temperature: float,
        max_tokens: int,
        json_mode: bool,
    ) -> LLMRequest:
        ...

    @abstractmethod
    def read_response(self, data: Dict[str, Any]) -> Tuple[str, str, Dict[str, int]]:
        """Return (content, model, usage) from a provider response body."""

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        json_mode: bool = False,
        timeout: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate one completion.

        Args:
            prompt: User message
            system: Optional system prompt
            temperature: Per-call override of the client's temperature
            max_tokens: Per-call override of the client's output limit
            json_mode: Ask for a JSON-only response where the provider supports it
            timeout: Per-call override of the client's timeout in seconds

        Raises:
            LLMTimeoutError: On timeout
            LLMRateLimitError: On HTTP 429
            LLMError: On any other transport or API error
        """
        request = self.build_request(
            prompt,
            system,
            self.temperature if temperature is None else temperature,
            max_tokens or self.max_tokens,
            json_mode,
        )
        timeout = timeout or self.timeout

        started = time.perf_counter()
        data = await self._send(request, timeout)
        latency_ms = (time.perf_counter() - started) * 1000

        content, model, usage = self.read_response(data)
        log.info(
            "llm_call_complete",
            provider=self.provider_name,
            model=model,
            latency_ms=round(latency_ms, 2),
            prompt_chars=len(prompt) + len(system or ""),
            **usage,
        )
        return LLMResponse(
            content=content,
            model=model,
            usage=usage,
            latency_ms=latency_ms,
            raw_response=data,
        )

    async def _send(self, request: LLMRequest, timeout: float) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=timeout) as http:
                response = await http.post(
                    request.url,
                    headers=request.headers,
                    json=request.payload,
                    params=request.params,
                )
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as e:
            log.warning("llm_timeout", provider=self.provider_name, timeout_seconds=timeout)
            raise LLMTimeoutError(f"LLM call timed out (timeout={timeout}s)") from e
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            if code == 429:
                log.warning("llm_rate_limit", provider=self.provider_name)
                raise LLMRateLimitError("Rate limit exceeded") from e
            log.error("llm_http_error", provider=self.provider_name, status_code=code)
            raise LLMError(f"LLM API returned HTTP {code}") from e
        except httpx.HTTPError as e:
            log.error("llm_transport_error", provider=self.provider_name, error=str(e))
            raise LLMError(f"LLM transport error: {e}") from e


class AnthropicClient(LLMClient):
    """Anthropic Messages API.

    There is no request-level JSON switch; prompts ask for JSON and the
    output is parsed tolerantly.
    """

    provider_name = "claude"
    base_url = "https://api.anthropic.com/v1"
    api_version = "2023-06-01"

    def build_request(self, prompt, system, temperature, max_tokens, json_mode):
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            payload["system"] = system
        return LLMRequest(
            url=f"{self.base_url}/messages",
            payload=payload,
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": self.api_version,
                "content-type": "application/json",
            },
        )

    def read_response(self, data):
        text = "".join(
            block.get("text", "")
            for block in data.get("content") or []
            if block.get("type", "text") == "text"
        )
        usage = data.get("usage") or {}
        return (
            text,
            data.get("model", self.model),
            {
                "input_tokens": usage.get("input_tokens", 0),
                "output_tokens": usage.get("output_tokens", 0),
            },
        )


class GeminiClient(LLMClient):
    """Google Gemini models/{model}:generateContent over REST."""

    provider_name = "gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def build_request(self, prompt, system, temperature, max_tokens, json_mode):
        generation_config: Dict[str, Any] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": generation_config,
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}

        return LLMRequest(
            url=f"{self.base_url}/models/{self.model}:generateContent",
            payload=payload,
            headers={"content-type": "application/json"},
            params={"key": self.api_key},
        )

    def read_response(self, data):
        candidates = data.get("candidates") or [{}]
        parts = candidates[0].get("content", {}).get("parts") or []
        usage = data.get("usageMetadata") or {}
        return (
            "".join(part.get("text", "") for part in parts),
            data.get("modelVersion", self.model),
            {
                "input_tokens": usage.get("promptTokenCount", 0),
                "output_tokens": usage.get("candidatesTokenCount", 0),
            },
        )


CLIENT_CLASSES = {
    "gemini": GeminiClient,
    "claude": AnthropicClient,
}


def resolve_provider(study_provider: Optional[str] = None) -> str:
    """Provider priority: study config > AI_PROVIDER setting > gemini."""
    return study_provider or settings.ai_provider or DEFAULT_PROVIDER


def get_llm_client(
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> LLMClient:
    """
    Build a client for the study's provider and model.

    Model priority mirrors provider priority: study > AI_MODEL > provider default.

    Raises:
        ConfigurationError: Unknown provider, or its API key is not set
    """
    provider = resolve_provider(provider)
    client_class = CLIENT_CLASSES.get(provider)
    if client_class is None:
        raise ConfigurationError(
            f"Unknown AI provider '{provider}'. "
            f"Supported providers: {', '.join(CLIENT_CLASSES)}"
        )

    api_key = (
        settings.anthropic_api_key if provider == "claude" else settings.gemini_api_key
    )
    if not api_key:
        raise ConfigurationError(f"{API_KEY_ENV[provider]} not configured. Set it in .env.")

    client = client_class(
        model=model or settings.ai_model or DEFAULT_MODELS[provider],
        temperature=DEFAULT_TEMPERATURE,
        max_tokens=DEFAULT_MAX_TOKENS,
        timeout=settings.llm_timeout,
        api_key=api_key,
    )
    log.debug("llm_client_created", provider=provider, model=client.model)
    return client
