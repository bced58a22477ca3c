"""LLM provider abstraction used by the category judges and word suggesters."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger("llm")


@dataclass
class LLMResponse:
    """Response from an LLM call."""
    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float
    raw_response: dict[str, Any] | None = None


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    model: str

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 256,
        response_format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Generate a completion from the LLM."""
        pass


class ChatCompletionsProvider(LLMProvider):
    """Provider for any OpenAI-compatible /chat/completions endpoint.

    Rate limits (429), server errors (5xx) and dropped connections are retried
    with exponential backoff: 1s, 2s, 4s, ... up to ``max_retries`` attempts.
    Any other non-200 response fails immediately.
    """

    provider_name = "chat-completions"
    api_key_env = ""

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        base_url: str = "",
        timeout: float = 60.0,
        max_retries: int = 3,
    ):
        self.model = model
        self.api_key = api_key or os.environ.get(self.api_key_env)
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries

        if not self.api_key:
            raise ValueError(
                f"{self.provider_name} API key required. Set {self.api_key_env} "
                "environment variable or pass api_key parameter."
            )

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 256,
        response_format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Generate a completion with retry logic."""
        start_time = time.perf_counter()
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            payload["response_format"] = response_format

        data: dict[str, Any] | None = None
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        f"{self.base_url}/chat/completions",
                        headers=self._headers(),
                        json=payload,
                        timeout=self.timeout,
                    )
            except (httpx.RemoteProtocolError, httpx.ReadError, httpx.ConnectError, httpx.TimeoutException) as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    wait_time = 2 ** attempt
                    logger.warning(f"Network error ({type(e).__name__}), retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries}): {e}")
                    await asyncio.sleep(wait_time)
                    continue
                raise RuntimeError(f"Network error after {self.max_retries} attempts: {e}") from e

            if response.status_code == 200:
                data = response.json()
                break

            try:
                error_msg = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                error_msg = response.text

            last_error = RuntimeError(f"{self.provider_name} API error ({response.status_code}): {error_msg}")
            retryable = response.status_code >= 500 or response.status_code == 429
            if retryable and attempt < self.max_retries - 1:
                wait_time = 2 ** attempt
                logger.warning(f"API error {response.status_code}, retrying in {wait_time}s (attempt {attempt + 1}/{self.max_retries})")
                await asyncio.sleep(wait_time)
                continue
            raise last_error

        if data is None:
            raise RuntimeError(f"Failed after {self.max_retries} attempts") from last_error

        latency_ms = (time.perf_counter() - start_time) * 1000

        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        usage = data.get("usage", {})

        return LLMResponse(
            content=content.strip(),
            model=self.model,
            input_tokens=usage.get("prompt_tokens", 0),
            output_tokens=usage.get("completion_tokens", 0),
            latency_ms=latency_ms,
            raw_response=data,
        )


class OpenAIProvider(ChatCompletionsProvider):
    """LLM provider using the OpenAI API."""

    provider_name = "OpenAI"
    api_key_env = "OPENAI_API_KEY"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        **kwargs: Any,
    ):
        super().__init__(model=model, api_key=api_key, base_url=base_url, **kwargs)


class OpenRouterProvider(ChatCompletionsProvider):
    """LLM provider using the OpenRouter API."""

    provider_name = "OpenRouter"
    api_key_env = "OPENROUTER_API_KEY"

    def __init__(
        self,
        model: str = "openai/gpt-4o-mini",
        api_key: str | None = None,
        base_url: str = "https://openrouter.ai/api/v1",
        **kwargs: Any,
    ):
        super().__init__(model=model, api_key=api_key, base_url=base_url, **kwargs)


class MockProvider(LLMProvider):
    """Mock LLM provider for testing."""

    def __init__(
        self,
        responses: list[str] | None = None,
        model: str = "mock-model",
        error: Exception | None = None,
    ):
        self.responses = responses or ["Mock response"]
        self.model = model
        self.error = error
        self.call_count = 0
        self.last_messages: list[dict[str, str]] = []

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 256,
        response_format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Return the next canned response, or raise the configured error."""
        self.last_messages = messages
        self.call_count += 1
        if self.error is not None:
            raise self.error

        content = self.responses[(self.call_count - 1) % len(self.responses)]

        return LLMResponse(
            content=content,
            model=self.model,
            input_tokens=len(str(messages)) // 4,
            output_tokens=len(content) // 4,
            latency_ms=10.0,
            raw_response=None,
        )


def create_provider(
    provider_type: str = "openai",
    model: str | None = None,
    api_key: str | None = None,
    **kwargs,
) -> LLMProvider:
    """Factory function to create LLM providers."""
    providers = {
        "openai": OpenAIProvider,
        "openrouter": OpenRouterProvider,
        "mock": MockProvider,
    }

    if provider_type not in providers:
        raise ValueError(f"Unknown provider: {provider_type}. Options: {list(providers.keys())}")

    provider_cls = providers[provider_type]

    provider_kwargs: dict[str, Any] = {}
    if model:
        provider_kwargs["model"] = model
    if api_key and provider_type != "mock":
        provider_kwargs["api_key"] = api_key
    provider_kwargs.update(kwargs)

    return provider_cls(**provider_kwargs)
