"""
LLM Provider Implementations

Adapters for:
- OpenAI and OpenAI-compatible endpoints
- Anthropic (Claude)
- Mock (scripted replies for tests)
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import httpx

from .client import LLMResponse
from .determinism import DecodingPolicy, policy_to_provider_args


PROVIDER_ENV_KEYS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

PROVIDER_DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o",
    "anthropic": "claude-sonnet-4-20250514",
    "mock": "mock-model",
}


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    @abstractmethod
    def model(self) -> str:
        ...

    @abstractmethod
    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
    ) -> LLMResponse:
        """Send a chat completion request and return the reply."""
        ...


class OpenAIProvider(LLMProvider):
    """
    OpenAI chat completions, or any API exposing the same surface via base_url.
    """

    def __init__(
        self,
        model: str = PROVIDER_DEFAULT_MODELS["openai"],
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> None:
        self._model = model
        self._api_key = api_key or os.getenv(PROVIDER_ENV_KEYS["openai"])
        self._base_url = base_url
        self._proxy = proxy
        self._client = None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        if self._client is None:
            from openai import OpenAI

            kwargs: dict[str, Any] = {"api_key": self._api_key}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            if self._proxy:
                kwargs["http_client"] = httpx.Client(proxy=self._proxy)
            self._client = OpenAI(**kwargs)
        return self._client

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
    ) -> LLMResponse:
        kwargs = policy_to_provider_args(policy, "openai")
        kwargs["model"] = self._model
        kwargs["messages"] = messages
        if policy.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = self._get_client().chat.completions.create(**kwargs)
        choice = response.choices[0]
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
            finish_reason=choice.finish_reason or "stop",
        )


class AnthropicProvider(LLMProvider):
    """
    Anthropic Messages API.

    System messages are lifted into the `system` parameter.
    """

    def __init__(
        self,
        model: str = PROVIDER_DEFAULT_MODELS["anthropic"],
        *,
        api_key: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> None:
        self._model = model
        self._api_key = api_key or os.getenv(PROVIDER_ENV_KEYS["anthropic"])
        self._proxy = proxy
        self._client = None

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    def _get_client(self):
        if self._client is None:
            from anthropic import Anthropic

            kwargs: dict[str, Any] = {"api_key": self._api_key}
            if self._proxy:
                kwargs["http_client"] = httpx.Client(proxy=self._proxy)
            self._client = Anthropic(**kwargs)
        return self._client

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
    ) -> LLMResponse:
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat_messages = [m for m in messages if m["role"] != "system"]

        kwargs = policy_to_provider_args(policy, "anthropic")
        kwargs["model"] = self._model
        kwargs["messages"] = chat_messages
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)

        response = self._get_client().messages.create(**kwargs)
        content = "".join(
            block.text for block in response.content if getattr(block, "text", None)
        )
        return LLMResponse(
            content=content,
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.input_tokens if response.usage else 0,
            output_tokens=response.usage.output_tokens if response.usage else 0,
            finish_reason=response.stop_reason or "stop",
        )


class MockProvider(LLMProvider):
    """
    Mock provider for testing.

    Replies come from `response_fn(messages, policy)` if given, otherwise
    from `responses` in sequence (cycling). Every call is recorded.
    """

    def __init__(
        self,
        model: str = PROVIDER_DEFAULT_MODELS["mock"],
        *,
        responses: Optional[list[str]] = None,
        response_fn: Optional[Callable[[list[dict[str, Any]], DecodingPolicy], str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self._model = model
        self._responses = responses or []
        self._response_fn = response_fn
        self._error = error
        self._call_count = 0
        self._calls: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def model(self) -> str:
        return self._model

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self._calls

    def set_responses(self, responses: list[str]) -> None:
        self._responses = responses
        self._call_count = 0

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: DecodingPolicy,
    ) -> LLMResponse:
        self._calls.append({"messages": messages, "policy": policy})
        if self._error is not None:
            raise self._error

        if self._response_fn:
            content = self._response_fn(messages, policy)
        elif self._responses:
            content = self._responses[self._call_count % len(self._responses)]
        else:
            content = "{}"
        self._call_count += 1

        return LLMResponse(
            content=content,
            model=self._model,
            provider=self.name,
            input_tokens=100,
            output_tokens=50,
        )


def create_provider(
    provider_name: str,
    model: Optional[str] = None,
    proxy: Optional[str] = None,
    **kwargs: Any,
) -> LLMProvider:
    """
    Factory function to create an LLM provider.

    Args:
        provider_name: openai, anthropic or mock
        model: Model identifier (defaults per provider)
        proxy: Proxy URL for the provider's HTTP client
        **kwargs: Provider-specific arguments (api_key, base_url, responses...)
    """
    provider_name = provider_name.lower()
    model = model or PROVIDER_DEFAULT_MODELS.get(provider_name)

    if provider_name == "openai":
        return OpenAIProvider(model=model, proxy=proxy, **kwargs)
    if provider_name == "anthropic":
        kwargs.pop("base_url", None)
        return AnthropicProvider(model=model, proxy=proxy, **kwargs)
    if provider_name == "mock":
        kwargs.pop("api_key", None)
        kwargs.pop("base_url", None)
        return MockProvider(model=model, **kwargs)
    raise ValueError(f"Unknown provider: {provider_name}")
