"""
LLM Client Module

Provider-agnostic access to the structured-inference collaborator:
- OpenAI (and OpenAI-compatible endpoints)
- Anthropic (Claude)
- Mock (tests)
"""

from typing import Any, Optional

from .client import LLMClient, LLMResponse, strip_code_fences
from .determinism import DecodingPolicy, STRICT_POLICY, policy_to_provider_args
from .providers import (
    PROVIDER_DEFAULT_MODELS,
    PROVIDER_ENV_KEYS,
    AnthropicProvider,
    LLMProvider,
    MockProvider,
    OpenAIProvider,
    create_provider,
)


def create_llm_client(
    provider: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    endpoint: Optional[str] = None,
    proxy: Optional[str] = None,
    default_policy: Optional[DecodingPolicy] = None,
    **kwargs: Any,
) -> LLMClient:
    """
    Convenience function to create an LLMClient.

    Example:
        client = create_llm_client("anthropic", api_key="sk-...")
        result = client.infer(task_prompt, {"question": "..."})
    """
    provider_kwargs: dict[str, Any] = {}
    if api_key:
        provider_kwargs["api_key"] = api_key
    if endpoint:
        provider_kwargs["base_url"] = endpoint
    provider_kwargs.update(kwargs)

    llm_provider = create_provider(provider, model=model, proxy=proxy, **provider_kwargs)
    return LLMClient(llm_provider, default_policy=default_policy)


__all__ = [
    "LLMClient",
    "LLMResponse",
    "strip_code_fences",
    "DecodingPolicy",
    "STRICT_POLICY",
    "policy_to_provider_args",
    "LLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "MockProvider",
    "create_provider",
    "create_llm_client",
    "PROVIDER_ENV_KEYS",
    "PROVIDER_DEFAULT_MODELS",
]
