"""
LLM Decoding Policy

Resolution calls run at temperature 0 with JSON output so the same market
classifies and parses the same way across runs.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class DecodingPolicy:
    """
    Decoding controls for one inference call.
    """
    temperature: float = 0.0
    top_p: float = 1.0
    seed: Optional[int] = 42
    max_tokens: int = 2048
    json_mode: bool = True

    def with_temperature(self, temp: float) -> "DecodingPolicy":
        return replace(self, temperature=temp)

    def with_max_tokens(self, tokens: int) -> "DecodingPolicy":
        return replace(self, max_tokens=tokens)


def policy_to_provider_args(policy: DecodingPolicy, provider: str = "openai") -> dict[str, Any]:
    """
    Convert a DecodingPolicy to provider-specific API arguments.

    Anthropic rejects `seed`, so it is only sent to OpenAI-compatible APIs.
    """
    args: dict[str, Any] = {
        "temperature": policy.temperature,
        "max_tokens": policy.max_tokens,
    }
    if provider == "openai":
        args["top_p"] = policy.top_p
        if policy.seed is not None:
            args["seed"] = policy.seed
    return args


STRICT_POLICY = DecodingPolicy()
