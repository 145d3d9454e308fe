"""
LLM Client

Provider-agnostic client for the structured-inference collaborator.
Every agent talks to the model through `infer(task_prompt, document)`,
which returns parsed JSON or raises InferenceUnavailable.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from core.schemas.errors import InferenceUnavailable

from .determinism import DecodingPolicy

if TYPE_CHECKING:
    from .providers import LLMProvider

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ``` or ```json fence, if present."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group(1).strip()
    return text


@dataclass
class LLMResponse:
    """
    Response from an LLM call.
    """
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def as_json(self) -> Optional[Any]:
        """
        Parse content as JSON, tolerating code-fence wrappers.

        Returns None if the content is empty or not JSON.
        """
        text = strip_code_fences(self.content or "")
        if not text:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return None


class LLMClient:
    """
    Provider-agnostic LLM client.

    Usage:
        from core.llm import LLMClient, create_provider

        client = LLMClient(create_provider("anthropic", api_key="..."))
        result = client.infer(CLASSIFIER_PROMPT, market.to_prompt_document())
    """

    def __init__(
        self,
        provider: "LLMProvider",
        *,
        default_policy: Optional[DecodingPolicy] = None,
    ) -> None:
        self.provider = provider
        self.default_policy = default_policy or DecodingPolicy()

    def chat(
        self,
        messages: list[dict[str, Any]],
        *,
        policy: Optional[DecodingPolicy] = None,
        system_prompt: Optional[str] = None,
    ) -> LLMResponse:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            policy: Decoding policy (temperature, etc.)
            system_prompt: Optional system prompt to prepend
        """
        if system_prompt:
            messages = [{"role": "system", "content": system_prompt}] + messages
        return self.provider.chat(messages=messages, policy=policy or self.default_policy)

    def infer(
        self,
        task_prompt: str,
        document: Any,
        *,
        step: str = "inference",
        policy: Optional[DecodingPolicy] = None,
    ) -> dict[str, Any]:
        """
        Run one structured-inference call.

        Args:
            task_prompt: Instructions describing the task and output schema
            document: JSON-serializable input document
            step: Step name used in logs and error details

        Returns:
            Parsed JSON object

        Raises:
            InferenceUnavailable: provider error, empty reply or non-JSON reply
        """
        payload = document if isinstance(document, str) else json.dumps(document, default=str)
        try:
            response = self.chat(
                [{"role": "user", "content": payload}],
                policy=policy,
                system_prompt=task_prompt,
            )
        except InferenceUnavailable:
            raise
        except Exception as e:
            logger.warning("Inference call failed during %s: %s", step, e)
            raise InferenceUnavailable(
                f"Inference provider error during {step}: {e}",
                step=step,
            ) from e

        if not response.content or not response.content.strip():
            raise InferenceUnavailable(f"Empty inference response during {step}", step=step)

        result = response.as_json()
        if not isinstance(result, dict):
            raise InferenceUnavailable(
                f"Non-JSON inference response during {step}: {response.content[:200]}",
                step=step,
            )
        return result
