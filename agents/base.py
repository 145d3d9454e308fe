"""
Agent Base Classes

Defines the agent interface shared by every pipeline step.

All agents must:
1. Declare a name, version and capabilities
2. Receive their clients through AgentContext, never build their own
"""

from __future__ import annotations

from abc import ABC
from enum import Enum
from typing import Optional, Protocol, runtime_checkable


class AgentCapability(str, Enum):
    """
    Capabilities that an agent may have.
    """
    LLM = "llm"              # Calls the inference collaborator
    NETWORK = "network"       # Makes HTTP requests
    DETERMINISTIC = "deterministic"  # Same input always gives same output


class AgentStep(str, Enum):
    """
    Pipeline steps, used to tag logs and error details.
    """
    CLASSIFY = "classify"
    PARSE = "parse"
    FETCH = "fetch"
    RESOLVE = "resolve"
    PLAN = "plan"
    GATHER = "gather"
    EVALUATE = "evaluate"


@runtime_checkable
class Agent(Protocol):
    """
    Protocol defining the agent interface.
    """

    @property
    def name(self) -> str:
        ...

    @property
    def version(self) -> str:
        ...

    @property
    def capabilities(self) -> set[AgentCapability]:
        ...


class BaseAgent(ABC):
    """
    Abstract base class for agents.

    Subclasses set `_name`, `_version`, `_capabilities` and `_step`.
    """

    _name: str
    _version: str
    _capabilities: set[AgentCapability]
    _step: AgentStep

    def __init__(
        self,
        *,
        name: Optional[str] = None,
        version: Optional[str] = None,
    ) -> None:
        self._name_override = name
        self._version_override = version

    @property
    def name(self) -> str:
        return self._name_override or getattr(self, "_name", self.__class__.__name__)

    @property
    def version(self) -> str:
        return self._version_override or getattr(self, "_version", "v1")

    @property
    def capabilities(self) -> set[AgentCapability]:
        return getattr(self, "_capabilities", set())

    @property
    def step(self) -> Optional[AgentStep]:
        return getattr(self, "_step", None)

    def has_capability(self, cap: AgentCapability) -> bool:
        return cap in self.capabilities

    @property
    def uses_llm(self) -> bool:
        return AgentCapability.LLM in self.capabilities

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, version={self.version!r})"
