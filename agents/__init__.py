"""
Agents

Each pipeline step is an agent that receives its dependencies through
AgentContext:

- MarketClassifier: intake category
- DeterministicParser / ResolutionAgent: data track
- EvidencePlanner / EvidenceGatherer / EvidenceEvaluator: event track
"""

from agents.base import Agent, AgentCapability, AgentStep, BaseAgent
from agents.classifier import MarketClassifier
from agents.context import AgentContext, FrozenClock, RealClock
from agents.deterministic import DeterministicParser, FetcherRegistry, ResolutionAgent
from agents.evidence import EvidenceEvaluator, EvidenceGatherer, EvidencePlanner

__all__ = [
    "Agent",
    "AgentCapability",
    "AgentStep",
    "BaseAgent",
    "AgentContext",
    "FrozenClock",
    "RealClock",
    "MarketClassifier",
    "DeterministicParser",
    "FetcherRegistry",
    "ResolutionAgent",
    "EvidencePlanner",
    "EvidenceGatherer",
    "EvidenceEvaluator",
]
