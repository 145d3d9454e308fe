"""
Market Classifier

Entry gate of the pipeline: decides whether a market follows the
deterministic data track, the evidence track, or is rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from agents.base import AgentCapability, AgentStep, BaseAgent
from core.schemas import Classification, InferenceUnavailable, Market

from .policy import apply_policy, check_well_formed
from .prompts import CLASSIFIER_PROMPT

if TYPE_CHECKING:
    from agents.context import AgentContext


class MarketClassifier(BaseAgent):
    """
    LLM-backed classifier with a code-enforced decision policy.

    Fails only with InferenceUnavailable.
    """

    _name = "MarketClassifier"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}
    _step = AgentStep.CLASSIFY

    def classify(self, ctx: "AgentContext", market: Market) -> Classification:
        gate = check_well_formed(market)
        if gate is not None:
            ctx.info(f"Market {market.market_id} rejected before inference: {gate.reasoning}")
            return gate

        if ctx.llm is None:
            raise InferenceUnavailable("No LLM client configured", step=self._step.value)

        raw = ctx.llm.infer(
            CLASSIFIER_PROMPT,
            market.to_prompt_document(),
            step=self._step.value,
        )

        threshold = 0.60
        if ctx.config is not None:
            threshold = ctx.config.pipeline.low_confidence_threshold

        classification = apply_policy(market, raw, low_confidence_threshold=threshold)
        ctx.info(
            f"Market {market.market_id} classified {classification.category.value} "
            f"({classification.confidence:.0%})"
        )
        return classification
