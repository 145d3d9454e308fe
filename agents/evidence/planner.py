"""
Evidence Planner

One inference call per EVENT_RESOLVABLE market. Query count is enforced
in code: extras are trimmed, short plans are padded with an
official-source query and a recent-coverage query.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from pydantic import ValidationError

from agents.base import AgentCapability, AgentStep, BaseAgent
from core.schemas import EvidencePlan, InferenceUnavailable, Market

from .prompts import PLANNER_PROMPT

if TYPE_CHECKING:
    from agents.context import AgentContext

MIN_QUERIES = 3
MAX_QUERIES = 5


def normalize_queries(queries: list[Any], market: Market, primary_authority: str = "") -> list[str]:
    """Clean, dedupe (case-insensitive), pad to MIN_QUERIES and trim to MAX_QUERIES."""
    cleaned: list[str] = []
    seen: set[str] = set()

    def add(query: str) -> None:
        text = " ".join(str(query).split())
        if text and text.lower() not in seen:
            seen.add(text.lower())
            cleaned.append(text)

    for query in queries:
        if isinstance(query, str):
            add(query)

    question = market.question.strip().rstrip("?")
    authority = primary_authority.strip()
    padding = [
        f"{authority} official announcement {question}" if authority else f"official announcement {question}",
        f"{question} latest news",
        question,
    ]
    for query in padding:
        if len(cleaned) >= MIN_QUERIES:
            break
        add(query)

    return cleaned[:MAX_QUERIES]


class EvidencePlanner(BaseAgent):
    """Step 2b of the event track: market -> EvidencePlan."""

    _name = "EvidencePlanner"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}
    _step = AgentStep.PLAN

    def plan(self, ctx: "AgentContext", market: Market) -> EvidencePlan:
        if ctx.llm is None:
            raise InferenceUnavailable("No LLM client configured", step=self._step.value)

        raw = ctx.llm.infer(PLANNER_PROMPT, market.to_prompt_document(), step=self._step.value)
        raw = {**raw, "marketId": market.market_id}

        try:
            plan = EvidencePlan.model_validate(raw)
        except ValidationError as e:
            # Keep going with an empty plan; padding still produces queries
            ctx.warning(f"Planner reply for {market.market_id} did not validate: {e.error_count()} errors")
            plan = EvidencePlan(marketId=market.market_id)

        queries = normalize_queries(plan.queries, market, plan.primary_authority)
        plan = plan.model_copy(update={"queries": queries})
        ctx.info(f"Planned {len(queries)} queries for {market.market_id}")
        return plan
