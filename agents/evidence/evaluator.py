"""
Evidence Evaluator

One inference call over the gathered corpus, then the code-side policy
in policy.py. An empty corpus short-circuits to UNDETERMINED.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from pydantic import ValidationError

from agents.base import AgentCapability, AgentStep, BaseAgent
from core.schemas import (
    EvidenceCorpus,
    InferenceUnavailable,
    Market,
    Outcome,
    SourceAssessment,
    Verdict,
)

from .policy import FLAG_NO_EVIDENCE, apply_evidence_policy
from .prompts import EVALUATOR_PROMPT

if TYPE_CHECKING:
    from agents.context import AgentContext


def _clamp(value: Any) -> float:
    try:
        return min(1.0, max(0.0, float(value)))
    except (TypeError, ValueError):
        return 0.0


def _assessments(raw: Any) -> list[SourceAssessment]:
    parsed = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        item = {**item, "credibility": _clamp(item.get("credibility", 0.0))}
        if isinstance(item.get("supports"), str):
            item["supports"] = item["supports"].upper()
        if isinstance(item.get("relevance"), str):
            item["relevance"] = item["relevance"].lower()
        try:
            parsed.append(SourceAssessment.model_validate(item))
        except ValidationError:
            continue
    return parsed


def verdict_from_evaluation(raw: dict[str, Any]) -> Verdict:
    """Build a Verdict from the evaluator's reply; unknown outcomes become UNDETERMINED."""
    try:
        outcome = Outcome(str(raw.get("outcome", "")).strip().upper())
    except ValueError:
        outcome = Outcome.UNDETERMINED

    temporal = raw.get("temporal_notes")
    return Verdict(
        outcome=outcome,
        confidence=_clamp(raw.get("confidence", 0.0)),
        reasoning=str(raw.get("reasoning") or ""),
        summary=str(raw.get("summary") or ""),
        source_analysis=_assessments(raw.get("source_analysis")),
        supporting_sources=[str(s) for s in raw.get("supporting_sources") or []],
        contradicting_sources=[str(s) for s in raw.get("contradicting_sources") or []],
        flags=[str(f) for f in raw.get("flags") or []],
        temporal_notes=str(temporal) if temporal else None,
    )


class EvidenceEvaluator(BaseAgent):
    """Step 4b of the event track: corpus -> Verdict."""

    _name = "EvidenceEvaluator"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}
    _step = AgentStep.EVALUATE

    def evaluate(self, ctx: "AgentContext", market: Market, corpus: EvidenceCorpus) -> Verdict:
        if corpus.is_empty:
            ctx.info(f"No evidence for {market.market_id}; skipping evaluation")
            return Verdict.undetermined(
                "No evidence sources were found for this market.",
                flags=[FLAG_NO_EVIDENCE],
            )

        if ctx.llm is None:
            raise InferenceUnavailable("No LLM client configured", step=self._step.value)

        document = {
            "market": market.to_prompt_document(),
            "current_time": ctx.now().isoformat(),
            "evidence": {
                "queries_used": corpus.queries_used,
                "sources": corpus.to_prompt_document(),
                "gathered_at": corpus.gathered_at.isoformat(),
            },
        }
        raw = ctx.llm.infer(EVALUATOR_PROMPT, document, step=self._step.value)

        verdict = apply_evidence_policy(verdict_from_evaluation(raw), corpus, market, ctx.now())
        ctx.info(
            f"Evidence verdict for {market.market_id}: {verdict.outcome.value} "
            f"({verdict.confidence:.0%}, flags={verdict.flags})"
        )
        return verdict
