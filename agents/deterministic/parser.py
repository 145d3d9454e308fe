"""
Deterministic Parser

Turns a DATA_RESOLVABLE market into a DeterministicSpec, or rejects it.
The model proposes the strategy and fields; code checks the strategy
name, normalises comparator and threshold, and enforces required fields.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from agents.base import AgentCapability, AgentStep, BaseAgent
from core.schemas import (
    REQUIRED_FIELDS,
    DeterministicSpec,
    ErrorCodes,
    InferenceUnavailable,
    Market,
    ParseRejected,
    ParseRejection,
    ParserResult,
    StrategyType,
)

from .comparison import normalize_comparator, parse_number
from .prompts import PARSER_PROMPT

if TYPE_CHECKING:
    from agents.context import AgentContext


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def build_spec(market_id: str, raw: dict[str, Any]) -> DeterministicSpec:
    """
    Validate a parser reply.

    Raises:
        ParseRejected: misclassification, unknown strategy or missing fields
    """
    if str(raw.get("classification", "")).upper() == "REJECTED":
        reason = raw.get("reason") or "market is not deterministically resolvable"
        raise ParseRejected(f"{ErrorCodes.MISCLASSIFIED_NOT_DETERMINISTIC}: {reason}", market_id=market_id)

    strategy_name = str(raw.get("strategy_type", "")).strip().upper()
    try:
        strategy = StrategyType(strategy_name)
    except ValueError:
        raise ParseRejected(
            f"{ErrorCodes.UNKNOWN_STRATEGY}: {strategy_name or '<missing>'}",
            market_id=market_id,
        ) from None

    fields = dict(raw.get("parsed_spec") or raw.get("parsed_fields") or {})

    if "comparator" in fields and not _is_blank(fields["comparator"]):
        comparator = normalize_comparator(fields["comparator"])
        # Unrecognised comparators stay as text for the inference fallback
        if comparator is not None:
            fields["comparator"] = comparator
    if "threshold" in fields and not _is_blank(fields["threshold"]):
        threshold = parse_number(fields["threshold"])
        if threshold is not None:
            fields["threshold"] = threshold

    missing = [name for name in REQUIRED_FIELDS[strategy] if _is_blank(fields.get(name))]
    if missing:
        raise ParseRejected(
            f"{ErrorCodes.MISSING_REQUIRED_FIELDS}: {', '.join(missing)}",
            market_id=market_id,
            details={"strategy_type": strategy.value, "missing": missing},
        )

    return DeterministicSpec(
        market_id=market_id,
        strategy_type=strategy,
        parsed_fields=fields,
        ready=bool(raw.get("resolution_ready", True)),
    )


class DeterministicParser(BaseAgent):
    """
    Step 2a of the data track.

    Returns ParseRejection instead of raising for every content problem;
    only InferenceUnavailable escapes.
    """

    _name = "DeterministicParser"
    _version = "v1"
    _capabilities = {AgentCapability.LLM}
    _step = AgentStep.PARSE

    def parse(self, ctx: "AgentContext", market: Market) -> ParserResult:
        if ctx.llm is None:
            raise InferenceUnavailable("No LLM client configured", step=self._step.value)

        raw = ctx.llm.infer(PARSER_PROMPT, market.to_prompt_document(), step=self._step.value)

        try:
            spec = build_spec(market.market_id, raw)
        except ParseRejected as e:
            ctx.info(f"Market {market.market_id} parse rejected: {e.message}")
            return ParseRejection(market_id=market.market_id, reason=e.message)

        ctx.info(f"Market {market.market_id} parsed as {spec.strategy_type.value}")
        return spec
