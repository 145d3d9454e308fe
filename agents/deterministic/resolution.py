"""
Resolution Agent

Maps fetched data onto a market's comparator. Guards run first and need
no inference: failed fetches, unfinished events and open windows are
UNDETERMINED. Values code can compare are compared literally; anything
else is handed to the inference collaborator with RESOLUTION_PROMPT.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from agents.base import AgentCapability, AgentStep, BaseAgent
from agents.deterministic.fetchers.crypto import quote_currency, to_binance_symbol
from agents.deterministic.fetchers.sports import teams_match
from core.schemas import (
    DataSummary,
    DeterministicSpec,
    FetchResult,
    InferenceUnavailable,
    Market,
    Outcome,
    StrategyType,
    Verdict,
    parse_timestamp,
)

from .comparison import (
    COMPARATORS,
    compare,
    convert_precipitation,
    convert_temperature,
    format_comparison,
    normalize_comparator,
    parse_number,
    temperature_scale,
)
from .prompts import RESOLUTION_PROMPT

if TYPE_CHECKING:
    from agents.context import AgentContext


FLAG_FETCH_FAILED = "FETCH_FAILED"
FLAG_WINDOW_NOT_CLOSED = "WINDOW_NOT_CLOSED"
FLAG_EVENT_POSTPONED = "EVENT_POSTPONED"
FLAG_EVENT_NOT_COMPLETED = "EVENT_NOT_COMPLETED"
FLAG_REGULATION_TIME = "REGULATION_TIME_UNVERIFIABLE"
FLAG_ONCHAIN_PROBE = "ONCHAIN_METRIC_UNSUPPORTED"
FLAG_UNIT_MISMATCH = "UNIT_MISMATCH"
FLAG_UNIT_CONVERTED = "UNIT_CONVERTED"
FLAG_STABLECOIN_PROXY = "STABLECOIN_QUOTE_PROXY"
FLAG_DATE_FALLBACK = "DATE_FALLBACK"
FLAG_LIVE_PRICE = "LIVE_PRICE"
FLAG_DRAW = "DRAW"
FLAG_INFERENCE_FALLBACK = "INFERENCE_FALLBACK"

_STABLECOINS = {"USDT", "USDC", "BUSD", "FDUSD"}
_POSTPONED_STATUSES = ("POSTPONED", "CANCELED", "CANCELLED", "SUSPENDED", "FORFEIT", "ABANDONED")
_REGULATION_RE = re.compile(
    r"\bin regulation\b|regulation[- ]time (?:only|result|score)|\bexclud\w* overtime|not including overtime"
    r"|without overtime|overtime (?:does not|doesn't|will not|won't) count",
    re.IGNORECASE,
)


@dataclass
class Measurement:
    """A value ready for literal comparison, with quality notes."""

    value: Optional[float]
    label: str
    flags: list[str] = field(default_factory=list)
    penalty: float = 0.0


class Undetermined(Exception):
    """Raised inside the strategy handlers when a guard trips."""

    def __init__(self, reasoning: str, flag: str) -> None:
        super().__init__(reasoning)
        self.reasoning = reasoning
        self.flag = flag


class ResolutionAgent(BaseAgent):
    """Step 3 of the data track: fetched data -> Verdict."""

    _name = "ResolutionAgent"
    _version = "v1"
    _capabilities = {AgentCapability.DETERMINISTIC, AgentCapability.LLM}
    _step = AgentStep.RESOLVE

    def resolve(
        self,
        ctx: "AgentContext",
        market: Market,
        spec: DeterministicSpec,
        fetch_result: FetchResult,
    ) -> Verdict:
        if not fetch_result.success:
            return Verdict.undetermined(
                f"Data fetch failed: {fetch_result.error or 'no data returned'}",
                flags=[FLAG_FETCH_FAILED],
            )
        if not fetch_result.raw_data:
            return Verdict.undetermined("Data provider returned no data", flags=[FLAG_FETCH_FAILED])

        try:
            if spec.strategy_type == StrategyType.SPORTS_RESULT:
                verdict = self._resolve_sports(market, spec, fetch_result.raw_data)
                if verdict is not None:
                    return verdict
                measurement = None
            else:
                measurement = self._measure(ctx, market, spec, fetch_result.raw_data)
        except Undetermined as u:
            ctx.info(f"Market {market.market_id} undetermined: {u.flag}")
            return Verdict.undetermined(u.reasoning, flags=[u.flag])

        comparator = normalize_comparator(spec.comparator)
        threshold = spec.threshold if spec.threshold is not None else parse_number(spec.get("threshold"))
        if measurement is not None and measurement.value is not None and comparator in COMPARATORS and threshold is not None:
            return self._literal_verdict(measurement, comparator, threshold)

        return self._inference_fallback(ctx, market, spec, fetch_result)

    # ------------------------------------------------------------------
    # Literal comparison
    # ------------------------------------------------------------------

    def _literal_verdict(self, m: Measurement, comparator: str, threshold: float) -> Verdict:
        result = compare(m.value, comparator, threshold)
        comparison = format_comparison(m.value, comparator, threshold, result)
        return Verdict(
            outcome=Outcome.YES if result else Outcome.NO,
            confidence=round(max(0.0, 1.0 - m.penalty), 4),
            reasoning=f"{m.label} was {m.value:g}. {comparison}.",
            data_summary=DataSummary(
                fetched_value=f"{m.value:g}",
                threshold=f"{threshold:g}",
                comparator=comparator,
                comparison_result=comparison,
            ),
            flags=list(m.flags),
        )

    def _measure(
        self,
        ctx: "AgentContext",
        market: Market,
        spec: DeterministicSpec,
        data: dict[str, Any],
    ) -> Optional[Measurement]:
        strategy = spec.strategy_type
        if strategy in (StrategyType.CRYPTO_PRICE_SPOT, StrategyType.CRYPTO_PRICE_TWAP):
            return self._measure_crypto(ctx, market, spec, data)
        if strategy == StrategyType.STOCK_CLOSE_PRICE:
            return self._measure_stock(ctx, spec, data)
        if strategy == StrategyType.WEATHER_API:
            return self._measure_weather(ctx, spec, data)
        if strategy == StrategyType.ONCHAIN_QUERY:
            return self._measure_onchain(ctx, spec, data)
        return None

    def _check_time_passed(self, ctx: "AgentContext", value: Any, what: str) -> None:
        moment = parse_timestamp(str(value)) if value else None
        if moment is not None and moment > ctx.now():
            raise Undetermined(
                f"The {what} {value} has not passed yet; the outcome is not observable.",
                FLAG_WINDOW_NOT_CLOSED,
            )

    def _measure_crypto(
        self,
        ctx: "AgentContext",
        market: Market,
        spec: DeterministicSpec,
        data: dict[str, Any],
    ) -> Measurement:
        self._check_time_passed(ctx, spec.get("resolution_time"), "resolution time")

        if data.get("live"):
            deadline = market.deadline_at()
            if deadline is not None and deadline > ctx.now():
                raise Undetermined(
                    "Only a live price is available and the market deadline has not passed.",
                    FLAG_WINDOW_NOT_CLOSED,
                )

        pair = str(spec.get("pair", data.get("pair", "")))
        twap = spec.strategy_type == StrategyType.CRYPTO_PRICE_TWAP
        value = data.get("twap") if twap else data.get("price")
        m = Measurement(
            value=parse_number(value),
            label=f"{'TWAP' if twap else 'Price'} of {pair}",
        )

        quote = quote_currency(pair)
        wanted = spec.get("currency")
        if wanted and quote and str(wanted).strip().upper() != quote:
            pegged = {str(wanted).strip().upper(), quote} <= ({"USD"} | _STABLECOINS)
            if not pegged:
                raise Undetermined(
                    f"Market is denominated in {wanted} but {pair} is quoted in {quote}.",
                    FLAG_UNIT_MISMATCH,
                )

        symbol = str(data.get("symbol") or to_binance_symbol(pair))
        if quote == "USD" and symbol.endswith("USDT"):
            m.flags.append(FLAG_STABLECOIN_PROXY)
            m.penalty += 0.05
        if data.get("live"):
            m.flags.append(FLAG_LIVE_PRICE)
            m.penalty += 0.1
        return m

    def _measure_stock(self, ctx: "AgentContext", spec: DeterministicSpec, data: dict[str, Any]) -> Measurement:
        requested = str(spec.get("resolution_date", ""))[:10]
        if requested and requested >= ctx.today():
            raise Undetermined(
                f"The resolution date {requested} has not closed yet; no final close is available.",
                FLAG_WINDOW_NOT_CLOSED,
            )
        m = Measurement(
            value=parse_number(data.get("close")),
            label=f"{data.get('ticker', spec.get('ticker'))} close on {data.get('date', requested)}",
        )
        if data.get("exact_date_match") is False:
            m.flags.append(FLAG_DATE_FALLBACK)
            m.penalty += 0.1
        return m

    def _measure_weather(self, ctx: "AgentContext", spec: DeterministicSpec, data: dict[str, Any]) -> Measurement:
        date = str(spec.get("date", data.get("date", "")))[:10]
        if data.get("is_forecast") or (date and date >= ctx.today()):
            raise Undetermined(
                f"Weather for {date} is not final yet; only forecast data exists.",
                FLAG_WINDOW_NOT_CLOSED,
            )

        value = parse_number(data.get("value"))
        label = f"{data.get('measurement_type', 'value')} {data.get('metric', '')} in {data.get('location')} on {date}"
        m = Measurement(value=value, label=" ".join(label.split()))
        if value is None:
            return m

        if data.get("measurement_type") == "precipitation":
            converted = convert_precipitation(value, spec.get("unit"))
            if converted != value:
                m.value = converted
                m.flags.append(FLAG_UNIT_CONVERTED)
            return m

        fetched_scale = temperature_scale(data.get("unit"))
        wanted_scale = temperature_scale(spec.get("unit"))
        if fetched_scale and wanted_scale and fetched_scale != wanted_scale:
            m.value = round(convert_temperature(value, fetched_scale, wanted_scale), 4)
            m.flags.append(FLAG_UNIT_CONVERTED)
        return m

    def _measure_onchain(self, ctx: "AgentContext", spec: DeterministicSpec, data: dict[str, Any]) -> Measurement:
        self._check_time_passed(ctx, spec.get("resolution_time"), "resolution time")
        if data.get("probe"):
            raise Undetermined(
                data.get("note") or "Only a chain-head probe was possible for this metric.",
                FLAG_ONCHAIN_PROBE,
            )
        return Measurement(
            value=parse_number(data.get("value")),
            label=f"{data.get('metric')} on {data.get('chain')}",
        )

    # ------------------------------------------------------------------
    # Sports
    # ------------------------------------------------------------------

    def _resolve_sports(self, market: Market, spec: DeterministicSpec, data: dict[str, Any]) -> Optional[Verdict]:
        status = str(data.get("status") or "").upper()
        if any(s in status for s in _POSTPONED_STATUSES):
            raise Undetermined(
                f"Game {data.get('event_name')} has status {data.get('status_detail') or status}.",
                FLAG_EVENT_POSTPONED,
            )
        if not data.get("completed"):
            raise Undetermined(
                f"Game {data.get('event_name')} is not final ({data.get('status_detail') or status or 'unknown status'}).",
                FLAG_EVENT_NOT_COMPLETED,
            )
        if _REGULATION_RE.search(market.resolution_criteria) or _REGULATION_RE.search(market.question):
            raise Undetermined(
                "Criteria depends on the regulation-time result; the provider reports final scores only.",
                FLAG_REGULATION_TIME,
            )

        home, away = data.get("home_team", ""), data.get("away_team", "")
        home_score, away_score = data.get("home_score"), data.get("away_score")
        score_line = f"{home} {home_score} - {away_score} {away}"
        winner = data.get("winner")
        outcome_type = str(spec.get("outcome_type", "win")).strip().lower()

        if outcome_type in ("total_points", "total", "total_score", "points"):
            total = parse_number(home_score) or 0.0
            total += parse_number(away_score) or 0.0
            m = Measurement(value=total, label=f"Total points ({score_line})")
            comparator = normalize_comparator(spec.comparator)
            if comparator in COMPARATORS and spec.threshold is not None:
                return self._literal_verdict(m, comparator, spec.threshold)
            return None

        summary = DataSummary(fetched_value=score_line, comparison_result=f"winner: {winner}")
        if outcome_type == "draw":
            is_draw = winner == "DRAW"
            return Verdict(
                outcome=Outcome.YES if is_draw else Outcome.NO,
                confidence=1.0,
                reasoning=f"Final score {score_line}; {'the game was drawn' if is_draw else 'the game was not drawn'}.",
                data_summary=summary,
                flags=[FLAG_DRAW] if is_draw else [],
            )

        target = str(spec.get("target_team") or spec.get("team_a", ""))
        if winner == "DRAW":
            return Verdict(
                outcome=Outcome.NO,
                confidence=1.0,
                reasoning=f"Final score {score_line}; the game was drawn, so {target} did not win.",
                data_summary=summary,
                flags=[FLAG_DRAW],
            )

        won = teams_match(str(winner or ""), target)
        return Verdict(
            outcome=Outcome.YES if won else Outcome.NO,
            confidence=1.0,
            reasoning=f"Final score {score_line}; {winner} won, so {target} {'won' if won else 'did not win'}.",
            data_summary=summary,
        )

    # ------------------------------------------------------------------
    # Inference fallback
    # ------------------------------------------------------------------

    def _inference_fallback(
        self,
        ctx: "AgentContext",
        market: Market,
        spec: DeterministicSpec,
        fetch_result: FetchResult,
    ) -> Verdict:
        if ctx.llm is None:
            raise InferenceUnavailable("No LLM client configured", step=self._step.value)

        document = {
            "market": market.to_prompt_document(),
            "parsed_spec": spec.parsed_fields,
            "strategy_type": spec.strategy_type.value,
            "fetched_data": fetch_result.raw_data,
            "data_source": fetch_result.provider_name,
            "fetch_timestamp": fetch_result.fetched_at.isoformat(),
        }
        raw = ctx.llm.infer(RESOLUTION_PROMPT, document, step=self._step.value)
        ctx.info(f"Market {market.market_id} resolved via inference fallback")
        return verdict_from_reply(raw, fetch_result)


def verdict_from_reply(raw: dict[str, Any], fetch_result: FetchResult) -> Verdict:
    """Build a Verdict from a resolution reply, re-applying the data guard."""
    try:
        outcome = Outcome(str(raw.get("outcome", "")).strip().upper())
    except ValueError:
        outcome = Outcome.UNDETERMINED

    flags = [str(f) for f in raw.get("flags") or []]
    flags.append(FLAG_INFERENCE_FALLBACK)
    summary = raw.get("data_summary")
    data_summary = None
    if isinstance(summary, dict):
        data_summary = DataSummary(**{k: None if v is None else str(v) for k, v in summary.items()})
    reasoning = str(raw.get("reasoning") or "Resolved from fetched data")

    if outcome != Outcome.UNDETERMINED and not fetch_result.has_data:
        return Verdict.undetermined(reasoning, flags=flags + [FLAG_FETCH_FAILED], data_summary=data_summary)
    if outcome == Outcome.UNDETERMINED:
        return Verdict.undetermined(reasoning, flags=flags, data_summary=data_summary)

    try:
        confidence = float(raw.get("confidence", 0.0))
    except (TypeError, ValueError):
        confidence = 0.0
    return Verdict(
        outcome=outcome,
        confidence=min(1.0, max(0.0, confidence)),
        reasoning=reasoning,
        data_summary=data_summary,
        flags=flags,
    )
