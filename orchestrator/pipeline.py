"""
Resolution Pipeline

In-process runner composing the agents:

    classify -> DATA:     parse -> (fetch -> resolve)
             -> EVENT:    plan -> gather -> evaluate
             -> REJECTED: reject

Every market produces exactly one ResolutionResult. Failures inside a
market become a REJECT result for that market and never affect the
rest of a batch.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from agents.classifier import MarketClassifier
from agents.context import AgentContext
from agents.deterministic import DeterministicParser, FetcherRegistry, ResolutionAgent
from agents.evidence import EvidenceEvaluator, EvidenceGatherer, EvidencePlanner
from core.config import RuntimeConfig
from core.schemas import (
    DeterministicSpec,
    ErrorCodes,
    EvidenceTrail,
    FetchResult,
    InferenceUnavailable,
    Market,
    MarketCategory,
    OracleException,
    Outcome,
    ParseRejection,
    ResolutionResult,
    SettlementAction,
    Verdict,
)

from orchestrator.settlement import determine_settlement
from orchestrator.tracks import DataTrack, EventTrack, RejectedTrack, Track, route


logger = logging.getLogger(__name__)


class Pipeline:
    """
    Main pipeline runner.

    Usage:
        config = load_runtime_config()
        pipeline = Pipeline(config)
        result = pipeline.resolve_market(market)
        payload = result.to_dict()

    Agents can be swapped through keyword arguments, which is how tests
    inject a scripted fetcher registry or news providers.
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        context: Optional[AgentContext] = None,
        *,
        classifier: Optional[MarketClassifier] = None,
        parser: Optional[DeterministicParser] = None,
        fetchers: Optional[FetcherRegistry] = None,
        resolver: Optional[ResolutionAgent] = None,
        planner: Optional[EvidencePlanner] = None,
        gatherer: Optional[EvidenceGatherer] = None,
        evaluator: Optional[EvidenceEvaluator] = None,
    ) -> None:
        if config is None:
            config = context.config if context is not None and context.config is not None else RuntimeConfig.from_env()
        self.config = config
        self._context = context or AgentContext.create(config)

        self.classifier = classifier or MarketClassifier()
        self.parser = parser or DeterministicParser()
        self.resolver = resolver or ResolutionAgent()
        self.planner = planner or EvidencePlanner()
        self.gatherer = gatherer or EvidenceGatherer()
        self.evaluator = evaluator or EvidenceEvaluator()

        if fetchers is None and self._context.http is not None:
            fetchers = FetcherRegistry.default(self._context.http, self._context.clock, config)
        self.fetchers = fetchers or FetcherRegistry(self._context.clock)

    @property
    def context(self) -> AgentContext:
        return self._context

    # =========================================================================
    # Entry points
    # =========================================================================

    def resolve_market(self, market: Market) -> ResolutionResult:
        """Run one market through the pipeline. Never raises."""
        ctx = self._context.for_market(market.market_id)
        logger.info("Resolving market %s", market.market_id)

        try:
            classification = self.classifier.classify(ctx, market)
            result = self._run_track(ctx, market, route(classification))
        except InferenceUnavailable as e:
            logger.warning("Inference unavailable for %s: %s", market.market_id, e.message)
            result = self._failure(ctx, market, e.message, ErrorCodes.INFERENCE_UNAVAILABLE)
        except OracleException as e:
            logger.error("Pipeline error for %s: %s", market.market_id, e.message)
            result = self._failure(ctx, market, e.message, ErrorCodes.PIPELINE_ERROR)
        except Exception as e:
            logger.exception("Unexpected error resolving %s", market.market_id)
            result = self._failure(ctx, market, str(e) or e.__class__.__name__, ErrorCodes.PIPELINE_ERROR)

        logger.info(
            "Market %s -> %s %s (%.2f)",
            market.market_id,
            result.settlement_action.value,
            result.outcome.value,
            result.confidence,
        )
        return result

    def resolve_markets(self, markets: Iterable[Market]) -> list[ResolutionResult]:
        """
        Resolve a batch, preserving input order.

        Sequential unless `pipeline.max_workers > 1`, in which case a
        bounded thread pool is used. One market's failure never affects
        the others.
        """
        markets = list(markets)
        workers = self.config.pipeline.max_workers
        if workers <= 1 or len(markets) <= 1:
            return [self.resolve_market(m) for m in markets]

        with ThreadPoolExecutor(max_workers=min(workers, len(markets))) as pool:
            return list(pool.map(self.resolve_market, markets))

    # =========================================================================
    # Tracks
    # =========================================================================

    def _run_track(self, ctx: AgentContext, market: Market, track: Track) -> ResolutionResult:
        if isinstance(track, DataTrack):
            return self._data_track(ctx, market, track)
        if isinstance(track, EventTrack):
            return self._event_track(ctx, market, track)
        if isinstance(track, RejectedTrack):
            return self._rejected_track(ctx, market, track)
        raise TypeError(f"Unhandled track: {track!r}")

    def _data_track(self, ctx: AgentContext, market: Market, track: DataTrack) -> ResolutionResult:
        classification = track.classification
        parsed = self.parser.parse(ctx, market)

        if isinstance(parsed, ParseRejection):
            return ResolutionResult(
                market_id=market.market_id,
                category=MarketCategory.DATA_RESOLVABLE,
                outcome=Outcome.UNDETERMINED,
                confidence=0.0,
                settlement_action=SettlementAction.DEFER,
                reasoning=f"Deterministic parser rejected: {parsed.reason}",
                flags=classification.flags + [ErrorCodes.PARSE_REJECTED],
                resolved_at=ctx.now(),
            )

        if not self.config.pipeline.execute_deterministic:
            return ResolutionResult(
                market_id=market.market_id,
                category=MarketCategory.DATA_RESOLVABLE,
                outcome=Outcome.UNDETERMINED,
                confidence=1.0,
                settlement_action=SettlementAction.DEFER,
                reasoning=(
                    f"Market parsed as {parsed.strategy_type.value}. "
                    "Ready for automated resolution via data endpoint."
                ),
                deterministic_spec=parsed,
                flags=list(classification.flags),
                resolved_at=ctx.now(),
            )

        fetch_result = self.fetchers.fetch(parsed)
        verdict = self.resolver.resolve(ctx, market, parsed, fetch_result)
        return ResolutionResult(
            market_id=market.market_id,
            category=MarketCategory.DATA_RESOLVABLE,
            outcome=verdict.outcome,
            confidence=verdict.confidence,
            settlement_action=self._settle(MarketCategory.DATA_RESOLVABLE, verdict.confidence),
            reasoning=verdict.reasoning or "No reasoning provided",
            evidence_trail=data_trail(parsed, fetch_result, verdict),
            deterministic_spec=parsed,
            flags=classification.flags + verdict.flags,
            resolved_at=ctx.now(),
        )

    def _event_track(self, ctx: AgentContext, market: Market, track: EventTrack) -> ResolutionResult:
        plan = self.planner.plan(ctx, market)
        corpus = self.gatherer.gather(ctx, plan)
        verdict = self.evaluator.evaluate(ctx, market, corpus)

        return ResolutionResult(
            market_id=market.market_id,
            category=MarketCategory.EVENT_RESOLVABLE,
            outcome=verdict.outcome,
            confidence=verdict.confidence,
            settlement_action=self._settle(MarketCategory.EVENT_RESOLVABLE, verdict.confidence),
            reasoning=verdict.reasoning or verdict.summary or "No reasoning provided",
            evidence_trail=EvidenceTrail(
                sources_consulted=len(corpus.sources),
                sources=corpus.sources,
                summary=evidence_summary(len(corpus.sources), verdict),
            ),
            flags=track.classification.flags + verdict.flags,
            resolved_at=ctx.now(),
        )

    def _rejected_track(self, ctx: AgentContext, market: Market, track: RejectedTrack) -> ResolutionResult:
        classification = track.classification
        reasoning = f"Market classified as {classification.category.value}."
        if classification.reasoning:
            reasoning = f"{reasoning} {classification.reasoning}"
        if classification.clarification_needed:
            reasoning = f"{reasoning} Clarification needed: {classification.clarification_needed}"

        return ResolutionResult(
            market_id=market.market_id,
            category=classification.category,
            outcome=Outcome.UNDETERMINED,
            confidence=0.0,
            settlement_action=SettlementAction.REJECT,
            reasoning=reasoning,
            flags=list(classification.flags),
            resolved_at=ctx.now(),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _settle(self, category: MarketCategory, confidence: float) -> SettlementAction:
        return determine_settlement(
            category,
            confidence,
            settle_threshold=self.config.pipeline.settle_threshold,
            defer_threshold=self.config.pipeline.defer_threshold,
        )

    def _failure(self, ctx: AgentContext, market: Market, message: str, code: str) -> ResolutionResult:
        return ResolutionResult(
            market_id=market.market_id,
            category=MarketCategory.MALFORMED,
            outcome=Outcome.UNDETERMINED,
            confidence=0.0,
            settlement_action=SettlementAction.REJECT,
            reasoning=f"Pipeline error: {message}",
            flags=[code],
            resolved_at=ctx.now(),
        )


def evidence_summary(count: int, verdict: Verdict) -> str:
    summary = (
        f"{count} sources evaluated. {len(verdict.supporting_sources)} supporting, "
        f"{len(verdict.contradicting_sources)} contradicting."
    )
    if verdict.temporal_notes:
        summary = f"{summary} {verdict.temporal_notes}"
    return summary


def data_trail(spec: DeterministicSpec, fetch_result: FetchResult, verdict: Verdict) -> EvidenceTrail:
    if not fetch_result.success:
        return EvidenceTrail(
            sources_consulted=0,
            summary=f"{spec.strategy_type.value} via {fetch_result.provider_name}: {fetch_result.error}",
        )
    detail = ""
    if verdict.data_summary is not None and verdict.data_summary.comparison_result:
        detail = f" {verdict.data_summary.comparison_result}"
    return EvidenceTrail(
        sources_consulted=1,
        summary=f"{spec.strategy_type.value} via {fetch_result.provider_name} at {fetch_result.fetched_at.isoformat()}.{detail}",
    )


def create_pipeline(config: Optional[RuntimeConfig] = None, **agents) -> Pipeline:
    """Build a pipeline with a real context from config (environment when omitted)."""
    config = config or RuntimeConfig.from_env()
    return Pipeline(config, AgentContext.create(config), **agents)


def create_test_pipeline(
    *,
    llm_responses: Optional[list[str]] = None,
    config: Optional[RuntimeConfig] = None,
    **agents,
) -> Pipeline:
    """Pipeline over a MockProvider-backed context with a frozen clock."""
    ctx = AgentContext.create_mock(llm_responses=llm_responses, config=config)
    return Pipeline(ctx.config, ctx, **agents)
