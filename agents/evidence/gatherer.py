"""
Evidence Gatherer

Fans every (query, provider) pair out over a thread pool and waits for
all of them. A failing call contributes zero sources and never fails
the market. Results are merged in submission order, then deduplicated.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, TYPE_CHECKING

from agents.base import AgentCapability, AgentStep, BaseAgent
from core.schemas import EvidenceCorpus, EvidencePlan, EvidenceSource, ProviderUnavailable

from .providers import GNewsProvider, GoogleNewsRSSProvider, NewsProvider
from .time_window import resolve_time_window

if TYPE_CHECKING:
    from agents.context import AgentContext


def default_providers(ctx: "AgentContext") -> list[NewsProvider]:
    """Providers enabled by the runtime config."""
    if ctx.http is None:
        return []
    providers: list[NewsProvider] = []
    if ctx.config is None or ctx.config.providers.enable_google_news:
        providers.append(GoogleNewsRSSProvider(ctx.http))
    api_key = ctx.config.providers.gnews_api_key if ctx.config else None
    if api_key:
        providers.append(GNewsProvider(ctx.http, api_key))
    return providers


class EvidenceGatherer(BaseAgent):
    """Step 3b of the event track: EvidencePlan -> EvidenceCorpus."""

    _name = "EvidenceGatherer"
    _version = "v1"
    _capabilities = {AgentCapability.NETWORK}
    _step = AgentStep.GATHER

    def __init__(self, providers: Optional[Sequence[NewsProvider]] = None) -> None:
        super().__init__()
        self._providers = list(providers) if providers is not None else None

    def gather(self, ctx: "AgentContext", plan: EvidencePlan) -> EvidenceCorpus:
        providers = self._providers if self._providers is not None else default_providers(ctx)
        from_date, to_date = resolve_time_window(plan.time_window, ctx.now().date())

        max_results = 3
        workers = 8
        if ctx.config is not None:
            max_results = ctx.config.providers.max_results_per_query
            workers = ctx.config.pipeline.gather_workers

        ctx.info(
            f"Gathering {len(plan.queries)} queries x {len(providers)} providers "
            f"for {plan.market_id} ({from_date} to {to_date})"
        )

        calls = [(query, provider) for query in plan.queries for provider in providers]
        collected: list[EvidenceSource] = []
        if calls:
            with ThreadPoolExecutor(max_workers=max(1, min(workers, len(calls)))) as pool:
                futures = [
                    pool.submit(provider.search, query, from_date, to_date, max_results)
                    for query, provider in calls
                ]
                for (query, provider), future in zip(calls, futures):
                    try:
                        collected.extend(future.result())
                    except ProviderUnavailable as e:
                        ctx.warning(f"{provider.name} unavailable for {query!r}: {e.message}")
                    except Exception as e:
                        ctx.logger.exception(f"{provider.name} failed for {query!r}: {e}")

        corpus = EvidenceCorpus(
            queries_used=list(plan.queries),
            sources=collected,
            gathered_at=ctx.now(),
        ).dedupe()
        ctx.info(f"Found {len(corpus.sources)} unique sources for {plan.market_id}")
        return corpus
