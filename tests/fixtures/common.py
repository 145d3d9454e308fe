"""
Common test fixtures shared by all modules.

Provides factory functions for core oracle data structures:
- Market
- DeterministicSpec / FetchResult
- EvidenceSource / EvidenceCorpus
- Mock HTTP clients answering by URL

These are the foundational building blocks used by higher-level fixtures.
"""

import json
from datetime import datetime, timezone
from typing import Any, Optional
from unittest.mock import Mock

from core.http import HttpError, HttpResponse
from core.schemas import (
    DeterministicSpec,
    EvidenceCorpus,
    EvidenceSource,
    FetchResult,
    Market,
    SourceType,
    StrategyType,
)


# Reference "now" for every frozen clock in the suite
NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Market Factory
# =============================================================================

def make_market(
    market_id: str = "mkt_btc_001",
    question: str = "Will BTC be above $100,000 on March 1, 2026?",
    resolution_criteria: str = "Resolves YES if the BTC/USD price is above $100,000 at 2026-03-01T00:00:00Z.",
    deadline: str = "2026-03-01T00:00:00Z",
    **metadata: Any,
) -> Market:
    """
    Create a Market for testing.

    Defaults describe a crypto threshold market whose deadline is
    before NOW.
    """
    return Market(
        market_id=market_id,
        question=question,
        resolution_criteria=resolution_criteria,
        deadline=deadline,
        metadata=metadata,
    )


def make_event_market(
    market_id: str = "mkt_fed_001",
    deadline: str = "2026-03-10T00:00:00Z",
) -> Market:
    return make_market(
        market_id=market_id,
        question="Will the Federal Reserve cut rates at the March 2026 FOMC meeting?",
        resolution_criteria="Resolves YES if the FOMC announces a cut to the federal funds target range.",
        deadline=deadline,
    )


# =============================================================================
# Deterministic Track Factories
# =============================================================================

def make_spec(
    strategy_type: StrategyType = StrategyType.CRYPTO_PRICE_SPOT,
    market_id: str = "mkt_btc_001",
    **fields: Any,
) -> DeterministicSpec:
    """Create a DeterministicSpec; keyword arguments become parsed fields."""
    if not fields and strategy_type == StrategyType.CRYPTO_PRICE_SPOT:
        fields = {
            "pair": "BTC/USD",
            "comparator": ">",
            "threshold": 100000.0,
            "resolution_time": "2026-03-01T00:00:00Z",
        }
    return DeterministicSpec(market_id=market_id, strategy_type=strategy_type, parsed_fields=fields)


def make_fetch_result(
    raw_data: Optional[dict[str, Any]] = None,
    provider_name: str = "binance",
    success: bool = True,
    error: Optional[str] = None,
) -> FetchResult:
    if not success:
        return FetchResult.failure(provider_name, error or "fetch failed", NOW, data=raw_data)
    return FetchResult(
        success=True,
        raw_data=raw_data if raw_data is not None else {"price": 98500.0, "symbol": "BTCUSDT", "live": False},
        provider_name=provider_name,
        fetched_at=NOW,
    )


def parser_reply(strategy_type: str = "CRYPTO_PRICE_SPOT", **fields: Any) -> str:
    """JSON reply from the deterministic parser step."""
    if not fields and strategy_type == "CRYPTO_PRICE_SPOT":
        fields = {
            "pair": "BTC/USD",
            "comparator": ">",
            "threshold": "100000",
            "resolution_time": "2026-03-01T00:00:00Z",
        }
    return json.dumps({
        "strategy_type": strategy_type,
        "parsed_spec": fields,
        "resolution_ready": True,
    })


def classifier_reply(category: str = "DATA_RESOLVABLE", confidence: float = 0.95, **extra: Any) -> str:
    """JSON reply from the classifier step."""
    return json.dumps({
        "category": category,
        "confidence": confidence,
        "reasoning": f"Textbook {category.lower()} market.",
        "flags": [],
        "requires_clarification": False,
        **extra,
    })


# =============================================================================
# Evidence Track Factories
# =============================================================================

def make_source(
    url: str = "https://www.reuters.com/markets/fed-cuts-rates",
    title: str = "Fed cuts rates by 25 basis points",
    source_type: SourceType = SourceType.WIRE_SERVICE,
    snippet: str = "The Federal Reserve lowered its benchmark rate.",
) -> EvidenceSource:
    return EvidenceSource(
        title=title,
        url=url,
        snippet=snippet,
        source_type=source_type,
        published_date="2026-03-05",
    )


def make_corpus(sources: Optional[list[EvidenceSource]] = None) -> EvidenceCorpus:
    return EvidenceCorpus(
        queries_used=["fed rate cut march 2026"],
        sources=sources if sources is not None else [make_source()],
        gathered_at=NOW,
    )


def evaluator_reply(
    outcome: str = "YES",
    confidence: float = 0.95,
    source_analysis: Optional[list[dict[str, Any]]] = None,
    **extra: Any,
) -> str:
    """JSON reply from the evidence evaluator step."""
    if source_analysis is None:
        source_analysis = [{
            "source_title": "Fed cuts rates by 25 basis points",
            "url": "https://www.reuters.com/markets/fed-cuts-rates",
            "credibility": 0.95,
            "relevance": "direct",
            "claim": "The Fed cut rates",
            "supports": outcome,
        }]
    return json.dumps({
        "outcome": outcome,
        "confidence": confidence,
        "reasoning": "Sources report the decision.",
        "source_analysis": source_analysis,
        "supporting_sources": [a.get("url") for a in source_analysis if a.get("supports") == outcome],
        "contradicting_sources": [],
        **extra,
    })


# =============================================================================
# HTTP Doubles
# =============================================================================

def json_response(payload: Any, status_code: int = 200) -> HttpResponse:
    return HttpResponse(status_code=status_code, content=json.dumps(payload).encode("utf-8"))


def text_response(text: str, status_code: int = 200) -> HttpResponse:
    return HttpResponse(status_code=status_code, content=text.encode("utf-8"))


def make_mock_http(routes: Optional[dict[str, Any]] = None) -> Mock:
    """
    Mock HttpClient answering GET/POST by URL substring.

    Route values may be an HttpResponse, a JSON-able payload (served
    with status 200), an exception to raise, or a callable taking
    (url, params, json) and returning any of those. Unrouted URLs
    raise HttpError.
    """
    routes = routes or {}

    def answer(url: str, params: Any = None, body: Any = None) -> HttpResponse:
        for fragment, value in routes.items():
            if fragment not in url:
                continue
            if callable(value) and not isinstance(value, type):
                value = value(url, params, body)
            if isinstance(value, BaseException):
                raise value
            if isinstance(value, HttpResponse):
                return value
            return json_response(value)
        raise HttpError(f"No route for {url}")

    http = Mock()
    http.get.side_effect = lambda url, params=None, headers=None, timeout=None: answer(url, params)
    http.post.side_effect = lambda url, json=None, headers=None, timeout=None: answer(url, None, json)
    return http
