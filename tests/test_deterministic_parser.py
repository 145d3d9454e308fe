"""
Tests for the Deterministic Parser.
"""

import json

import pytest

from agents.deterministic import DeterministicParser, build_spec
from core.schemas import (
    DeterministicSpec,
    ErrorCodes,
    ParseRejected,
    ParseRejection,
    StrategyType,
)

from fixtures.common import make_market, parser_reply


class TestBuildSpec:
    """Validation of parser replies."""

    def test_btc_twap(self):
        raw = json.loads(parser_reply(
            "CRYPTO_PRICE_TWAP",
            pair="BTC/USD",
            comparator="above",
            threshold="$100,000",
            window="1h",
            resolution_time="2026-03-01T00:00:00Z",
        ))

        spec = build_spec("mkt_btc", raw)

        assert spec.strategy_type == StrategyType.CRYPTO_PRICE_TWAP
        assert spec.comparator == ">"
        assert spec.threshold == 100000.0
        assert spec.get("window") == "1h"
        assert spec.ready is True

    def test_rejected_reply(self):
        with pytest.raises(ParseRejected) as exc:
            build_spec("m1", {"classification": "REJECTED", "reason": "needs a news search"})
        assert exc.value.message == "MISCLASSIFIED_NOT_DETERMINISTIC: needs a news search"

    def test_unknown_strategy(self):
        with pytest.raises(ParseRejected) as exc:
            build_spec("m1", {"strategy_type": "ELECTION_RESULT", "parsed_spec": {}})
        assert exc.value.message == f"{ErrorCodes.UNKNOWN_STRATEGY}: ELECTION_RESULT"

    def test_missing_fields(self):
        raw = {"strategy_type": "STOCK_CLOSE_PRICE", "parsed_spec": {"ticker": "AAPL", "comparator": ">", "threshold": ""}}
        with pytest.raises(ParseRejected) as exc:
            build_spec("m1", raw)
        assert exc.value.message == "MISSING_REQUIRED_FIELDS: threshold, resolution_date"
        assert exc.value.details["missing"] == ["threshold", "resolution_date"]

    def test_parsed_fields_key_accepted(self):
        raw = {
            "strategy_type": "sports_result",
            "parsed_fields": {"team_a": "Lakers", "team_b": "Celtics", "event_date": "2026-03-10"},
        }
        spec = build_spec("m1", raw)
        assert spec.strategy_type == StrategyType.SPORTS_RESULT
        assert spec.get("team_a") == "Lakers"

    def test_unrecognised_comparator_kept_as_text(self):
        raw = {
            "strategy_type": "ECONOMIC_DATA",
            "parsed_spec": {"indicator": "CPI", "comparator": "roughly", "threshold": "3%"},
        }
        spec = build_spec("m1", raw)
        assert spec.get("comparator") == "roughly"
        assert spec.threshold == 3.0


class TestDeterministicParser:
    def test_returns_spec(self, mock_ctx, market):
        result = DeterministicParser().parse(mock_ctx([parser_reply()]), market)

        assert isinstance(result, DeterministicSpec)
        assert result.market_id == market.market_id
        assert result.threshold == 100000.0

    def test_returns_rejection(self, mock_ctx):
        market = make_market(question="Will the Fed cut rates?")
        reply = json.dumps({"classification": "REJECTED", "reason": "announcement-driven"})

        result = DeterministicParser().parse(mock_ctx([reply]), market)

        assert isinstance(result, ParseRejection)
        assert result.reason.startswith("MISCLASSIFIED_NOT_DETERMINISTIC")

    def test_fenced_reply(self, mock_ctx, market):
        result = DeterministicParser().parse(mock_ctx([f"```json\n{parser_reply()}\n```"]), market)
        assert isinstance(result, DeterministicSpec)
