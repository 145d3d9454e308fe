"""
Tests for the Market Classifier.

The model proposes a category; the code-side policy decides what stands.
"""

import json

import pytest

from agents.classifier import (
    FLAG_LOW_CONFIDENCE,
    FLAG_MISSING_DEADLINE,
    FLAG_MISSING_FIELD,
    FLAG_UNKNOWN_CATEGORY,
    MarketClassifier,
    apply_policy,
    check_well_formed,
)
from agents.context import AgentContext, FrozenClock
from core.config import RuntimeConfig
from core.schemas import InferenceUnavailable, MarketCategory

from fixtures.common import NOW, classifier_reply, make_market


class TestWellFormedGate:
    """Local checks that run before any inference."""

    @pytest.mark.parametrize("field", ["question", "resolution_criteria"])
    def test_blank_field_is_malformed(self, field, mock_ctx):
        market = make_market(**{field: "   "})
        ctx = mock_ctx([classifier_reply("DATA_RESOLVABLE")])

        classification = MarketClassifier().classify(ctx, market)

        assert classification.category == MarketCategory.MALFORMED
        assert FLAG_MISSING_FIELD in classification.flags
        assert field in classification.reasoning
        assert ctx.llm.provider.calls == []

    def test_complete_market_passes(self):
        assert check_well_formed(make_market()) is None


class TestApplyPolicy:
    def test_empty_deadline_never_resolvable(self):
        market = make_market(deadline="")
        for label in ("DATA_RESOLVABLE", "EVENT_RESOLVABLE"):
            classification = apply_policy(market, {"category": label, "confidence": 0.99})
            assert classification.category == MarketCategory.SUBJECTIVE
            assert FLAG_MISSING_DEADLINE in classification.flags

    def test_letter_aliases(self):
        raw = {"category": "CATEGORY_B", "confidence": 0.9}
        assert apply_policy(make_market(), raw).category == MarketCategory.EVENT_RESOLVABLE

    def test_classification_key_accepted(self):
        raw = {"classification": "subjective", "confidence": 0.9}
        assert apply_policy(make_market(), raw).category == MarketCategory.SUBJECTIVE

    def test_unknown_label_is_malformed(self):
        classification = apply_policy(make_market(), {"category": "SPORTS", "confidence": 0.9})
        assert classification.category == MarketCategory.MALFORMED
        assert FLAG_UNKNOWN_CATEGORY in classification.flags
        assert "'SPORTS'" in classification.reasoning

    def test_low_confidence_flagged(self):
        classification = apply_policy(make_market(), {"category": "EVENT_RESOLVABLE", "confidence": 0.5})
        assert FLAG_LOW_CONFIDENCE in classification.flags
        assert classification.requires_clarification is True

    @pytest.mark.parametrize("raw_confidence,expected", [(1.7, 1.0), (-0.2, 0.0), ("high", 0.0), (None, 0.0)])
    def test_confidence_clamped(self, raw_confidence, expected):
        classification = apply_policy(make_market(), {"category": "SUBJECTIVE", "confidence": raw_confidence})
        assert classification.confidence == expected

    def test_hints_carried(self):
        raw = {
            "category": "DATA_RESOLVABLE",
            "confidence": 0.97,
            "resolution_approach": "Binance 1h TWAP",
            "data_source_hint": "binance",
        }
        classification = apply_policy(make_market(), raw)
        assert classification.resolution_approach == "Binance 1h TWAP"
        assert classification.data_source_hint == "binance"


class TestMarketClassifier:
    def test_classifies_via_inference(self, mock_ctx, market):
        ctx = mock_ctx([classifier_reply("DATA_RESOLVABLE", 0.96)])

        classification = MarketClassifier().classify(ctx, market)

        assert classification.category == MarketCategory.DATA_RESOLVABLE
        assert classification.confidence == 0.96
        document = json.loads(ctx.llm.provider.calls[0]["messages"][1]["content"])
        assert document["marketId"] == market.market_id

    def test_threshold_from_config(self, mock_ctx, market):
        config = RuntimeConfig()
        config.pipeline.low_confidence_threshold = 0.9
        ctx = mock_ctx([classifier_reply("EVENT_RESOLVABLE", 0.85)], config=config)

        classification = MarketClassifier().classify(ctx, market)

        assert FLAG_LOW_CONFIDENCE in classification.flags

    def test_no_llm(self, market):
        ctx = AgentContext(clock=FrozenClock(NOW))
        with pytest.raises(InferenceUnavailable):
            MarketClassifier().classify(ctx, market)

    def test_non_json_reply(self, mock_ctx, market):
        with pytest.raises(InferenceUnavailable):
            MarketClassifier().classify(mock_ctx(["I think this is data resolvable."]), market)
