"""
Test fixtures package for oracle engine tests.

common.py holds the factories shared by every test module:
markets, specs, fetch results, evidence corpora, scripted inference
replies and a URL-routed mock HTTP client.

Usage:
    from fixtures.common import make_market, make_mock_http

    def test_something():
        market = make_market(deadline="")
"""

from .common import (
    NOW,
    classifier_reply,
    evaluator_reply,
    json_response,
    make_corpus,
    make_event_market,
    make_fetch_result,
    make_market,
    make_mock_http,
    make_source,
    make_spec,
    parser_reply,
    text_response,
)

__all__ = [
    "NOW",
    "classifier_reply",
    "evaluator_reply",
    "json_response",
    "make_corpus",
    "make_event_market",
    "make_fetch_result",
    "make_market",
    "make_mock_http",
    "make_source",
    "make_spec",
    "parser_reply",
    "text_response",
]
