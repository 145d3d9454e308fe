"""
CLI Classify Command

Run only the intake classifier on a market.
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from agents.classifier import MarketClassifier
from agents.context import AgentContext
from core.schemas import InferenceUnavailable

from oracle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    InputError,
    market_from_args,
    runtime_config,
)


def classify_cmd(args: Namespace) -> int:
    try:
        market = market_from_args(args)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ctx = AgentContext.create(runtime_config(args)).for_market(market.market_id)
    try:
        classification = MarketClassifier().classify(ctx, market)
    except InferenceUnavailable as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.json:
        print(json.dumps(classification.model_dump(mode="json"), indent=2))
    else:
        print(f"market_id: {classification.market_id}")
        print(f"category: {classification.category.value}")
        print(f"confidence: {classification.confidence:.2f}")
        print(f"reasoning: {classification.reasoning}")
        if classification.flags:
            print(f"flags: {', '.join(classification.flags)}")
    return EXIT_SUCCESS
