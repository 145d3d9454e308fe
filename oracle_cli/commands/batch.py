"""
CLI Batch Command

Resolve every market in a JSON file. The file holds a list of markets
or an object with a "markets" list.

Usage:
    oracle batch markets.json --out results.json --workers 4
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from collections import Counter
from pathlib import Path

from orchestrator import create_pipeline

from oracle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    InputError,
    read_json,
    runtime_config,
    to_market,
)


logger = logging.getLogger(__name__)


def batch_cmd(args: Namespace) -> int:
    try:
        data = read_json(args.path)
        if isinstance(data, dict):
            data = data.get("markets", [])
        if not isinstance(data, list):
            raise InputError(f"{args.path} must contain a list of markets")
        markets = [to_market(item) for item in data]
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    pipeline = create_pipeline(runtime_config(args))
    results = pipeline.resolve_markets(markets)
    payload = [r.to_dict() for r in results]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
        logger.info("Wrote %d results to %s", len(payload), args.out)

    if args.json:
        print(json.dumps(payload, indent=2))
    else:
        actions = Counter(r.settlement_action.value for r in results)
        for r in results:
            print(f"{r.market_id}: {r.settlement_action.value} {r.outcome.value} ({r.confidence:.2f})")
        print(f"\n{len(results)} markets: " + ", ".join(f"{k}={v}" for k, v in sorted(actions.items())))
        if args.out:
            print(f"saved: {args.out}")
    return EXIT_SUCCESS
