"""
CLI Resolve Command

Usage:
    oracle resolve --question "..." --criteria "..." --deadline 2026-03-01
    oracle resolve --file market.json --json
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace

from orchestrator import create_pipeline

from oracle_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    InputError,
    market_from_args,
    print_result_human,
    runtime_config,
)


logger = logging.getLogger(__name__)


def resolve_cmd(args: Namespace) -> int:
    try:
        market = market_from_args(args)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    pipeline = create_pipeline(runtime_config(args))
    result = pipeline.resolve_market(market)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_result_human(result)
    return EXIT_SUCCESS
