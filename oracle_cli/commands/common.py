"""
Helpers shared by the CLI subcommands.
"""

from __future__ import annotations

import json
from argparse import Namespace
from dataclasses import replace
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from core.config import RuntimeConfig, load_runtime_config
from core.schemas import Market, ResolutionResult


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1


class InputError(Exception):
    """Market input could not be read or validated."""


def runtime_config(args: Namespace) -> RuntimeConfig:
    """Config file (or --config), env overrides, then CLI flags."""
    config = load_runtime_config(getattr(args, "config", None))
    if getattr(args, "execute_deterministic", False):
        config.pipeline.execute_deterministic = True
    workers = getattr(args, "workers", None)
    if workers:
        config.pipeline.max_workers = workers
    if getattr(args, "provider", None):
        config.llm = replace(config.llm, provider=args.provider, model=None, api_key=None)
    return config


def read_json(path: str | Path) -> Any:
    try:
        return json.loads(Path(path).read_text())
    except OSError as e:
        raise InputError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InputError(f"{path} is not valid JSON: {e}") from e


def to_market(data: Any) -> Market:
    try:
        return Market.model_validate(data)
    except ValidationError as e:
        raise InputError(f"Invalid market: {e}") from e


def market_from_args(args: Namespace) -> Market:
    """Build a Market from --file or from the individual flags."""
    if getattr(args, "file", None):
        return to_market(read_json(args.file))
    return to_market(
        {
            "market_id": args.market_id,
            "question": args.question or "",
            "resolution_criteria": args.criteria or "",
            "deadline": args.deadline or "",
        }
    )


def print_result_human(result: ResolutionResult) -> None:
    print(f"market_id: {result.market_id}")
    print(f"category: {result.category.value}")
    print(f"outcome: {result.outcome.value}")
    print(f"confidence: {result.confidence:.2f}")
    print(f"action: {result.settlement_action.value}")
    print(f"reasoning: {result.reasoning}")
    if result.deterministic_spec is not None:
        print(f"strategy: {result.deterministic_spec.strategy_type.value}")
    if result.evidence_trail.summary:
        print(f"evidence: {result.evidence_trail.summary}")
    if result.flags:
        print(f"flags: {', '.join(result.flags)}")
