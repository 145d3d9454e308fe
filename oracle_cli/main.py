"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m oracle_cli resolve --question "..." --criteria "..." --deadline DATE [--json]
    python -m oracle_cli resolve --file market.json [--execute-deterministic]
    python -m oracle_cli batch markets.json [--out results.json] [--workers N] [--json]
    python -m oracle_cli classify --file market.json [--json]
    python -m oracle_cli config --show | --init [PATH]

Environment Variables:
    ORACLE_LLM_PROVIDER         Inference provider (anthropic, openai, mock)
    ORACLE_LLM_MODEL            Model name
    ORACLE_LLM_API_KEY          API key (defaults to <PROVIDER>_API_KEY)
    ORACLE_EXECUTE_DETERMINISTIC  Fetch and resolve data markets (true/false)
    ORACLE_MAX_WORKERS          Batch worker pool size
    ORACLE_LOG_LEVEL            Log level (default: INFO)
    GNEWS_API_KEY, ALPHA_VANTAGE_API_KEY  Data provider keys
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import RuntimeConfig, load_runtime_config
from oracle_cli.commands.batch import batch_cmd
from oracle_cli.commands.classify import classify_cmd
from oracle_cli.commands.common import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from oracle_cli.commands.resolve import resolve_cmd


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI. Logs go to stderr so stdout stays parseable."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_market_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--file", "-f", type=str, default=None, help="JSON file holding one market")
    parser.add_argument("--market-id", type=str, default="cli-market", help="Market identifier")
    parser.add_argument("--question", "-q", type=str, default=None, help="The prediction question")
    parser.add_argument("--criteria", type=str, default=None, help="Resolution criteria")
    parser.add_argument("--deadline", type=str, default=None, help="ISO date or timestamp")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", default=False, help="Output JSON")
    parser.add_argument("--provider", type=str, default=None, help="Inference provider override")
    parser.add_argument("--debug", action="store_true", default=False, help="Print tracebacks on error")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="oracle",
        description="Oracle Engine CLI - classify and resolve prediction markets.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./oracle.json or ~/.config/oracle/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- resolve command ---
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve one market",
        description="Classify a market and run it through the matching resolution track.",
    )
    _add_market_arguments(resolve_parser)
    _add_common_arguments(resolve_parser)
    resolve_parser.add_argument(
        "--execute-deterministic",
        action="store_true",
        default=False,
        help="Fetch data and resolve data markets instead of emitting the parsed spec",
    )
    resolve_parser.set_defaults(func=resolve_cmd)

    # --- batch command ---
    batch_parser = subparsers.add_parser(
        "batch",
        help="Resolve every market in a JSON file",
    )
    batch_parser.add_argument("path", type=str, help="JSON list of markets, or {\"markets\": [...]}")
    batch_parser.add_argument("--out", "-o", type=str, default=None, help="Write results JSON here")
    batch_parser.add_argument("--workers", type=int, default=None, help="Concurrent markets (default: config)")
    batch_parser.add_argument(
        "--execute-deterministic",
        action="store_true",
        default=False,
        help="Fetch data and resolve data markets",
    )
    _add_common_arguments(batch_parser)
    batch_parser.set_defaults(func=batch_cmd)

    # --- classify command ---
    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify a market without resolving it",
    )
    _add_market_arguments(classify_parser)
    _add_common_arguments(classify_parser)
    classify_parser.set_defaults(func=classify_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Show or create configuration",
    )
    config_parser.add_argument("--show", action="store_true", default=False, help="Show effective configuration")
    config_parser.add_argument(
        "--init",
        nargs="?",
        const="oracle.json",
        default=None,
        metavar="PATH",
        help="Write a template config file (default: ./oracle.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.init)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        template = RuntimeConfig().to_dict()
        template["providers"] = {"max_results_per_query": 3, "enable_google_news": True}
        config_path.write_text(json.dumps(template, indent=2) + "\n")
        print(f"Created configuration file: {config_path}")
        print("\nAPI keys belong in the environment or a .env file (ORACLE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config = load_runtime_config(args.config)
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: oracle config [--init [PATH]|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0=success, 1=error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.log_level, log_file=args.log_file)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
