"""
Oracle CLI

Command-line interface for the oracle engine.

Usage:
    python -m oracle_cli resolve --question "..." --criteria "..." --deadline 2026-03-01
    python -m oracle_cli resolve --file market.json --json
    python -m oracle_cli batch markets.json --out results.json
    python -m oracle_cli classify --file market.json
    python -m oracle_cli config --show
"""

__version__ = "0.1.0"
