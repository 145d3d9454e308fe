"""CLI subcommands."""

from oracle_cli.commands import batch, classify, common, resolve

__all__ = ["resolve", "batch", "classify", "common"]
