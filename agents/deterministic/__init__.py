"""
Deterministic track: parse -> fetch -> resolve.
"""

from .comparison import compare, normalize_comparator, parse_number
from .fetchers import FetcherRegistry
from .parser import DeterministicParser, build_spec
from .resolution import ResolutionAgent, verdict_from_reply

__all__ = [
    "DeterministicParser",
    "ResolutionAgent",
    "FetcherRegistry",
    "build_spec",
    "verdict_from_reply",
    "compare",
    "normalize_comparator",
    "parse_number",
]
