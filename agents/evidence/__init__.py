"""
Evidence track: plan -> gather -> evaluate.
"""

from .evaluator import EvidenceEvaluator, verdict_from_evaluation
from .gatherer import EvidenceGatherer, default_providers
from .planner import EvidencePlanner, normalize_queries
from .policy import apply_evidence_policy
from .providers import GNewsProvider, GoogleNewsRSSProvider, NewsProvider, parse_rss_items, readable_text
from .sources import classify_source_type
from .time_window import resolve_time_window

__all__ = [
    "EvidencePlanner",
    "EvidenceGatherer",
    "EvidenceEvaluator",
    "NewsProvider",
    "GNewsProvider",
    "GoogleNewsRSSProvider",
    "apply_evidence_policy",
    "classify_source_type",
    "default_providers",
    "normalize_queries",
    "parse_rss_items",
    "readable_text",
    "resolve_time_window",
    "verdict_from_evaluation",
]
