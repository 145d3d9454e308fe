"""
Market Classifier

Routes each market to the data track, the evidence track, or rejection.
"""

from .agent import MarketClassifier
from .policy import (
    FLAG_LOW_CONFIDENCE,
    FLAG_MISSING_DEADLINE,
    FLAG_MISSING_FIELD,
    FLAG_UNKNOWN_CATEGORY,
    apply_policy,
    check_well_formed,
)

__all__ = [
    "MarketClassifier",
    "apply_policy",
    "check_well_formed",
    "FLAG_LOW_CONFIDENCE",
    "FLAG_MISSING_DEADLINE",
    "FLAG_MISSING_FIELD",
    "FLAG_UNKNOWN_CATEGORY",
]
