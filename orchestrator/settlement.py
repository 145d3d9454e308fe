"""
Settlement mapping.

Pure function of category and confidence; thresholds come from
PipelineConfig.
"""

from __future__ import annotations

from core.schemas import MarketCategory, SettlementAction

SETTLE_THRESHOLD = 0.85
DEFER_THRESHOLD = 0.70


def determine_settlement(
    category: MarketCategory,
    confidence: float,
    settle_threshold: float = SETTLE_THRESHOLD,
    defer_threshold: float = DEFER_THRESHOLD,
) -> SettlementAction:
    """
    Map a resolved market onto a settlement action.

    SUBJECTIVE and MALFORMED always REJECT. Otherwise confidence at or
    above `settle_threshold` settles, at or above `defer_threshold`
    defers, and anything lower escalates to human review.
    """
    if category.is_rejected:
        return SettlementAction.REJECT
    if confidence >= settle_threshold:
        return SettlementAction.SETTLE
    if confidence >= defer_threshold:
        return SettlementAction.DEFER
    return SettlementAction.ESCALATE
