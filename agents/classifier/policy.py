"""
Classification policy applied in code after inference.

The model proposes a category; these rules decide what is allowed to stand.
"""

from __future__ import annotations

from typing import Any, Optional

from core.schemas import Classification, Market, MarketCategory

FLAG_LOW_CONFIDENCE = "LOW_CONFIDENCE_CLASSIFICATION"
FLAG_MISSING_DEADLINE = "MISSING_DEADLINE"
FLAG_MISSING_FIELD = "MISSING_REQUIRED_FIELD"
FLAG_UNKNOWN_CATEGORY = "UNKNOWN_CATEGORY"

# Labels accepted from the model, including the older letter scheme.
CATEGORY_ALIASES: dict[str, MarketCategory] = {
    "DATA_RESOLVABLE": MarketCategory.DATA_RESOLVABLE,
    "CATEGORY_A": MarketCategory.DATA_RESOLVABLE,
    "EVENT_RESOLVABLE": MarketCategory.EVENT_RESOLVABLE,
    "CATEGORY_B": MarketCategory.EVENT_RESOLVABLE,
    "SUBJECTIVE": MarketCategory.SUBJECTIVE,
    "CATEGORY_C": MarketCategory.SUBJECTIVE,
    "MALFORMED": MarketCategory.MALFORMED,
}


def clamp_confidence(value: Any, default: float = 0.0) -> float:
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        return default


def check_well_formed(market: Market) -> Optional[Classification]:
    """
    Local gate run before any inference call.

    Returns a MALFORMED classification when the question or criteria is blank.
    """
    missing = [
        name
        for name, value in (
            ("question", market.question),
            ("resolution_criteria", market.resolution_criteria),
        )
        if not value or not value.strip()
    ]
    if not missing:
        return None
    return Classification(
        market_id=market.market_id,
        category=MarketCategory.MALFORMED,
        confidence=1.0,
        reasoning=f"Market is missing required field(s): {', '.join(missing)}.",
        flags=[FLAG_MISSING_FIELD],
        requires_clarification=True,
        clarification_needed=f"Provide {', '.join(missing)}.",
    )


def apply_policy(
    market: Market,
    raw: dict[str, Any],
    *,
    low_confidence_threshold: float = 0.60,
) -> Classification:
    """
    Turn the model's JSON into a Classification, enforcing the hard rules.

    - unknown labels become MALFORMED
    - a blank deadline can never be DATA/EVENT resolvable
    - confidence is clamped to [0, 1]; low confidence flags for clarification
    """
    label = str(raw.get("category") or raw.get("classification") or "").strip().upper()
    flags = [str(f) for f in (raw.get("flags") or []) if f]
    reasoning = str(raw.get("reasoning") or "").strip()
    requires_clarification = bool(raw.get("requires_clarification", False))
    confidence = clamp_confidence(raw.get("confidence"))

    category = CATEGORY_ALIASES.get(label)
    if category is None:
        category = MarketCategory.MALFORMED
        flags.append(FLAG_UNKNOWN_CATEGORY)
        reasoning = f"Classifier returned unknown category {label!r}. {reasoning}".strip()

    if not market.deadline.strip() and category in (
        MarketCategory.DATA_RESOLVABLE,
        MarketCategory.EVENT_RESOLVABLE,
    ):
        category = MarketCategory.SUBJECTIVE
        flags.append(FLAG_MISSING_DEADLINE)
        reasoning = f"No deadline provided; cannot be resolved on a schedule. {reasoning}".strip()

    if confidence < low_confidence_threshold:
        if FLAG_LOW_CONFIDENCE not in flags:
            flags.append(FLAG_LOW_CONFIDENCE)
        requires_clarification = True

    return Classification(
        market_id=market.market_id,
        category=category,
        confidence=confidence,
        reasoning=reasoning or f"Classified as {category.value}.",
        flags=flags,
        requires_clarification=requires_clarification,
        resolution_approach=raw.get("resolution_approach"),
        data_source_hint=raw.get("data_source_hint"),
        clarification_needed=raw.get("clarification_needed"),
    )
