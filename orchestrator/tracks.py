"""
Track routing.

A Classification is turned into exactly one track variant; the pipeline
dispatches on the variant type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from core.schemas import Classification, MarketCategory


@dataclass(frozen=True)
class DataTrack:
    """Parse -> fetch -> resolve."""

    classification: Classification


@dataclass(frozen=True)
class EventTrack:
    """Plan -> gather -> evaluate."""

    classification: Classification


@dataclass(frozen=True)
class RejectedTrack:
    """Subjective or malformed; no resolution attempted."""

    classification: Classification


Track = Union[DataTrack, EventTrack, RejectedTrack]


def route(classification: Classification) -> Track:
    category = classification.category
    if category == MarketCategory.DATA_RESOLVABLE:
        return DataTrack(classification)
    if category == MarketCategory.EVENT_RESOLVABLE:
        return EventTrack(classification)
    if category.is_rejected:
        return RejectedTrack(classification)
    raise ValueError(f"Unroutable category: {category}")
