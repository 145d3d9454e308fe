"""
Core Schemas
File: market.py

Purpose: Market input and intake classification.
A Market is created by the caller and never mutated; a Classification
is produced once per market by the classifier.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MarketCategory(str, Enum):
    """Resolution strategy family assigned to a market."""

    DATA_RESOLVABLE = "DATA_RESOLVABLE"
    EVENT_RESOLVABLE = "EVENT_RESOLVABLE"
    SUBJECTIVE = "SUBJECTIVE"
    MALFORMED = "MALFORMED"

    @property
    def is_rejected(self) -> bool:
        """Subjective and malformed markets never reach a resolution track."""
        return self in (MarketCategory.SUBJECTIVE, MarketCategory.MALFORMED)


def parse_timestamp(value: str | None) -> datetime | None:
    """
    Parse an ISO date or timestamp into an aware UTC datetime.

    Accepts "2026-03-01", "2026-03-01T00:00:00Z" and offsets.
    Returns None for blank or unparsable input.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class Market(BaseModel):
    """
    A prediction market submitted for resolution.

    `deadline` is kept as free text because callers may send an empty
    string; the classifier treats a blank deadline as disqualifying.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    market_id: str = Field(
        ...,
        alias="marketId",
        description="Unique identifier for the market",
        min_length=1,
    )
    question: str = Field(default="", description="The prediction question")
    resolution_criteria: str = Field(
        default="",
        description="How the market resolves",
    )
    deadline: str = Field(
        default="",
        description="ISO date/timestamp by which the outcome is known",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Caller-supplied metadata, passed through untouched",
    )

    def deadline_at(self) -> datetime | None:
        """Deadline as an aware UTC datetime, or None if blank/unparsable."""
        return parse_timestamp(self.deadline)

    def deadline_passed(self, now: datetime) -> bool:
        """True when the deadline is known and strictly before `now`."""
        deadline = self.deadline_at()
        return deadline is not None and deadline < now

    def to_prompt_document(self) -> dict[str, Any]:
        """The document handed to the inference collaborator."""
        return {
            "marketId": self.market_id,
            "question": self.question,
            "resolution_criteria": self.resolution_criteria,
            "deadline": self.deadline,
        }


class Classification(BaseModel):
    """
    Intake classification for one market.

    Confidence reflects certainty about the category, not the outcome.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    market_id: str = Field(..., description="Market being classified")
    category: MarketCategory = Field(..., description="Assigned category")
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = Field(default="", description="Short explanation")
    flags: list[str] = Field(default_factory=list)
    requires_clarification: bool = Field(default=False)
    resolution_approach: str | None = Field(
        default=None,
        description="How the market should be resolved",
    )
    data_source_hint: str | None = Field(
        default=None,
        description="Data source that would resolve the market",
    )
    clarification_needed: str | None = Field(default=None)
