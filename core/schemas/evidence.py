"""
Core Schemas
File: evidence.py

Purpose: Evidence track artifacts.
EvidencePlan drives the gatherer; EvidenceCorpus is its deduplicated
output; SourceAssessment is the evaluator's per-source breakdown.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceType(str, Enum):
    """Coarse trust tier of an evidence source."""

    WIRE_SERVICE = "wire_service"
    OFFICIAL = "official"
    MAINSTREAM_NEWS = "mainstream_news"
    TRADE_PRESS = "trade_press"
    BLOG = "blog"
    SOCIAL = "social"
    UNKNOWN = "unknown"


# Lower rank = more trusted.
SOURCE_TYPE_TRUST: dict[SourceType, int] = {
    SourceType.WIRE_SERVICE: 0,
    SourceType.OFFICIAL: 1,
    SourceType.MAINSTREAM_NEWS: 2,
    SourceType.TRADE_PRESS: 3,
    SourceType.BLOG: 4,
    SourceType.SOCIAL: 5,
    SourceType.UNKNOWN: 6,
}


class TimeWindow(BaseModel):
    """
    Search window as produced by the planner.

    Bounds may be ISO dates, timestamps, relative expressions such as
    "last_30_days", or "now"; they are resolved by the gatherer.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    from_: str = Field(default="last_30_days", alias="from")
    to: str = Field(default="now")


class EvidencePlan(BaseModel):
    """Structured search plan for an event-resolvable market."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    market_id: str = Field(..., alias="marketId")
    queries: list[str] = Field(default_factory=list, description="3-5 queries, most relevant first")
    priority_source_types: list[str] = Field(default_factory=list)
    time_window: TimeWindow = Field(default_factory=TimeWindow)
    yes_signals: list[str] = Field(default_factory=list)
    no_signals: list[str] = Field(default_factory=list)
    primary_authority: str = Field(default="")

    @model_validator(mode="before")
    @classmethod
    def accept_inference_shape(cls, data: Any) -> Any:
        """Map `search_queries` / `confirmation_signals` onto the flat fields."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "queries" not in data and "search_queries" in data:
            data["queries"] = data.pop("search_queries")
        signals = data.pop("confirmation_signals", None)
        if isinstance(signals, dict):
            data.setdefault("yes_signals", signals.get("yes_signals") or [])
            data.setdefault("no_signals", signals.get("no_signals") or [])
        if data.get("time_window") is None:
            data.pop("time_window", None)
        return data


class EvidenceSource(BaseModel):
    """One article or document returned by a news provider."""

    model_config = ConfigDict(extra="forbid")

    title: str
    url: str
    snippet: str = ""
    source_type: SourceType = SourceType.UNKNOWN
    published_date: Optional[str] = None
    source_name: Optional[str] = None


def dedupe_sources(sources: list[EvidenceSource]) -> list[EvidenceSource]:
    """
    Keep the first source seen for each URL, preserving order.

    Sources with an empty URL are dropped.
    """
    seen: set[str] = set()
    unique: list[EvidenceSource] = []
    for source in sources:
        if not source.url or source.url in seen:
            continue
        seen.add(source.url)
        unique.append(source)
    return unique


class EvidenceCorpus(BaseModel):
    """Deduplicated, time-filtered sources gathered for one market."""

    model_config = ConfigDict(extra="forbid")

    queries_used: list[str] = Field(default_factory=list)
    sources: list[EvidenceSource] = Field(default_factory=list)
    gathered_at: datetime

    def dedupe(self) -> "EvidenceCorpus":
        """Return a copy whose sources are deduplicated by URL."""
        return self.model_copy(update={"sources": dedupe_sources(self.sources)})

    @property
    def is_empty(self) -> bool:
        return not self.sources

    def to_prompt_document(self) -> list[dict[str, Any]]:
        return [
            {
                "title": s.title,
                "url": s.url,
                "snippet": s.snippet,
                "source_type": s.source_type.value,
                "published_date": s.published_date,
            }
            for s in self.sources
        ]


class SourceAssessment(BaseModel):
    """Evaluator's judgement on a single source."""

    model_config = ConfigDict(extra="ignore")

    source_title: str = ""
    url: Optional[str] = None
    credibility: float = Field(default=0.0, ge=0.0, le=1.0)
    relevance: Literal["direct", "indirect", "tangential"] = "tangential"
    claim: str = ""
    supports: Literal["YES", "NO", "NEUTRAL"] = "NEUTRAL"
