"""
Core Schemas
File: deterministic.py

Purpose: Deterministic track artifacts.
DeterministicSpec / ParseRejection are the two variants the parser can
produce; FetchResult is the normalized output of every fetcher.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field


class StrategyType(str, Enum):
    """Fixed enumeration of data-fetch strategies."""

    CRYPTO_PRICE_SPOT = "CRYPTO_PRICE_SPOT"
    CRYPTO_PRICE_TWAP = "CRYPTO_PRICE_TWAP"
    STOCK_CLOSE_PRICE = "STOCK_CLOSE_PRICE"
    ONCHAIN_QUERY = "ONCHAIN_QUERY"
    SPORTS_RESULT = "SPORTS_RESULT"
    WEATHER_API = "WEATHER_API"
    ECONOMIC_DATA = "ECONOMIC_DATA"


# Fields the parser must extract for each strategy; absence forces rejection.
REQUIRED_FIELDS: dict[StrategyType, tuple[str, ...]] = {
    StrategyType.CRYPTO_PRICE_SPOT: ("pair", "comparator", "threshold"),
    StrategyType.CRYPTO_PRICE_TWAP: ("pair", "comparator", "threshold"),
    StrategyType.STOCK_CLOSE_PRICE: ("ticker", "comparator", "threshold", "resolution_date"),
    StrategyType.ONCHAIN_QUERY: ("chain", "metric", "comparator", "threshold"),
    StrategyType.SPORTS_RESULT: ("team_a", "team_b", "event_date"),
    StrategyType.WEATHER_API: ("location", "metric", "comparator", "threshold", "date"),
    StrategyType.ECONOMIC_DATA: ("indicator", "comparator", "threshold"),
}


class DeterministicSpec(BaseModel):
    """
    Strategy-typed parameter set sufficient to drive one fetcher.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    market_id: str = Field(..., min_length=1)
    strategy_type: StrategyType
    parsed_fields: dict[str, Any] = Field(
        default_factory=dict,
        description="comparator, threshold, resolution time, identifiers...",
    )
    ready: bool = Field(default=True)

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a parsed field, treating blank strings as missing."""
        value = self.parsed_fields.get(name, default)
        if isinstance(value, str) and not value.strip():
            return default
        return value

    @property
    def comparator(self) -> str | None:
        return self.get("comparator")

    @property
    def threshold(self) -> float | None:
        value = self.get("threshold")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        return None


class ParseRejection(BaseModel):
    """The parser refused to produce a spec for this market."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    market_id: str
    reason: str = Field(..., min_length=1)


ParserResult = Union[DeterministicSpec, ParseRejection]


class FetchResult(BaseModel):
    """
    Normalized result of one fetch attempt.

    Fetchers never raise; every failure path populates `error`.
    """

    model_config = ConfigDict(extra="forbid")

    success: bool
    raw_data: dict[str, Any] = Field(default_factory=dict)
    provider_name: str
    fetched_at: datetime
    error: str | None = None

    @classmethod
    def failure(
        cls,
        provider_name: str,
        error: str,
        fetched_at: datetime,
        data: dict[str, Any] | None = None,
    ) -> "FetchResult":
        """Create a failure result with optional diagnostic context."""
        return cls(
            success=False,
            raw_data=data or {},
            provider_name=provider_name,
            fetched_at=fetched_at,
            error=error,
        )

    @property
    def has_data(self) -> bool:
        return self.success and bool(self.raw_data)
