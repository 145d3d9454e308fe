"""
API Request Models

Pydantic models for request validation. Markets are validated with the
core Market schema, so `marketId` and `market_id` are both accepted.
"""

from pydantic import BaseModel, Field

from core.schemas import Market


class ResolveRequest(BaseModel):
    """Request body for POST /resolve."""

    market: Market = Field(..., description="The market to resolve")


class BatchResolveRequest(BaseModel):
    """Request body for POST /resolve/batch."""

    markets: list[Market] = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Markets to resolve, in order",
    )
