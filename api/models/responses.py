"""
API Response Models
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    ok: bool = True
    service: str = "oracle-engine-api"
    version: str = "v1"


class ResolveResponse(BaseModel):
    """Response for POST /resolve."""

    ok: bool = Field(default=True)
    result: dict[str, Any] = Field(..., description="ResolutionResult as JSON")


class BatchResolveResponse(BaseModel):
    """Response for POST /resolve/batch; results are in request order."""

    ok: bool = Field(default=True)
    count: int = Field(..., description="Number of results")
    results: list[dict[str, Any]] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
