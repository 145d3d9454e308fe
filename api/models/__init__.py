"""API request and response models."""

from api.models.requests import BatchResolveRequest, ResolveRequest
from api.models.responses import (
    BatchResolveResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ResolveResponse,
)

__all__ = [
    "ResolveRequest",
    "BatchResolveRequest",
    "HealthResponse",
    "ResolveResponse",
    "BatchResolveResponse",
    "ErrorDetail",
    "ErrorResponse",
]
