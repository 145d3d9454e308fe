"""
Resolve Routes

POST /resolve resolves one market, POST /resolve/batch several. Both
always answer 200 with ResolutionResults: failures inside the pipeline
are part of the result, not HTTP errors.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_pipeline
from api.models.requests import BatchResolveRequest, ResolveRequest
from api.models.responses import BatchResolveResponse, ResolveResponse
from orchestrator import Pipeline


logger = logging.getLogger(__name__)

router = APIRouter(tags=["resolve"])


# Sync handlers: FastAPI runs them in its threadpool, the pipeline blocks on I/O
@router.post("/resolve", response_model=ResolveResponse)
def resolve(request: ResolveRequest, pipeline: Pipeline = Depends(get_pipeline)) -> ResolveResponse:
    logger.info("POST /resolve market=%s", request.market.market_id)
    result = pipeline.resolve_market(request.market)
    return ResolveResponse(result=result.to_dict())


@router.post("/resolve/batch", response_model=BatchResolveResponse)
def resolve_batch(
    request: BatchResolveRequest,
    pipeline: Pipeline = Depends(get_pipeline),
) -> BatchResolveResponse:
    logger.info("POST /resolve/batch markets=%d", len(request.markets))
    results = pipeline.resolve_markets(request.markets)
    return BatchResolveResponse(count=len(results), results=[r.to_dict() for r in results])
