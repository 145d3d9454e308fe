"""
FastAPI Application

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from api.errors import APIError, api_error_handler, generic_error_handler, validation_error_handler
from api.routes import health, resolve


def _resolve_log_level() -> int:
    """ORACLE_LOG_LEVEL, then log_level from the config file, defaulting to INFO."""
    raw = os.getenv("ORACLE_LOG_LEVEL")
    if raw is None:
        from core.config import load_runtime_config

        raw = load_runtime_config().log_level
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Oracle Engine API",
        description="""
Prediction market resolution.

## Endpoints

- **POST /resolve** - Resolve one market
- **POST /resolve/batch** - Resolve several markets, results in request order
- **GET /health** - Health check

Every market yields a ResolutionResult with an outcome, confidence and
settlement action (SETTLE, DEFER, ESCALATE or REJECT).
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(resolve.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
