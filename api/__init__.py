"""
HTTP API for the oracle engine:
- POST /resolve - Resolve one market
- POST /resolve/batch - Resolve several markets
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
