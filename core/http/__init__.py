"""
HTTP Client Module

Provider-agnostic HTTP client used by fetchers and news providers.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
