"""API route handlers."""

from api.routes import health, resolve

__all__ = ["health", "resolve"]
