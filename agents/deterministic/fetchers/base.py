"""
Fetcher interface and shared helpers.

Each fetcher is an independent class exposing `fetch(spec) -> FetchResult`.
They share helpers here, not a base class. `guarded_fetch` is what keeps
the never-raise contract: any failure becomes a tagged FetchResult.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from core.http import HttpClient, HttpError
from core.schemas import DeterministicSpec, FetchFailed, FetchResult

logger = logging.getLogger(__name__)


@runtime_checkable
class Fetcher(Protocol):
    """Capability interface: one implementation per strategy."""

    provider_name: str

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        ...


class Clock(Protocol):
    def now(self) -> datetime:
        ...


def guarded_fetch(
    provider_name: str,
    clock: Clock,
    fn: Callable[[], dict[str, Any]],
) -> FetchResult:
    """
    Run a fetch body and normalize every outcome into a FetchResult.

    The body returns the raw data dict on success and raises FetchFailed
    (with optional diagnostic details) on expected failures.
    """
    fetched_at = clock.now()
    try:
        data = fn()
    except FetchFailed as e:
        logger.info("%s fetch failed: %s", provider_name, e.message)
        return FetchResult.failure(provider_name, e.message, fetched_at, data=e.details.get("data"))
    except HttpError as e:
        logger.info("%s transport error: %s", provider_name, e)
        return FetchResult.failure(provider_name, f"{provider_name} request failed: {e}", fetched_at)
    except Exception as e:
        logger.exception("%s fetch raised unexpectedly", provider_name)
        return FetchResult.failure(provider_name, f"Fetch failed: {e}", fetched_at)

    return FetchResult(
        success=True,
        raw_data=data,
        provider_name=provider_name,
        fetched_at=fetched_at,
    )


def get_json(
    http: HttpClient,
    url: str,
    provider_name: str,
    *,
    params: Optional[dict[str, Any]] = None,
) -> Any:
    """GET a JSON document, raising FetchFailed on non-2xx or malformed bodies."""
    response = http.get(url, params=params)
    return _decode(response, provider_name)


def post_json(
    http: HttpClient,
    url: str,
    provider_name: str,
    *,
    body: Any,
) -> Any:
    response = http.post(url, json=body, headers={"Content-Type": "application/json"})
    return _decode(response, provider_name)


def _decode(response, provider_name: str) -> Any:
    if not response.ok:
        raise FetchFailed(f"{provider_name} API error: HTTP {response.status_code}", provider=provider_name)
    try:
        return response.json()
    except ValueError as e:
        raise FetchFailed(f"{provider_name} returned malformed JSON: {e}", provider=provider_name) from e


def fail(message: str, provider_name: str, **data: Any) -> FetchFailed:
    """Build a FetchFailed carrying diagnostic data for the result."""
    return FetchFailed(message, provider=provider_name, details={"data": data} if data else None)


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def from_millis(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")
