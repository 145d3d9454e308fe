"""
HTTP Client

Thin wrapper over a requests session used by fetchers and news providers.
Every call carries a timeout; transport errors surface as HttpError.
"""

from __future__ import annotations

import json as jsonlib
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class HttpResponse:
    """
    Response from an HTTP request.
    """
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """Check if request was successful (2xx status)."""
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse response as JSON; raises ValueError on malformed bodies."""
        return jsonlib.loads(self.content)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise HttpError(
                f"HTTP {self.status_code}",
                status_code=self.status_code,
                response=self,
            )


class HttpError(Exception):
    """Transport failure or non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[HttpResponse] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class HttpClient:
    """
    HTTP client shared by all providers of one pipeline.

    Usage:
        client = HttpClient(timeout=10.0)

        response = client.get("https://api.example.com/data", params={"q": "x"})
        if response.ok:
            data = response.json()
    """

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        default_headers: Optional[dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            default_headers: Headers to include in all requests
            session: Pre-built session (tests inject a stub here)
        """
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self._session = session

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self.default_headers)
        return self._session

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Returns:
            HttpResponse for any status code

        Raises:
            HttpError: on connection errors and timeouts
        """
        session = self._get_session()
        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = session.request(
                method=method,
                url=url,
                headers=request_headers,
                params=params,
                json=json,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            raise HttpError(str(e)) from e

        return HttpResponse(
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            url=str(response.url),
            elapsed_ms=response.elapsed.total_seconds() * 1000,
        )

    def get(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Make a GET request."""
        return self.request("GET", url, headers=headers, params=params, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        json: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """Make a POST request."""
        return self.request("POST", url, headers=headers, params=params, json=json, timeout=timeout)

    def close(self) -> None:
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()
