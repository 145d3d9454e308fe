"""
Stock close fetcher (Alpha Vantage TIME_SERIES_DAILY).

When a past resolution date has no bar (weekend, market holiday) the
most recent prior trading day is used and `exact_date_match` is False.
A date of today or later never falls back.
"""

from __future__ import annotations

from typing import Any, Optional

from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult

from .base import Clock, fail, get_json, guarded_fetch

ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"

_SERIES_KEY = "Time Series (Daily)"
_BAR_FIELDS = {
    "open": "1. open",
    "high": "2. high",
    "low": "3. low",
    "close": "4. close",
    "volume": "5. volume",
}


class StockCloseFetcher:
    """Serves STOCK_CLOSE_PRICE."""

    provider_name = "alpha_vantage"

    def __init__(
        self,
        http: HttpClient,
        clock: Clock,
        *,
        api_key: Optional[str] = None,
        base_url: str = ALPHA_VANTAGE_URL,
    ) -> None:
        self._http = http
        self._clock = clock
        self._api_key = api_key
        self._base_url = base_url

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch(spec))

    def _fetch(self, spec: DeterministicSpec) -> dict[str, Any]:
        if not self._api_key:
            raise fail("ALPHA_VANTAGE_API_KEY not configured", self.provider_name)

        ticker = str(spec.get("ticker", "")).strip().upper()
        date = str(spec.get("resolution_date", ""))[:10]

        payload = get_json(
            self._http,
            self._base_url,
            self.provider_name,
            params={
                "function": "TIME_SERIES_DAILY",
                "symbol": ticker,
                "outputsize": "compact",
                "apikey": self._api_key,
            },
        )
        if not isinstance(payload, dict):
            raise fail("Unexpected Alpha Vantage payload", self.provider_name)
        if "Error Message" in payload:
            raise fail(f"Alpha Vantage error: {payload['Error Message']}", self.provider_name, ticker=ticker)
        for key in ("Note", "Information"):
            if key in payload:
                raise fail(f"Alpha Vantage rate limit: {payload[key]}", self.provider_name, ticker=ticker)

        series = payload.get(_SERIES_KEY)
        if not isinstance(series, dict) or not series:
            raise fail(f"No daily series returned for {ticker}", self.provider_name, ticker=ticker)

        if date in series:
            trading_date, exact = date, True
        elif date >= self._clock.now().date().isoformat():
            # Today or later: the close for that date does not exist yet
            raise fail(
                f"No close for {ticker} on {date} yet",
                self.provider_name,
                ticker=ticker,
                requested_date=date,
            )
        else:
            prior = sorted(d for d in series if d <= date)
            if not prior:
                raise fail(
                    f"No trading data for {ticker} on or before {date}",
                    self.provider_name,
                    ticker=ticker,
                    requested_date=date,
                )
            trading_date, exact = prior[-1], False

        bar = series[trading_date]
        data: dict[str, Any] = {
            "ticker": ticker,
            "requested_date": date,
            "date": trading_date,
            "exact_date_match": exact,
            "source": "alpha_vantage",
        }
        for name, key in _BAR_FIELDS.items():
            if key in bar:
                data[name] = float(bar[key])
        if "close" not in data:
            raise fail(f"Close price missing for {ticker} on {trading_date}", self.provider_name)
        return data
