"""
Crypto price fetcher (Binance public API).

Spot: live ticker, or the 1-minute candle covering a past resolution time.
TWAP: mean candle close over a window ending at the resolution time.
"""

from __future__ import annotations

import re
from datetime import timedelta
from statistics import mean
from typing import Any

from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult, StrategyType, parse_timestamp

from .base import Clock, fail, from_millis, get_json, guarded_fetch, to_millis

BINANCE_BASE_URL = "https://api.binance.com/api/v3"

# Binance kline array positions
_OPEN_TIME, _HIGH, _LOW, _CLOSE, _CLOSE_TIME = 0, 2, 3, 4, 6

_WINDOW_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(m|min|h|hr|hour|hours|d|day|days)?", re.IGNORECASE)


def to_binance_symbol(pair: str) -> str:
    """'BTC/USD' -> 'BTCUSDT'. Binance quotes dollars in USDT."""
    symbol = re.sub(r"[^A-Za-z0-9]", "", pair).upper()
    if symbol.endswith("USD"):
        symbol += "T"
    return symbol


def quote_currency(pair: str) -> str | None:
    """Quote side of a pair such as 'BTC/USD' or 'ETH-EUR'."""
    parts = re.split(r"[/\-_ ]", pair.strip().upper())
    if len(parts) == 2 and parts[1]:
        return parts[1]
    for quote in ("USDT", "USDC", "USD", "EUR", "BTC"):
        if pair.upper().endswith(quote) and len(pair) > len(quote):
            return quote
    return None


def parse_window_hours(window: Any) -> float:
    """'1h' -> 1, '4h' -> 4, '24h'/'1d' -> 24, '30m' -> 0.5. Defaults to 1."""
    if window is None:
        return 1.0
    match = _WINDOW_RE.search(str(window))
    if not match:
        return 1.0
    amount = float(match.group(1))
    unit = (match.group(2) or "h").lower()
    if unit.startswith("m"):
        return amount / 60
    if unit.startswith("d"):
        return amount * 24
    return amount


# Candle widths from finest to coarsest, as (interval, candles per hour).
_TWAP_INTERVALS = (("5m", 12), ("15m", 4), ("1h", 1), ("4h", 0.25), ("1d", 1 / 24))
MAX_KLINES = 1000


def twap_interval(hours: float) -> tuple[str, int]:
    """
    Finest kline interval whose candle count for the window fits in one
    request (Binance returns at most MAX_KLINES candles).
    """
    if hours <= 1:
        return "1m", max(1, int(round(hours * 60)))
    for interval, per_hour in _TWAP_INTERVALS:
        limit = max(1, int(round(hours * per_hour)))
        if limit <= MAX_KLINES:
            return interval, limit
    raise ValueError(f"TWAP window of {hours}h is too long")


class CryptoPriceFetcher:
    """Serves CRYPTO_PRICE_SPOT and CRYPTO_PRICE_TWAP."""

    provider_name = "binance"

    def __init__(self, http: HttpClient, clock: Clock, *, base_url: str = BINANCE_BASE_URL) -> None:
        self._http = http
        self._clock = clock
        self._base_url = base_url

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        if spec.strategy_type == StrategyType.CRYPTO_PRICE_TWAP:
            return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch_twap(spec))
        return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch_spot(spec))

    def _past_resolution_time(self, spec: DeterministicSpec):
        moment = parse_timestamp(spec.get("resolution_time"))
        if moment is not None and moment < self._clock.now():
            return moment
        return None

    def _fetch_spot(self, spec: DeterministicSpec) -> dict[str, Any]:
        pair = str(spec.get("pair", ""))
        symbol = to_binance_symbol(pair)
        moment = self._past_resolution_time(spec)

        if moment is not None:
            start_ms = to_millis(moment)
            start_ms -= start_ms % 60_000
            candles = get_json(
                self._http,
                f"{self._base_url}/klines",
                self.provider_name,
                params={"symbol": symbol, "interval": "1m", "startTime": start_ms, "limit": 1},
            )
            if not isinstance(candles, list) or not candles:
                raise fail(
                    f"No candle data for {symbol} at {moment.isoformat()}",
                    self.provider_name,
                    symbol=symbol,
                )
            candle = candles[0]
            return {
                "symbol": symbol,
                "pair": pair,
                "price": float(candle[_CLOSE]),
                "open_time": from_millis(candle[_OPEN_TIME]),
                "close_time": from_millis(candle[_CLOSE_TIME]),
                "requested_time": moment.isoformat(),
                "source": "binance_historical",
                "live": False,
            }

        ticker = get_json(
            self._http,
            f"{self._base_url}/ticker/price",
            self.provider_name,
            params={"symbol": symbol},
        )
        if not isinstance(ticker, dict) or "price" not in ticker:
            raise fail(f"No ticker price for {symbol}", self.provider_name, symbol=symbol)
        return {
            "symbol": symbol,
            "pair": pair,
            "price": float(ticker["price"]),
            "source": "binance_spot",
            "live": True,
        }

    def _fetch_twap(self, spec: DeterministicSpec) -> dict[str, Any]:
        pair = str(spec.get("pair", ""))
        symbol = to_binance_symbol(pair)
        hours = parse_window_hours(spec.get("window") or spec.get("aggregation_window"))
        try:
            interval, limit = twap_interval(hours)
        except ValueError as e:
            raise fail(str(e), self.provider_name, symbol=symbol) from e

        params: dict[str, Any] = {"symbol": symbol, "interval": interval, "limit": limit}
        moment = self._past_resolution_time(spec)
        if moment is not None:
            params["startTime"] = to_millis(moment - timedelta(hours=hours))
            params["endTime"] = to_millis(moment)

        candles = get_json(self._http, f"{self._base_url}/klines", self.provider_name, params=params)
        if not isinstance(candles, list) or not candles:
            raise fail(f"No candle data for {symbol} TWAP window", self.provider_name, symbol=symbol)

        closes = [float(c[_CLOSE]) for c in candles]
        return {
            "symbol": symbol,
            "pair": pair,
            "twap": mean(closes),
            "price": mean(closes),
            "high": max(float(c[_HIGH]) for c in candles),
            "low": min(float(c[_LOW]) for c in candles),
            "data_points": len(candles),
            "expected_points": limit,
            "interval": interval,
            "window_hours": hours,
            "period_start": from_millis(candles[0][_OPEN_TIME]),
            "period_end": from_millis(candles[-1][_CLOSE_TIME]),
            "source": "binance_twap",
            "live": moment is None,
        }
