"""
Data fetchers for the deterministic track.
"""

from .base import Fetcher, guarded_fetch
from .crypto import CryptoPriceFetcher, parse_window_hours, quote_currency, to_binance_symbol, twap_interval
from .onchain import PUBLIC_RPCS, OnchainQueryFetcher
from .registry import FetcherRegistry
from .sports import SportsResultFetcher, teams_match
from .stock import StockCloseFetcher
from .weather import WeatherFetcher, lookup_location

__all__ = [
    "Fetcher",
    "FetcherRegistry",
    "guarded_fetch",
    "CryptoPriceFetcher",
    "StockCloseFetcher",
    "SportsResultFetcher",
    "WeatherFetcher",
    "OnchainQueryFetcher",
    "PUBLIC_RPCS",
    "to_binance_symbol",
    "quote_currency",
    "parse_window_hours",
    "twap_interval",
    "teams_match",
    "lookup_location",
]
