"""
Strategy -> fetcher lookup table.
"""

from __future__ import annotations

from typing import Optional

from core.config import RuntimeConfig
from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult, StrategyType

from .base import Clock, Fetcher
from .crypto import CryptoPriceFetcher
from .onchain import OnchainQueryFetcher
from .sports import SportsResultFetcher
from .stock import StockCloseFetcher
from .weather import WeatherFetcher


class FetcherRegistry:
    """
    Maps each StrategyType to the fetcher that serves it.

    Strategies without a registered fetcher (ECONOMIC_DATA by default)
    produce a failed FetchResult rather than raising.
    """

    def __init__(self, clock: Clock, fetchers: Optional[dict[StrategyType, Fetcher]] = None) -> None:
        self._clock = clock
        self._fetchers: dict[StrategyType, Fetcher] = dict(fetchers or {})

    @classmethod
    def default(cls, http: HttpClient, clock: Clock, config: Optional[RuntimeConfig] = None) -> "FetcherRegistry":
        config = config or RuntimeConfig()
        crypto = CryptoPriceFetcher(http, clock)
        return cls(
            clock,
            {
                StrategyType.CRYPTO_PRICE_SPOT: crypto,
                StrategyType.CRYPTO_PRICE_TWAP: crypto,
                StrategyType.STOCK_CLOSE_PRICE: StockCloseFetcher(
                    http, clock, api_key=config.providers.alpha_vantage_api_key
                ),
                StrategyType.SPORTS_RESULT: SportsResultFetcher(http, clock),
                StrategyType.WEATHER_API: WeatherFetcher(http, clock),
                StrategyType.ONCHAIN_QUERY: OnchainQueryFetcher(http, clock),
            },
        )

    def register(self, strategy: StrategyType, fetcher: Fetcher) -> None:
        self._fetchers[strategy] = fetcher

    def get(self, strategy: StrategyType) -> Optional[Fetcher]:
        return self._fetchers.get(strategy)

    def supported(self) -> list[StrategyType]:
        return [s for s in StrategyType if s in self._fetchers]

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        fetcher = self.get(spec.strategy_type)
        if fetcher is None:
            return FetchResult.failure(
                "none",
                f"UNSUPPORTED_STRATEGY: no data provider for {spec.strategy_type.value}",
                self._clock.now(),
            )
        return fetcher.fetch(spec)
