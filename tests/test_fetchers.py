"""
Tests for the deterministic data fetchers.

Every fetcher talks to a mocked HttpClient; failures must come back as
FetchResult(success=False) rather than exceptions.
"""

from datetime import datetime, timedelta, timezone

import pytest

from agents.context import FrozenClock
from agents.deterministic.fetchers import (
    CryptoPriceFetcher,
    FetcherRegistry,
    OnchainQueryFetcher,
    SportsResultFetcher,
    StockCloseFetcher,
    WeatherFetcher,
    parse_window_hours,
    quote_currency,
    teams_match,
    to_binance_symbol,
    twap_interval,
)
from core.http import HttpError
from core.schemas import StrategyType

from fixtures.common import NOW, json_response, make_mock_http, make_spec


def _ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _kline(open_time: datetime, close: float, high: float = None, low: float = None) -> list:
    return [
        _ms(open_time),
        str(close),
        str(high or close),
        str(low or close),
        str(close),
        "12.5",
        _ms(open_time + timedelta(seconds=59)),
    ]


@pytest.fixture
def clock():
    return FrozenClock(NOW)


# =============================================================================
# Crypto
# =============================================================================

class TestCryptoHelpers:
    def test_binance_symbol(self):
        assert to_binance_symbol("BTC/USD") == "BTCUSDT"
        assert to_binance_symbol("eth-usdt") == "ETHUSDT"
        assert to_binance_symbol("ETH/BTC") == "ETHBTC"

    def test_quote_currency(self):
        assert quote_currency("BTC/USD") == "USD"
        assert quote_currency("ETH-EUR") == "EUR"
        assert quote_currency("BTCUSDT") == "USDT"

    @pytest.mark.parametrize(
        "window,hours",
        [(None, 1.0), ("1h", 1.0), ("4 hours", 4.0), ("24h", 24.0), ("1d", 24.0), ("30m", 0.5)],
    )
    def test_window_hours(self, window, hours):
        assert parse_window_hours(window) == hours

    @pytest.mark.parametrize(
        "hours,interval,limit",
        [(0.5, "1m", 30), (4, "5m", 48), (48, "5m", 576), (168, "15m", 672), (720, "1h", 720), (2160, "4h", 540)],
    )
    def test_twap_interval_stays_within_kline_limit(self, hours, interval, limit):
        assert twap_interval(hours) == (interval, limit)
        assert limit <= 1000

    def test_twap_window_too_long(self):
        with pytest.raises(ValueError):
            twap_interval(24 * 1001)


class TestCryptoPriceFetcher:
    """Spot (historical vs live) and TWAP paths."""

    def test_past_resolution_time_uses_historical_candle(self, clock):
        moment = datetime(2026, 3, 1, tzinfo=timezone.utc)
        http = make_mock_http({"/klines": [_kline(moment, 98500.0)]})
        spec = make_spec(pair="BTC/USD", comparator=">", threshold=100000.0, resolution_time="2026-03-01T00:00:00Z")

        result = CryptoPriceFetcher(http, clock).fetch(spec)

        assert result.success is True
        assert result.raw_data["price"] == 98500.0
        assert result.raw_data["live"] is False
        assert result.raw_data["source"] == "binance_historical"
        url = http.get.call_args.args[0]
        params = http.get.call_args.kwargs["params"]
        assert url.endswith("/klines")
        assert params["symbol"] == "BTCUSDT"
        assert params["interval"] == "1m"
        assert params["startTime"] == _ms(moment)

    @pytest.mark.parametrize("resolution_time", ["2026-12-31T00:00:00Z", None])
    def test_future_or_absent_time_uses_live_ticker(self, clock, resolution_time):
        http = make_mock_http({"/ticker/price": {"symbol": "BTCUSDT", "price": "101234.50"}})
        fields = {"pair": "BTC/USD", "comparator": ">", "threshold": 100000.0}
        if resolution_time:
            fields["resolution_time"] = resolution_time

        result = CryptoPriceFetcher(http, clock).fetch(make_spec(**fields))

        assert result.success is True
        assert result.raw_data["price"] == 101234.5
        assert result.raw_data["live"] is True
        assert http.get.call_args.args[0].endswith("/ticker/price")

    def test_twap_averages_closes(self, clock):
        moment = datetime(2026, 3, 1, tzinfo=timezone.utc)
        candles = [
            _kline(moment - timedelta(minutes=15), 100.0, high=130.0),
            _kline(moment - timedelta(minutes=10), 110.0),
            _kline(moment - timedelta(minutes=5), 120.0, low=95.0),
        ]
        http = make_mock_http({"/klines": candles})
        spec = make_spec(
            StrategyType.CRYPTO_PRICE_TWAP,
            pair="BTC/USD",
            comparator=">",
            threshold=100.0,
            window="4h",
            resolution_time="2026-03-01T00:00:00Z",
        )

        result = CryptoPriceFetcher(http, clock).fetch(spec)

        assert result.raw_data["twap"] == pytest.approx(110.0)
        assert result.raw_data["high"] == 130.0
        assert result.raw_data["low"] == 95.0
        assert result.raw_data["data_points"] == 3
        params = http.get.call_args.kwargs["params"]
        assert params["interval"] == "5m"
        assert params["limit"] == 48
        assert params["endTime"] == _ms(moment)
        assert params["startTime"] == _ms(moment - timedelta(hours=4))

    def test_long_twap_window_uses_coarser_candles(self, clock):
        moment = datetime(2026, 3, 1, tzinfo=timezone.utc)
        candles = [_kline(moment - timedelta(minutes=15 * (i + 1)), 100.0) for i in range(672)]
        http = make_mock_http({"/klines": candles})
        spec = make_spec(
            StrategyType.CRYPTO_PRICE_TWAP,
            pair="BTC/USDT",
            comparator=">",
            threshold=90.0,
            window="7d",
            resolution_time="2026-03-01T00:00:00Z",
        )

        result = CryptoPriceFetcher(http, clock).fetch(spec)

        params = http.get.call_args.kwargs["params"]
        assert params["interval"] == "15m"
        assert params["limit"] == 672
        assert params["startTime"] == _ms(moment - timedelta(days=7))
        assert result.raw_data["window_hours"] == 168
        assert result.raw_data["data_points"] == result.raw_data["expected_points"] == 672

    def test_empty_candles_fail(self, clock):
        http = make_mock_http({"/klines": []})
        result = CryptoPriceFetcher(http, clock).fetch(make_spec())
        assert result.success is False
        assert "No candle data" in result.error

    def test_http_status_fails(self, clock):
        http = make_mock_http({"/klines": json_response({"code": -1121}, status_code=400)})
        result = CryptoPriceFetcher(http, clock).fetch(make_spec())
        assert result.success is False
        assert "HTTP 400" in result.error

    def test_transport_error_fails(self, clock):
        http = make_mock_http({"/klines": HttpError("connection reset")})
        result = CryptoPriceFetcher(http, clock).fetch(make_spec())
        assert result.success is False
        assert result.provider_name == "binance"


# =============================================================================
# Stocks
# =============================================================================

def _bar(close: float) -> dict:
    return {
        "1. open": str(close - 1),
        "2. high": str(close + 2),
        "3. low": str(close - 2),
        "4. close": str(close),
        "5. volume": "1000000",
    }


class TestStockCloseFetcher:
    def _spec(self, date: str = "2026-02-27"):
        return make_spec(
            StrategyType.STOCK_CLOSE_PRICE,
            ticker="aapl",
            comparator=">",
            threshold=200.0,
            resolution_date=date,
        )

    def test_exact_date(self, clock):
        http = make_mock_http({"alphavantage": {"Time Series (Daily)": {"2026-02-27": _bar(210.5)}}})

        result = StockCloseFetcher(http, clock, api_key="demo").fetch(self._spec())

        assert result.success is True
        assert result.raw_data["close"] == 210.5
        assert result.raw_data["exact_date_match"] is True
        params = http.get.call_args.kwargs["params"]
        assert params["symbol"] == "AAPL"
        assert params["function"] == "TIME_SERIES_DAILY"

    def test_weekend_falls_back_to_prior_trading_day(self, clock):
        series = {"2026-02-26": _bar(205.0), "2026-02-27": _bar(210.5), "2026-03-02": _bar(199.0)}
        http = make_mock_http({"alphavantage": {"Time Series (Daily)": series}})

        result = StockCloseFetcher(http, clock, api_key="demo").fetch(self._spec("2026-02-28"))

        assert result.success is True
        assert result.raw_data["date"] == "2026-02-27"
        assert result.raw_data["requested_date"] == "2026-02-28"
        assert result.raw_data["exact_date_match"] is False
        assert result.raw_data["close"] == 210.5

    def test_no_fallback_for_today(self, clock):
        http = make_mock_http({"alphavantage": {"Time Series (Daily)": {"2026-03-13": _bar(210.5)}}})

        result = StockCloseFetcher(http, clock, api_key="demo").fetch(self._spec("2026-03-15"))

        assert result.success is False
        assert "No close for AAPL on 2026-03-15" in result.error
        assert result.raw_data["requested_date"] == "2026-03-15"

    def test_missing_key(self, clock):
        result = StockCloseFetcher(make_mock_http(), clock).fetch(self._spec())
        assert result.success is False
        assert "ALPHA_VANTAGE_API_KEY" in result.error

    def test_rate_limited(self, clock):
        http = make_mock_http({"alphavantage": {"Note": "Thank you for using Alpha Vantage!"}})
        result = StockCloseFetcher(http, clock, api_key="demo").fetch(self._spec())
        assert result.success is False
        assert "rate limit" in result.error

    def test_no_prior_date(self, clock):
        http = make_mock_http({"alphavantage": {"Time Series (Daily)": {"2026-03-02": _bar(199.0)}}})
        result = StockCloseFetcher(http, clock, api_key="demo").fetch(self._spec("2026-02-27"))
        assert result.success is False
        assert result.raw_data["requested_date"] == "2026-02-27"


# =============================================================================
# Sports
# =============================================================================

def _event(home: str, away: str, home_score: str, away_score: str, status: str = "STATUS_FINAL") -> dict:
    return {
        "id": "401585",
        "name": f"{away} at {home}",
        "status": {"period": 4, "type": {"name": status, "description": "Final", "completed": status == "STATUS_FINAL"}},
        "competitions": [{
            "competitors": [
                {"homeAway": "home", "score": home_score, "team": {"displayName": home}},
                {"homeAway": "away", "score": away_score, "team": {"displayName": away}},
            ]
        }],
    }


class TestSportsResultFetcher:
    def _spec(self, **extra):
        fields = {"team_a": "Lakers", "team_b": "Celtics", "event_date": "2026-03-10", **extra}
        return make_spec(StrategyType.SPORTS_RESULT, **fields)

    def test_teams_match_loosely(self):
        assert teams_match("Los Angeles Lakers", "lakers")
        assert teams_match("LA Clippers", "L.A. Clippers")
        assert not teams_match("Boston Celtics", "Lakers")
        assert not teams_match("", "Lakers")

    def test_finds_game_and_winner(self, clock):
        payload = {"events": [
            _event("Denver Nuggets", "Utah Jazz", "120", "101"),
            _event("Boston Celtics", "Los Angeles Lakers", "108", "112"),
        ]}
        http = make_mock_http({"scoreboard": payload})

        result = SportsResultFetcher(http, clock).fetch(self._spec())

        assert result.success is True
        data = result.raw_data
        assert data["home_team"] == "Boston Celtics"
        assert data["winner"] == "Los Angeles Lakers"
        assert data["completed"] is True
        assert data["league"] == "basketball/nba"
        assert http.get.call_args.kwargs["params"] == {"dates": "20260310"}
        assert "/basketball/nba/scoreboard" in http.get.call_args.args[0]

    def test_no_matching_game_names_teams_and_date(self, clock):
        http = make_mock_http({"scoreboard": {"events": [_event("Denver Nuggets", "Utah Jazz", "120", "101")]}})

        result = SportsResultFetcher(http, clock).fetch(self._spec())

        assert result.success is False
        assert "Lakers" in result.error
        assert "Celtics" in result.error
        assert "20260310" in result.error
        assert result.raw_data["searched_teams"] == ["Lakers", "Celtics"]
        assert result.raw_data["events_on_date"] == 1

    def test_league_from_competition(self, clock):
        http = make_mock_http({"scoreboard": {"events": [_event("Arsenal", "Chelsea", "1", "1")]}})

        result = SportsResultFetcher(http, clock).fetch(
            make_spec(StrategyType.SPORTS_RESULT, team_a="Arsenal", team_b="Chelsea",
                      event_date="2026-03-08", competition="EPL")
        )

        assert result.raw_data["winner"] == "DRAW"
        assert "/soccer/eng.1/scoreboard" in http.get.call_args.args[0]


# =============================================================================
# Weather
# =============================================================================

class TestWeatherFetcher:
    def _payload(self, t_max=18.2, t_min=9.1, rain=3.4):
        return {"daily": {
            "time": ["2026-03-10"],
            "temperature_2m_max": [t_max],
            "temperature_2m_min": [t_min],
            "precipitation_sum": [rain],
        }}

    def test_past_date_uses_archive(self, clock):
        http = make_mock_http({"archive-api": self._payload()})
        spec = make_spec(StrategyType.WEATHER_API, location="London", metric="high temperature",
                         comparator=">", threshold=15, date="2026-03-10", unit="celsius")

        result = WeatherFetcher(http, clock).fetch(spec)

        assert result.success is True
        assert result.raw_data["measurement_type"] == "max"
        assert result.raw_data["value"] == 18.2
        assert result.raw_data["is_forecast"] is False
        params = http.get.call_args.kwargs["params"]
        assert params["temperature_unit"] == "celsius"
        assert params["start_date"] == params["end_date"] == "2026-03-10"

    def test_future_date_uses_forecast(self, clock):
        http = make_mock_http({"api.open-meteo.com/v1/forecast": self._payload()})
        spec = make_spec(StrategyType.WEATHER_API, location="NYC", metric="rainfall",
                         comparator=">", threshold=1, date="2026-03-20")

        result = WeatherFetcher(http, clock).fetch(spec)

        assert result.raw_data["is_forecast"] is True
        assert result.raw_data["measurement_type"] == "precipitation"
        assert result.raw_data["unit"] == "mm"

    def test_average_and_fahrenheit(self, clock):
        http = make_mock_http({"archive-api": self._payload(t_max=70.0, t_min=50.0)})
        spec = make_spec(StrategyType.WEATHER_API, location="Miami", metric="average temperature",
                         comparator=">", threshold=55, date="2026-03-10", unit="°F")

        result = WeatherFetcher(http, clock).fetch(spec)

        assert result.raw_data["value"] == 60.0
        assert http.get.call_args.kwargs["params"]["temperature_unit"] == "fahrenheit"

    def test_unknown_location(self, clock):
        result = WeatherFetcher(make_mock_http(), clock).fetch(
            make_spec(StrategyType.WEATHER_API, location="Atlantis", metric="max",
                      comparator=">", threshold=1, date="2026-03-10")
        )
        assert result.success is False
        assert "Atlantis" in result.error
        assert "london" in result.raw_data["known_locations"]

    def test_null_value(self, clock):
        http = make_mock_http({"archive-api": self._payload(t_max=None)})
        result = WeatherFetcher(http, clock).fetch(
            make_spec(StrategyType.WEATHER_API, location="Paris", metric="max temperature",
                      comparator=">", threshold=1, date="2026-03-10")
        )
        assert result.success is False
        assert result.error == "Metric value not available for this date"
        assert result.raw_data["location"] == "Paris"


# =============================================================================
# On-chain
# =============================================================================

class TestOnchainQueryFetcher:
    def test_native_balance(self, clock):
        http = make_mock_http({"llamarpc": {"jsonrpc": "2.0", "id": 1, "result": hex(3 * 10**18)}})
        spec = make_spec(StrategyType.ONCHAIN_QUERY, chain="Ethereum", metric="ETH balance",
                         address="0xabc", comparator=">", threshold=2)

        result = OnchainQueryFetcher(http, clock).fetch(spec)

        assert result.success is True
        assert result.raw_data["value"] == 3.0
        assert result.raw_data["balance_wei"] == str(3 * 10**18)
        body = http.post.call_args.kwargs["json"]
        assert body["method"] == "eth_getBalance"
        assert body["params"] == ["0xabc", "latest"]

    def test_other_metrics_probe_chain_head(self, clock):
        http = make_mock_http({"base.org": {"jsonrpc": "2.0", "id": 1, "result": "0x10"}})
        spec = make_spec(StrategyType.ONCHAIN_QUERY, chain="base", metric="TVL",
                         comparator=">", threshold=1e9)

        result = OnchainQueryFetcher(http, clock).fetch(spec)

        assert result.raw_data["probe"] is True
        assert result.raw_data["latest_block"] == 16

    def test_rpc_error(self, clock):
        http = make_mock_http({"llamarpc": {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "bad"}}})
        spec = make_spec(StrategyType.ONCHAIN_QUERY, chain="eth", metric="balance",
                         address="0xabc", comparator=">", threshold=1)
        result = OnchainQueryFetcher(http, clock).fetch(spec)
        assert result.success is False
        assert "RPC error: bad" in result.error

    def test_unsupported_chain(self, clock):
        spec = make_spec(StrategyType.ONCHAIN_QUERY, chain="dogechain", metric="tvl",
                         comparator=">", threshold=1)
        result = OnchainQueryFetcher(make_mock_http(), clock).fetch(spec)
        assert result.success is False
        assert "ethereum" in result.error


# =============================================================================
# Registry
# =============================================================================

class TestFetcherRegistry:
    def test_default_registry_covers_fetchable_strategies(self, clock):
        registry = FetcherRegistry.default(make_mock_http(), clock)
        supported = registry.supported()
        assert StrategyType.ECONOMIC_DATA not in supported
        assert registry.get(StrategyType.CRYPTO_PRICE_SPOT) is registry.get(StrategyType.CRYPTO_PRICE_TWAP)
        assert len(supported) == 6

    def test_unsupported_strategy_is_a_failed_result(self, clock):
        registry = FetcherRegistry(clock)
        spec = make_spec(StrategyType.ECONOMIC_DATA, indicator="CPI", comparator=">", threshold=3)

        result = registry.fetch(spec)

        assert result.success is False
        assert result.error.startswith("UNSUPPORTED_STRATEGY")
        assert result.fetched_at == NOW

    def test_register(self, clock):
        registry = FetcherRegistry(clock)
        fetcher = CryptoPriceFetcher(make_mock_http(), clock)
        registry.register(StrategyType.CRYPTO_PRICE_SPOT, fetcher)
        assert registry.get(StrategyType.CRYPTO_PRICE_SPOT) is fetcher
