"""
Weather fetcher (Open-Meteo, no key required).

Future dates hit the forecast endpoint, past dates the archive endpoint.
Locations resolve through a small built-in gazetteer.
"""

from __future__ import annotations

from typing import Any, Optional

from core.http import HttpClient
from core.schemas import DeterministicSpec, FetchResult

from .base import Clock, fail, get_json, guarded_fetch

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"

LOCATIONS: dict[str, tuple[float, float]] = {
    "new york": (40.7128, -74.0060),
    "nyc": (40.7128, -74.0060),
    "los angeles": (34.0522, -118.2437),
    "chicago": (41.8781, -87.6298),
    "miami": (25.7617, -80.1918),
    "san francisco": (37.7749, -122.4194),
    "seattle": (47.6062, -122.3321),
    "london": (51.5074, -0.1278),
    "paris": (48.8566, 2.3522),
    "tokyo": (35.6762, 139.6503),
    "sydney": (-33.8688, 151.2093),
    "berlin": (52.5200, 13.4050),
    "dubai": (25.2048, 55.2708),
    "singapore": (1.3521, 103.8198),
    "hong kong": (22.3193, 114.1694),
}


def lookup_location(name: str) -> Optional[tuple[float, float]]:
    key = name.strip().lower()
    if key in LOCATIONS:
        return LOCATIONS[key]
    for known, coords in LOCATIONS.items():
        if known in key or key in known:
            return coords
    return None


def temperature_unit(unit: Any) -> str:
    text = str(unit or "").strip().lower()
    if "fahrenheit" in text or text in ("f", "°f"):
        return "fahrenheit"
    return "celsius"


class WeatherFetcher:
    """Serves WEATHER_API."""

    provider_name = "open_meteo"

    def __init__(
        self,
        http: HttpClient,
        clock: Clock,
        *,
        forecast_url: str = FORECAST_URL,
        archive_url: str = ARCHIVE_URL,
    ) -> None:
        self._http = http
        self._clock = clock
        self._forecast_url = forecast_url
        self._archive_url = archive_url

    def fetch(self, spec: DeterministicSpec) -> FetchResult:
        return guarded_fetch(self.provider_name, self._clock, lambda: self._fetch(spec))

    def _fetch(self, spec: DeterministicSpec) -> dict[str, Any]:
        location = str(spec.get("location", ""))
        coords = lookup_location(location)
        if coords is None:
            raise fail(
                f"Unknown location: {location}",
                self.provider_name,
                known_locations=sorted(LOCATIONS),
            )

        date = str(spec.get("date", ""))[:10]
        metric = str(spec.get("metric", "temperature")).lower()
        unit = temperature_unit(spec.get("unit"))
        is_forecast = date > self._clock.now().date().isoformat()

        payload = get_json(
            self._http,
            self._forecast_url if is_forecast else self._archive_url,
            self.provider_name,
            params={
                "latitude": coords[0],
                "longitude": coords[1],
                "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum",
                "temperature_unit": unit,
                "start_date": date,
                "end_date": date,
                "timezone": "auto",
            },
        )
        daily = payload.get("daily") if isinstance(payload, dict) else None
        if not daily:
            raise fail(f"No daily weather data for {location} on {date}", self.provider_name)

        def first(key: str) -> Optional[float]:
            values = daily.get(key) or []
            return values[0] if values else None

        t_max = first("temperature_2m_max")
        t_min = first("temperature_2m_min")
        precipitation = first("precipitation_sum")

        if "precip" in metric or "rain" in metric:
            measurement, value, value_unit = "precipitation", precipitation, "mm"
        elif "min" in metric or "low" in metric:
            measurement, value, value_unit = "min", t_min, unit
        elif "avg" in metric or "average" in metric or "mean" in metric:
            measurement = "avg"
            value = (t_max + t_min) / 2 if t_max is not None and t_min is not None else None
            value_unit = unit
        else:
            measurement, value, value_unit = "max", t_max, unit

        data = {
            "location": location,
            "coordinates": {"latitude": coords[0], "longitude": coords[1]},
            "date": date,
            "metric": metric,
            "measurement_type": measurement,
            "value": value,
            "unit": value_unit,
            "daily_max": t_max,
            "daily_min": t_min,
            "precipitation_mm": precipitation,
            "is_forecast": is_forecast,
        }
        if value is None:
            raise fail("Metric value not available for this date", self.provider_name, **data)
        return data
