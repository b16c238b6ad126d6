"""Helpers for fetching raw geocoding, forecast and air-quality JSON from Open-Meteo."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Set

import requests_cache
from retry_requests import retry

from weathercore.config import settings
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="open_meteo_client")

cache_session = requests_cache.CachedSession(
    settings.http_cache_name,
    backend=settings.http_cache_backend,
    expire_after=settings.http_cache_seconds,
)
session = retry(cache_session, retries=settings.http_retries, backoff_factor=settings.http_backoff_factor)

CURRENT_HOURLY_VARS = ["relativehumidity_2m", "surface_pressure", "visibility", "apparent_temperature"]
CURRENT_DAILY_VARS = ["sunrise", "sunset", "uv_index_max"]
FORECAST_HOURLY_VARS = ["temperature_2m", "weathercode"]

# Accepted spellings per unit system; Open-Meteo reports mph as "mp/h".
TEMPERATURE_UNITS = {
    "celsius": {"°C", "C"},
    "fahrenheit": {"°F", "F"},
}
WIND_SPEED_UNITS = {
    "ms": {"m/s", "ms"},
    "mph": {"mp/h", "mph"},
}
AIR_UNITS = {
    "us_aqi": {"USAQI", "aqi", "US AQI"},
}


def _warn_on_unexpected_units(units: Mapping[str, Any] | None,
                              expected: Mapping[str, Set[str]],
                              *,
                              context: str) -> None:
    """Log a warning if Open-Meteo returns units we did not request."""
    if not units:
        return
    for field, allowed in expected.items():
        actual = units.get(field)
        if actual is None:
            continue
        if actual not in allowed:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": field, "unit": actual, "allowed": sorted(allowed)},
            )


def _weather_unit_expectations(temperature_unit: str, wind_speed_unit: str,
                               temperature_fields: Iterable[str]) -> Dict[str, Set[str]]:
    expected: Dict[str, Set[str]] = {
        field: TEMPERATURE_UNITS.get(temperature_unit, set()) for field in temperature_fields
    }
    expected["windspeed"] = WIND_SPEED_UNITS.get(wind_speed_unit, set())
    return expected


def _get_json(url: str, params: Mapping[str, Any]) -> Dict[str, Any]:
    """GET a URL and decode its JSON body, raising on HTTP errors."""
    resp = session.get(url, params=params, timeout=settings.request_timeout_seconds)
    resp.raise_for_status()
    return resp.json()


def search_locations(name: str,
                     *,
                     count: int | None = None,
                     language: str | None = None,
                     ) -> Dict[str, Any]:
    """Query the geocoding endpoint; returns the raw `{"results": [...]}` payload."""
    params = {
        "name": name,
        "count": count or settings.geocoding_count,
        "language": language or settings.geocoding_language,
        "format": "json",
    }
    logger.debug("Searching locations", extra={"query": name})
    return _get_json(settings.geocoding_url, params)


def fetch_weather_current(latitude: float,
                          longitude: float,
                          *,
                          temperature_unit: str = "celsius",
                          wind_speed_unit: str = "ms",
                          timezone: str = "auto",
                          ) -> Dict[str, Any]:
    """Fetch current weather plus the hourly/daily context used to complete it."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": "true",
        "hourly": ",".join(CURRENT_HOURLY_VARS),
        "daily": ",".join(CURRENT_DAILY_VARS),
        "timezone": timezone,
        "temperature_unit": temperature_unit,
        "windspeed_unit": wind_speed_unit,
    }
    data = _get_json(settings.forecast_url, params)
    _warn_on_unexpected_units(
        data.get("current_weather_units"),
        _weather_unit_expectations(temperature_unit, wind_speed_unit, ["temperature"]),
        context="weather_current",
    )
    return data


def fetch_weather_hours(latitude: float,
                        longitude: float,
                        *,
                        temperature_unit: str = "celsius",
                        wind_speed_unit: str = "ms",
                        forecast_days: int | None = None,
                        timezone: str = "auto",
                        ) -> Dict[str, Any]:
    """Fetch the hourly temperature/weathercode series."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "hourly": ",".join(FORECAST_HOURLY_VARS),
        "forecast_days": forecast_days or settings.forecast_days,
        "timezone": timezone,
        "temperature_unit": temperature_unit,
        "windspeed_unit": wind_speed_unit,
    }
    data = _get_json(settings.forecast_url, params)
    _warn_on_unexpected_units(
        data.get("hourly_units"),
        _weather_unit_expectations(temperature_unit, wind_speed_unit, ["temperature_2m"]),
        context="weather_hourly",
    )
    return data


def fetch_air_current(latitude: float, longitude: float) -> Dict[str, Any]:
    """Fetch the current US AQI for the given coordinates."""
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current": "us_aqi",
    }
    data = _get_json(settings.air_quality_url, params)
    _warn_on_unexpected_units(data.get("current_units"), AIR_UNITS, context="air_current")
    return data
