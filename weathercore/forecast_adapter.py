"""Build canonical current conditions and forecast series from raw forecast payloads."""
from __future__ import annotations

import datetime as dt
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import requests

from weathercore.config import settings
from weathercore.data_sources import WeatherDataSource, build_data_source
from weathercore.domain import CurrentConditions, DailySummary, HourlyPoint, Location, UnitSystem
from weathercore.errors import UpstreamUnavailable
from weathercore.weather_codes import decode
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_adapter")

DEFAULT_HUMIDITY_PCT = 0.0
DEFAULT_PRESSURE_HPA = 1013.0
DEFAULT_VISIBILITY_M = 10000.0
DAILY_SAMPLE_HOUR = 12
MAX_DAILY_SUMMARIES = 7

# Errors raised while walking a payload that is missing fields or has the wrong shape.
_PARSE_ERRORS = (KeyError, IndexError, TypeError, ValueError, AttributeError)


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _offset_tz(utc_offset_seconds: int) -> dt.timezone:
    return dt.timezone(dt.timedelta(seconds=utc_offset_seconds))


def _iso_to_dt_with_tz(s: str, tz: dt.tzinfo) -> dt.datetime:
    """Interpret an Open-Meteo local time string as being in tz."""
    naive = dt.datetime.fromisoformat(s)
    return naive.replace(tzinfo=tz)


def _value_at(series: Optional[Sequence[Any]], index: int, default):
    """Return series[index] when present and not null, else default."""
    if not series or index < 0 or index >= len(series):
        return default
    value = series[index]
    return default if value is None else value


def local_hour_index(now: dt.datetime, utc_offset_seconds: int) -> int:
    """Hour of day (0-23) at the location for an aware `now`."""
    return now.astimezone(_offset_tz(utc_offset_seconds)).hour


def build_current_conditions(location: Location,
                             data: Mapping[str, Any],
                             unit_system: UnitSystem,
                             now: dt.datetime) -> CurrentConditions:
    """Assemble CurrentConditions from a raw forecast payload.

    Humidity, pressure, visibility and apparent temperature come from the
    hourly arrays at the location's current local hour; Open-Meteo's hourly
    block starts at local midnight so the hour doubles as the index.
    """
    current = data["current_weather"]
    offset = int(data["utc_offset_seconds"])
    tz = _offset_tz(offset)
    daily = data["daily"]
    hourly = data.get("hourly") or {}
    idx = local_hour_index(now, offset)

    temperature = float(current["temperature"])
    return CurrentConditions(
        location=location,
        observed_at=_iso_to_dt_with_tz(current["time"], tz),
        temperature=temperature,
        feels_like=float(_value_at(hourly.get("apparent_temperature"), idx, temperature)),
        humidity_pct=float(_value_at(hourly.get("relativehumidity_2m"), idx, DEFAULT_HUMIDITY_PCT)),
        pressure_hpa=float(_value_at(hourly.get("surface_pressure"), idx, DEFAULT_PRESSURE_HPA)),
        wind_speed=float(current["windspeed"]),
        wind_direction_deg=float(current["winddirection"]),
        visibility_meters=float(_value_at(hourly.get("visibility"), idx, DEFAULT_VISIBILITY_M)),
        uv_index=_value_at(daily.get("uv_index_max"), 0, None),
        condition=decode(current["weathercode"]),
        sunrise=_iso_to_dt_with_tz(daily["sunrise"][0], tz),
        sunset=_iso_to_dt_with_tz(daily["sunset"][0], tz),
        utc_offset_seconds=offset,
        unit_system=unit_system,
    )


def build_hourly_series(data: Mapping[str, Any]) -> List[HourlyPoint]:
    """Convert the flat hourly arrays into chronological HourlyPoints, one per reported slot."""
    tz = _offset_tz(int(data.get("utc_offset_seconds") or 0))
    hourly = data["hourly"]
    times = hourly["time"]
    temps = hourly["temperature_2m"]
    codes = hourly.get("weathercode") or [None] * len(times)

    out: List[HourlyPoint] = []
    for i, t in enumerate(times):
        temp = temps[i] if i < len(temps) else None
        out.append(
            HourlyPoint(
                timestamp=_iso_to_dt_with_tz(t, tz),
                temperature=None if temp is None else float(temp),
                condition=decode(codes[i] if i < len(codes) else None),
            )
        )
    out.sort(key=lambda p: p.timestamp)
    return out


def select_daily_summaries(hourly: Sequence[HourlyPoint],
                           max_days: int = MAX_DAILY_SUMMARIES) -> List[DailySummary]:
    """Pick the local-noon sample for each calendar date.

    Dates without an exact 12:00 sample are skipped rather than filled in,
    so fewer than `max_days` entries may come back.
    """
    seen: set[dt.date] = set()
    out: List[DailySummary] = []
    for point in hourly:
        ts = point.timestamp
        day = ts.date()
        if day in seen or ts.hour != DAILY_SAMPLE_HOUR or ts.minute != 0:
            continue
        seen.add(day)
        out.append(DailySummary(timestamp=ts, temperature=point.temperature, condition=point.condition))
        if len(out) >= max_days:
            break
    return out


class ForecastAdapter:
    """Fetch forecast payloads and translate them into the canonical model."""

    def __init__(self,
                 data_source: Optional[WeatherDataSource] = None,
                 *,
                 clock: Callable[[], dt.datetime] = _utc_now,
                 forecast_days: int | None = None):
        self.data_source = data_source or build_data_source(settings)
        self.clock = clock
        self.forecast_days = forecast_days or settings.forecast_days

    def fetch_current(self, location: Location, unit_system: UnitSystem) -> CurrentConditions:
        """Current conditions at a location.

        Raises:
            UpstreamUnavailable: On transport failure or missing required fields
        """
        logger.info(
            "Fetching current weather",
            extra={"location": location.name, "unit_system": unit_system.value},
        )
        try:
            data = self.data_source.fetch_weather_current(
                location.latitude,
                location.longitude,
                temperature_unit=unit_system.temperature_unit,
                wind_speed_unit=unit_system.wind_speed_unit,
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Forecast request failed for '{location.name}': {e}")
            raise UpstreamUnavailable("forecast", str(e)) from e

        try:
            return build_current_conditions(location, data, unit_system, self.clock())
        except _PARSE_ERRORS as e:
            logger.error(f"Malformed current-weather payload for '{location.name}': {e!r}")
            raise UpstreamUnavailable("forecast", f"malformed current weather: {e!r}") from e

    def fetch_forecast(self, location: Location,
                       unit_system: UnitSystem) -> Tuple[List[HourlyPoint], List[DailySummary]]:
        """Hourly series plus noon-sampled daily summaries.

        Raises:
            UpstreamUnavailable: On transport failure or a malformed payload
        """
        try:
            data = self.data_source.fetch_weather_hours(
                location.latitude,
                location.longitude,
                temperature_unit=unit_system.temperature_unit,
                wind_speed_unit=unit_system.wind_speed_unit,
                forecast_days=self.forecast_days,
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Hourly forecast request failed for '{location.name}': {e}")
            raise UpstreamUnavailable("forecast", str(e)) from e

        try:
            hourly = build_hourly_series(data)
        except _PARSE_ERRORS as e:
            logger.error(f"Malformed hourly payload for '{location.name}': {e!r}")
            raise UpstreamUnavailable("forecast", f"malformed hourly forecast: {e!r}") from e

        daily = select_daily_summaries(hourly)
        logger.info(
            "Built forecast series",
            extra={"location": location.name, "hourly_count": len(hourly), "daily_count": len(daily)},
        )
        return hourly, daily
