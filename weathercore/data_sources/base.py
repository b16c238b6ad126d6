"""Interfaces and helpers for raw weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol


class WeatherDataSource(Protocol):
    """Interface for anything that can provide raw geocoding, weather and air-quality payloads."""

    def search_locations(self, name: str, *, count: int | None = None,
                         language: str | None = None) -> Dict[str, Any]:
        """Return the raw geocoding payload for a free-text name."""
        ...

    def fetch_weather_current(
        self,
        latitude: float,
        longitude: float,
        *,
        temperature_unit: str = "celsius",
        wind_speed_unit: str = "ms",
    ) -> Dict[str, Any]:
        """Return the raw current-weather payload."""
        ...

    def fetch_weather_hours(
        self,
        latitude: float,
        longitude: float,
        *,
        temperature_unit: str = "celsius",
        wind_speed_unit: str = "ms",
        forecast_days: int | None = None,
    ) -> Dict[str, Any]:
        """Return the raw hourly forecast payload."""
        ...

    def fetch_air_current(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """Return the raw current air-quality payload."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap four callables so they can be swapped for different backends or fakes."""

    location_search: Callable[..., Dict[str, Any]]
    weather_current: Callable[..., Dict[str, Any]]
    weather_hours: Callable[..., Dict[str, Any]]
    air_current: Callable[..., Dict[str, Any]]

    def search_locations(self, *args, **kwargs) -> Dict[str, Any]:
        """Delegate to the configured geocoding callable."""
        return self.location_search(*args, **kwargs)

    def fetch_weather_current(self, *args, **kwargs) -> Dict[str, Any]:
        """Delegate to the configured current-weather callable."""
        return self.weather_current(*args, **kwargs)

    def fetch_weather_hours(self, *args, **kwargs) -> Dict[str, Any]:
        """Delegate to the configured hourly-weather callable."""
        return self.weather_hours(*args, **kwargs)

    def fetch_air_current(self, *args, **kwargs) -> Dict[str, Any]:
        """Delegate to the configured air-quality callable."""
        return self.air_current(*args, **kwargs)
