"""Raw upstream data sources and factories."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import (
    fetch_air_current,
    fetch_weather_current,
    fetch_weather_hours,
    search_locations,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "fetch_air_current",
    "fetch_weather_current",
    "fetch_weather_hours",
    "search_locations",
]
