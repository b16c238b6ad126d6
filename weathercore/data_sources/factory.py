"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from weathercore import config
from weathercore.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from weathercore.data_sources.open_meteo_client import (
    fetch_air_current,
    fetch_weather_current,
    fetch_weather_hours,
    search_locations,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "open_meteo"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.data_source or DEFAULT_SOURCE_NAME).lower()

    if source == "open_meteo":
        logger.info("Using Open-Meteo data source")
        return CallableWeatherDataSource(
            location_search=search_locations,
            weather_current=fetch_weather_current,
            weather_hours=fetch_weather_hours,
            air_current=fetch_air_current,
        )

    raise ValueError(f"Unknown weather data source '{source}'")
