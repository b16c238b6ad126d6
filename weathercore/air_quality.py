"""Fetch the US AQI and collapse it into a five-level category."""
from __future__ import annotations

from typing import Optional

import requests

from weathercore.config import settings
from weathercore.data_sources import WeatherDataSource, build_data_source
from weathercore.domain import AirQualityReading, Location
from weathercore.errors import UpstreamUnavailable
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="air_quality")

# Upper bound (inclusive) of each category; anything above the last is level 5.
AQI_THRESHOLDS = ((50, 1), (100, 2), (150, 3), (200, 4))


def aqi_category(index: float) -> int:
    """Map a 0-500 US AQI value onto levels 1 (good) to 5 (very poor)."""
    for upper, level in AQI_THRESHOLDS:
        if index <= upper:
            return level
    return 5


def unavailable_reading() -> AirQualityReading:
    """Level-1 placeholder used when the index could not be fetched."""
    return AirQualityReading(category_level=1, raw_index=None, available=False)


class AirQualityAdapter:
    """Air-quality lookups that degrade to an optimistic default instead of raising."""

    def __init__(self, data_source: Optional[WeatherDataSource] = None):
        self.data_source = data_source or build_data_source(settings)

    def _fetch_raw_index(self, location: Location) -> float:
        try:
            data = self.data_source.fetch_air_current(location.latitude, location.longitude)
        except (requests.RequestException, ValueError) as e:
            raise UpstreamUnavailable("air_quality", str(e)) from e
        try:
            value = data["current"]["us_aqi"]
        except (KeyError, TypeError) as e:
            raise UpstreamUnavailable("air_quality", f"malformed response: {e!r}") from e
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
            raise UpstreamUnavailable("air_quality", f"us_aqi missing or not numeric: {value!r}")
        return float(value)

    def fetch_index(self, location: Location) -> AirQualityReading:
        """Current AQI reading for a location; `available` is False on failure."""
        try:
            index = self._fetch_raw_index(location)
        except UpstreamUnavailable as e:
            logger.warning(f"Air quality unavailable for '{location.name}', using default: {e}")
            return unavailable_reading()
        level = aqi_category(index)
        logger.debug("Fetched air quality", extra={"us_aqi": index, "level": level})
        return AirQualityReading(category_level=level, raw_index=index)
