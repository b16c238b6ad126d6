"""Service facade wiring the adapters, the resilient cache and persisted preferences."""
from __future__ import annotations

from typing import List, Optional, Tuple

import redis

from weathercore.air_quality import AirQualityAdapter
from weathercore.config import Settings, settings as default_settings
from weathercore.data_sources import WeatherDataSource, build_data_source
from weathercore.domain import CurrentConditions, Location, Snapshot, UnitSystem
from weathercore.forecast_adapter import ForecastAdapter
from weathercore.geocoder import Geocoder
from weathercore.kv_store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from weathercore.preferences import Preferences
from weathercore.resilience import ResilienceCache
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="weather_service")


def build_store(settings: Settings | None = None) -> KeyValueStore:
    """Initialize the backing key-value store based on configuration."""
    settings = settings or default_settings
    if settings.store_redis_url:
        masked = mask_url(settings.store_redis_url)
        try:
            client = redis.Redis.from_url(settings.store_redis_url)
            client.ping()
            logger.info("Using RedisKeyValueStore", extra={"redis_url": masked})
            return RedisKeyValueStore(client, prefix=settings.store_prefix)
        except (redis.RedisError, ValueError) as exc:
            logger.warning("Falling back to InMemoryKeyValueStore (Redis unavailable)",
                           extra={"redis_url": masked, "error": str(exc)})
    return InMemoryKeyValueStore()


class WeatherService:
    """Core surface: location search, the resilient snapshot pipeline and city comparison."""

    def __init__(self,
                 data_source: Optional[WeatherDataSource] = None,
                 store: Optional[KeyValueStore] = None,
                 settings: Settings | None = None):
        self.settings = settings or default_settings
        self.data_source = data_source or build_data_source(self.settings)
        self.store = store if store is not None else build_store(self.settings)
        self.geocoder = Geocoder(self.data_source, max_results=self.settings.geocoding_count)
        self.forecast = ForecastAdapter(self.data_source, forecast_days=self.settings.forecast_days)
        self.air_quality = AirQualityAdapter(self.data_source)
        self.cache = ResilienceCache(self.geocoder, self.forecast, self.air_quality, store=self.store)
        self.preferences = Preferences(self.store, default_unit=UnitSystem.parse(self.settings.default_unit))

    def search(self, query: str) -> List[Location]:
        """Ranked location candidates; never raises."""
        return self.geocoder.search(query)

    def get_snapshot(self, query: str, unit_system: UnitSystem) -> Snapshot:
        """Resilient pipeline entry point.

        A live result records the resolved city as the last queried location.

        Raises:
            CacheMiss: If the pipeline fails and nothing has been cached yet
        """
        snapshot = self.cache.run(query, unit_system)
        if not snapshot.served_from_cache:
            city = snapshot.current.location.name
            try:
                self.preferences.set_last_city(city)
            except Exception as exc:
                logger.warning(f"Failed to record last city '{city}': {exc}")
        return snapshot

    def compare(self, first: str, second: str,
                unit_system: UnitSystem) -> Tuple[CurrentConditions, CurrentConditions]:
        """Current conditions for two cities, fetched live without the cache.

        Raises:
            LocationNotFound: If either city cannot be geocoded
            UpstreamUnavailable: If either forecast request fails
        """
        results = []
        for query in (first, second):
            location = self.geocoder.resolve(query)
            results.append(self.forecast.fetch_current(location, unit_system))
        return results[0], results[1]
