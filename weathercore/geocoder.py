"""Resolve free-text place names to ranked Location candidates."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional

from pydantic import ValidationError

from weathercore.config import settings
from weathercore.data_sources import WeatherDataSource, build_data_source
from weathercore.domain import Location
from weathercore.errors import LocationNotFound
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="geocoder")


def _location_from_result(result: Mapping[str, Any]) -> Location:
    """Map one geocoding result onto the canonical Location."""
    return Location(
        name=result["name"],
        country_code=result.get("country_code") or "",
        admin_area=result.get("admin1"),
        latitude=result["latitude"],
        longitude=result["longitude"],
    )


class Geocoder:
    """Free-text location search that never raises on upstream trouble."""

    def __init__(self, data_source: Optional[WeatherDataSource] = None, max_results: int | None = None):
        """Initialize the geocoder.

        Args:
            data_source: Raw data source (creates the configured default if None)
            max_results: Upper bound on returned candidates
        """
        self.data_source = data_source or build_data_source(settings)
        self.max_results = max_results or settings.geocoding_count

    def search(self, query: str) -> List[Location]:
        """Return up to `max_results` candidates in upstream relevance order.

        Blank queries short-circuit without a network call. Transport and
        parse failures are logged and reported as an empty list.
        """
        if not query or not query.strip():
            return []
        name = query.strip()
        try:
            data = self.data_source.search_locations(name, count=self.max_results)
        except Exception as e:
            logger.error(f"Geocoding request failed for '{name}': {e}")
            return []

        results = data.get("results") if isinstance(data, Mapping) else None
        if not results:
            logger.info(f"No geocoding results for '{name}'")
            return []
        if not isinstance(results, list):
            logger.error(f"Unexpected geocoding results for '{name}': {type(results).__name__}")
            return []

        locations: List[Location] = []
        for result in results[: self.max_results]:
            try:
                locations.append(_location_from_result(result))
            except (KeyError, TypeError, AttributeError, ValidationError) as e:
                logger.warning(f"Skipping malformed geocoding result for '{name}': {e}")
        logger.info(f"Geocoded '{name}' to {len(locations)} candidate(s)")
        return locations

    def resolve(self, query: str) -> Location:
        """Return the best candidate for a query.

        Raises:
            LocationNotFound: If the search yields no candidates
        """
        candidates = self.search(query)
        if not candidates:
            raise LocationNotFound(query)
        return candidates[0]
