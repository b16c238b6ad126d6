"""Resilient geocode -> forecast -> air-quality pipeline with a single-slot fallback."""
from __future__ import annotations

import datetime as dt
import json
import threading
from typing import Callable, List, Optional

from pydantic import ValidationError

from weathercore.air_quality import AirQualityAdapter
from weathercore.domain import Snapshot, UnitSystem
from weathercore.errors import CacheMiss, DegradedResult, WeatherError
from weathercore.forecast_adapter import ForecastAdapter
from weathercore.geocoder import Geocoder
from weathercore.kv_store import KeyValueStore
from weathercore.preferences import SNAPSHOT_KEY
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="resilience")


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class ResilienceCache:
    """Runs the whole pipeline as one unit and remembers the last good Snapshot.

    The slot holds at most one Snapshot and is only ever overwritten. When a
    key-value store is supplied the slot is written through to it and restored
    from it on first access. Concurrent runs are not coordinated: whichever
    finishes last owns the slot.
    """

    def __init__(self,
                 geocoder: Geocoder,
                 forecast: ForecastAdapter,
                 air_quality: AirQualityAdapter,
                 *,
                 store: Optional[KeyValueStore] = None,
                 clock: Callable[[], dt.datetime] = _utc_now):
        self.geocoder = geocoder
        self.forecast = forecast
        self.air_quality = air_quality
        self.store = store
        self.clock = clock
        self._slot: Optional[Snapshot] = None
        self._restored = store is None
        self._lock = threading.Lock()

    def last(self) -> Optional[Snapshot]:
        """Return the stored Snapshot, if any, without fetching."""
        with self._lock:
            if not self._restored:
                self._slot = self._load_persisted()
                self._restored = True
            return self._slot

    def run(self, query: str, unit_system: UnitSystem) -> Snapshot:
        """Fetch a fresh Snapshot, or fall back to the stored one.

        Raises:
            CacheMiss: If the run fails and nothing has been stored yet
        """
        try:
            snapshot = self._fetch(query, unit_system)
        except WeatherError as exc:
            cached = self.last()
            if cached is None:
                logger.error(f"Pipeline failed for '{query}' with no cached snapshot: {exc}")
                raise CacheMiss(query, exc) from exc
            logger.warning(
                f"Pipeline failed for '{query}', serving snapshot fetched at {cached.fetched_at.isoformat()}: {exc}"
            )
            return cached.model_copy(update={"served_from_cache": True})

        self._replace(snapshot)
        return snapshot

    def _fetch(self, query: str, unit_system: UnitSystem) -> Snapshot:
        """One sequential pass; any raised stage aborts before a Snapshot exists."""
        location = self.geocoder.resolve(query)
        current = self.forecast.fetch_current(location, unit_system)
        hourly, daily = self.forecast.fetch_forecast(location, unit_system)
        air = self.air_quality.fetch_index(location)

        degradations: List[DegradedResult] = []
        if not air.available:
            degradations.append(DegradedResult(stage="air_quality", reason="index unavailable, defaulted to level 1"))

        return Snapshot(
            current=current,
            hourly_series=hourly,
            daily_series=daily,
            air_quality=air,
            fetched_at=self.clock(),
            degradations=degradations,
        )

    def _replace(self, snapshot: Snapshot) -> None:
        # Slot and store are updated under one lock.
        with self._lock:
            self._slot = snapshot
            self._restored = True
            self._persist(snapshot)

    def _persist(self, snapshot: Snapshot) -> None:
        if self.store is None:
            return
        payload = {
            "data": snapshot.model_dump(mode="json"),
            "timestamp": int(snapshot.fetched_at.timestamp() * 1000),
        }
        try:
            self.store.set(SNAPSHOT_KEY, json.dumps(payload))
        except Exception as exc:
            # The in-memory slot is already updated; only durability is lost.
            logger.warning(f"Failed to persist snapshot: {exc}")

    def _load_persisted(self) -> Optional[Snapshot]:
        raw = self.store.get(SNAPSHOT_KEY) if self.store is not None else None
        if not raw:
            return None
        try:
            payload = json.loads(raw)
            snapshot = Snapshot.model_validate(payload["data"])
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            logger.warning(f"Ignoring unreadable persisted snapshot: {exc}")
            return None
        logger.info(f"Restored persisted snapshot fetched at {snapshot.fetched_at.isoformat()}")
        return snapshot
