"""HTTP API for the weather dashboard core."""

import datetime as dt
from functools import lru_cache
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from weathercore.derived import (
    alerts,
    humidity_status,
    is_night,
    snapshot_theme,
    visibility_status,
    wind_direction_label,
)
from weathercore.domain import Alert, CurrentConditions, Location, Snapshot, ThemeClass, UnitSystem
from weathercore.errors import CacheMiss, LocationNotFound, UpstreamUnavailable
from weathercore.weather_service import WeatherService
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="weathercore/api")


@lru_cache(maxsize=1)
def get_service() -> WeatherService:
    """Process-wide service; overridden in tests via dependency_overrides."""
    return WeatherService()


router = APIRouter()


class Highlights(BaseModel):
    """Derived comfort labels for the current conditions."""
    humidity_status: str
    visibility_status: str
    wind_direction: str
    temperature_unit: str
    wind_speed_unit: str


class SnapshotResponse(BaseModel):
    """Snapshot plus everything the dashboard derives from it."""
    snapshot: Snapshot
    served_from_cache: bool
    degraded: bool
    is_night: bool
    theme: ThemeClass
    air_quality_label: str
    air_quality_available: bool
    highlights: Highlights
    alerts: List[Alert]


class CompareResponse(BaseModel):
    """Side-by-side current conditions for two cities."""
    first: CurrentConditions
    second: CurrentConditions


class PreferencesResponse(BaseModel):
    """Persisted user preferences."""
    unit_system: UnitSystem
    theme: Literal["light", "dark"]
    last_city: Optional[str] = None


class PreferencesRequest(BaseModel):
    """Partial preferences update; omitted fields are left unchanged."""
    unit_system: Optional[UnitSystem] = None
    theme: Optional[Literal["light", "dark"]] = None


class FavoritesResponse(BaseModel):
    """Favorite city names in insertion order."""
    favorites: List[str]


def _build_snapshot_response(snapshot: Snapshot, dark_mode_active: bool,
                             now: dt.datetime) -> SnapshotResponse:
    """Attach derived attributes to a snapshot for serialization."""
    current = snapshot.current
    return SnapshotResponse(
        snapshot=snapshot,
        served_from_cache=snapshot.served_from_cache,
        degraded=snapshot.degraded,
        is_night=is_night(now, current.sunrise, current.sunset),
        theme=snapshot_theme(snapshot, dark_mode_active, now),
        air_quality_label=snapshot.air_quality.label,
        air_quality_available=snapshot.air_quality.available,
        highlights=Highlights(
            humidity_status=humidity_status(current.humidity_pct),
            visibility_status=visibility_status(current.visibility_meters),
            wind_direction=wind_direction_label(current.wind_direction_deg),
            temperature_unit=current.unit_system.temperature_label,
            wind_speed_unit=current.unit_system.wind_speed_label,
        ),
        alerts=alerts(snapshot),
    )


@router.get("/search", response_model=List[Location])
def search(q: str = Query(default=""), service: WeatherService = Depends(get_service)):
    """Location suggestions for a free-text query."""
    return service.search(q)


@router.get("/snapshot", response_model=SnapshotResponse)
def snapshot(q: Optional[str] = None,
             units: Optional[UnitSystem] = None,
             service: WeatherService = Depends(get_service)):
    """Resilient snapshot for a city; falls back to stored preferences when omitted."""
    prefs = service.preferences
    query = q or prefs.get_last_city() or service.settings.default_city
    unit_system = units or prefs.get_unit()
    try:
        result = service.get_snapshot(query, unit_system)
    except CacheMiss as exc:
        logger.warning("No data available", extra={"query": query, "error": str(exc)})
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            detail=f"No data available for '{query}' and no cached snapshot")
    if result.served_from_cache:
        logger.info("Serving cached snapshot", extra={"query": query})
    now = dt.datetime.now(dt.timezone.utc)
    return _build_snapshot_response(result, prefs.dark_mode_active, now)


@router.get("/compare", response_model=CompareResponse)
def compare(a: str, b: str,
            units: Optional[UnitSystem] = None,
            service: WeatherService = Depends(get_service)):
    """Current conditions for two cities; no cache fallback."""
    unit_system = units or service.preferences.get_unit()
    try:
        first, second = service.compare(a, b, unit_system)
    except LocationNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except UpstreamUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return CompareResponse(first=first, second=second)


def _preferences_response(service: WeatherService) -> PreferencesResponse:
    prefs = service.preferences
    return PreferencesResponse(
        unit_system=prefs.get_unit(),
        theme=prefs.get_theme(),
        last_city=prefs.get_last_city(),
    )


@router.get("/preferences", response_model=PreferencesResponse)
def get_preferences(service: WeatherService = Depends(get_service)):
    """Return persisted preferences."""
    return _preferences_response(service)


@router.put("/preferences", response_model=PreferencesResponse)
def update_preferences(payload: PreferencesRequest, service: WeatherService = Depends(get_service)):
    """Update unit system and/or theme."""
    if payload.unit_system is not None:
        service.preferences.set_unit(payload.unit_system)
    if payload.theme is not None:
        service.preferences.set_theme(payload.theme)
    return _preferences_response(service)


@router.get("/favorites", response_model=FavoritesResponse)
def get_favorites(service: WeatherService = Depends(get_service)):
    """List favorite cities."""
    return FavoritesResponse(favorites=service.preferences.get_favorites())


@router.post("/favorites/{city}", response_model=FavoritesResponse)
def add_favorite(city: str, service: WeatherService = Depends(get_service)):
    """Add a city to favorites (idempotent)."""
    return FavoritesResponse(favorites=service.preferences.add_favorite(city))


@router.delete("/favorites/{city}", response_model=FavoritesResponse)
def remove_favorite(city: str, service: WeatherService = Depends(get_service)):
    """Remove a city from favorites."""
    return FavoritesResponse(favorites=service.preferences.remove_favorite(city))
