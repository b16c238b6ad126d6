"""Canonical weather vocabulary and schemas.

Everything that leaves the core is expressed with the models below; no
upstream response shape crosses this boundary. Interpretation logic lives in
the adapters and in `weathercore.derived`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from weathercore.errors import DegradedResult


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class UnitSystem(str, Enum):
    """Unit system requested from the forecast endpoint."""
    METRIC = "metric"
    IMPERIAL = "imperial"

    @property
    def temperature_unit(self) -> str:
        """Open-Meteo `temperature_unit` request value."""
        return "fahrenheit" if self is UnitSystem.IMPERIAL else "celsius"

    @property
    def wind_speed_unit(self) -> str:
        """Open-Meteo `windspeed_unit` request value."""
        return "mph" if self is UnitSystem.IMPERIAL else "ms"

    @property
    def temperature_label(self) -> str:
        return "°F" if self is UnitSystem.IMPERIAL else "°C"

    @property
    def wind_speed_label(self) -> str:
        return "mph" if self is UnitSystem.IMPERIAL else "m/s"

    @classmethod
    def parse(cls, value: str | UnitSystem | None, default: UnitSystem | None = None) -> UnitSystem:
        """Lenient parse for stored/user-supplied values."""
        if isinstance(value, UnitSystem):
            return value
        if value:
            try:
                return cls(str(value).strip().lower())
            except ValueError:
                pass
        return default or cls.METRIC


class ConditionFamily(str, Enum):
    """Grouping of condition ids used for theme and alert logic."""
    CLEAR = "Clear"
    CLOUDS = "Clouds"
    FOG = "Fog"
    DRIZZLE = "Drizzle"
    RAIN = "Rain"
    SNOW = "Snow"
    THUNDERSTORM = "Thunderstorm"


class ConditionCode(_StrictBaseModel):
    """Decoded weather condition; only produced by the code translator."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    internal_id: int
    family: ConditionFamily
    description: str
    icon_key: str

    def in_band(self, band: tuple[int, int]) -> bool:
        """Return True when internal_id falls inside an inclusive id band."""
        low, high = band
        return low <= self.internal_id <= high


class Location(_StrictBaseModel):
    """Geocoded place."""
    name: str
    country_code: str = ""
    admin_area: Optional[str] = None
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @property
    def display_name(self) -> str:
        """Name, admin area and country code joined for suggestion lists."""
        parts = [self.name]
        if self.admin_area:
            parts.append(self.admin_area)
        if self.country_code:
            parts.append(self.country_code)
        return ", ".join(parts)


class CurrentConditions(_StrictBaseModel):
    """Current weather at a location, in the requested unit system."""
    location: Location
    observed_at: datetime  # timezone-aware, location offset
    temperature: float
    feels_like: float
    humidity_pct: float
    pressure_hpa: float
    wind_speed: float
    wind_direction_deg: float
    visibility_meters: float
    uv_index: Optional[float] = None
    condition: ConditionCode
    sunrise: datetime
    sunset: datetime
    utc_offset_seconds: int
    unit_system: UnitSystem = UnitSystem.METRIC


class HourlyPoint(_StrictBaseModel):
    """One forecast slot."""
    timestamp: datetime
    temperature: Optional[float] = None  # null when upstream reported no value
    condition: ConditionCode


class DailySummary(_StrictBaseModel):
    """Representative (local noon) sample for one calendar date."""
    timestamp: datetime
    temperature: Optional[float] = None  # null when upstream reported no value
    condition: ConditionCode


AQI_LABELS = {1: "Good", 2: "Fair", 3: "Moderate", 4: "Poor", 5: "Very Poor"}


class AirQualityReading(_StrictBaseModel):
    """US AQI collapsed to a 1-5 ordinal category."""
    category_level: int = Field(..., ge=1, le=5)
    raw_index: Optional[float] = None
    available: bool = True

    @property
    def label(self) -> str:
        return AQI_LABELS[self.category_level]


class Snapshot(_StrictBaseModel):
    """Atomic bundle cached and returned by the resilient pipeline."""
    current: CurrentConditions
    hourly_series: List[HourlyPoint] = Field(default_factory=list)
    daily_series: List[DailySummary] = Field(default_factory=list)
    air_quality: AirQualityReading
    fetched_at: datetime
    served_from_cache: bool = False
    degradations: List[DegradedResult] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True when served from cache or a stage fell back to a default."""
        return self.served_from_cache or bool(self.degradations)


class ThemeClass(str, Enum):
    """Visual theme selected from conditions and user mode."""
    DARK = "dark"
    RAIN = "rain"
    SNOW = "snow"
    SUNNY = "sunny"
    NEUTRAL = "neutral"


class AlertKind(str, Enum):
    """Canonical codes for weather warnings, in evaluation order."""
    HEAT = "heat"
    FREEZE = "freeze"
    WIND = "wind"
    AIR_QUALITY = "air_quality"
    STORM = "storm"
    RAIN = "rain"


class Alert(_StrictBaseModel):
    """A single warning raised against a snapshot."""
    kind: AlertKind
    message: str
