"""Deterministic secondary attributes computed from the canonical model.

Comfort labels, day/night detection, theme selection and weather alerts. No
I/O happens here; every function is a pure mapping over domain values.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from weathercore.domain import Alert, AlertKind, ConditionFamily, Snapshot, ThemeClass
from weathercore.weather_codes import RAIN_BAND, THUNDERSTORM_BAND

HEAT_THRESHOLD = 35.0
FREEZE_THRESHOLD = 0.0
# Compared against the raw speed in whatever unit system was requested.
WIND_THRESHOLD = 15.0
AIR_QUALITY_ALERT_LEVEL = 4

ALERT_MESSAGES = {
    AlertKind.HEAT: "Extreme Heat Warning: Stay hydrated!",
    AlertKind.FREEZE: "Freezing Warning: Wear warm clothes!",
    AlertKind.WIND: "High Wind Warning",
    AlertKind.AIR_QUALITY: "Poor Air Quality Warning",
    AlertKind.STORM: "Thunderstorm Alert",
    AlertKind.RAIN: "Rain Warning",
}

_RAIN_THEMED = {ConditionFamily.THUNDERSTORM, ConditionFamily.DRIZZLE, ConditionFamily.RAIN}
_COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def humidity_status(pct: float) -> str:
    """Comfort label for relative humidity."""
    if pct < 30:
        return "Dry"
    if pct < 60:
        return "Comfortable"
    return "Humid"


def visibility_status(meters: float) -> str:
    """Quality label for visibility distance."""
    if meters > 10000:
        return "Excellent"
    if meters > 5000:
        return "Good"
    if meters > 2000:
        return "Moderate"
    return "Poor"


def wind_direction_label(degrees: float) -> str:
    """8-point compass label for a meteorological wind direction."""
    return _COMPASS_POINTS[int((degrees % 360) / 45 + 0.5) % 8]


def is_night(now: dt.datetime, sunrise: dt.datetime, sunset: dt.datetime) -> bool:
    """True when `now` is after today's sunset or before today's sunrise.

    Same-day comparison only: a sunset that falls after local midnight is not
    handled.
    """
    return now > sunset or now < sunrise


def theme_class(family: ConditionFamily, night: bool, dark_mode_active: bool) -> ThemeClass:
    """Choose the page theme; dark mode wins, night suppresses weather theming."""
    if dark_mode_active:
        return ThemeClass.DARK
    if night:
        return ThemeClass.NEUTRAL
    if family in _RAIN_THEMED:
        return ThemeClass.RAIN
    if family is ConditionFamily.SNOW:
        return ThemeClass.SNOW
    if family is ConditionFamily.CLEAR:
        return ThemeClass.SUNNY
    return ThemeClass.NEUTRAL


def snapshot_theme(snapshot: Snapshot, dark_mode_active: bool, now: Optional[dt.datetime] = None) -> ThemeClass:
    """theme_class() for a snapshot, evaluated at `now` (defaults to the current time)."""
    current = snapshot.current
    now = now or dt.datetime.now(dt.timezone.utc)
    return theme_class(current.condition.family, is_night(now, current.sunrise, current.sunset), dark_mode_active)


def alerts(snapshot: Snapshot) -> List[Alert]:
    """Evaluate every warning independently, in a fixed order."""
    current = snapshot.current
    condition = current.condition
    kinds: List[AlertKind] = []

    if current.temperature > HEAT_THRESHOLD:
        kinds.append(AlertKind.HEAT)
    if current.temperature < FREEZE_THRESHOLD:
        kinds.append(AlertKind.FREEZE)
    if current.wind_speed > WIND_THRESHOLD:
        kinds.append(AlertKind.WIND)
    if snapshot.air_quality.category_level >= AIR_QUALITY_ALERT_LEVEL:
        kinds.append(AlertKind.AIR_QUALITY)
    if condition.in_band(THUNDERSTORM_BAND):
        kinds.append(AlertKind.STORM)
    if condition.in_band(RAIN_BAND):
        kinds.append(AlertKind.RAIN)

    return [Alert(kind=kind, message=ALERT_MESSAGES[kind]) for kind in kinds]
