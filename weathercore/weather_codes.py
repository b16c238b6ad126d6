"""Translate WMO weather codes into canonical condition descriptors.

Internal ids follow the OpenWeatherMap condition numbering so that families
occupy contiguous bands and callers can test membership with a range.
"""
from __future__ import annotations

from typing import Dict, Tuple

from weathercore.domain import ConditionCode, ConditionFamily

THUNDERSTORM_BAND: Tuple[int, int] = (200, 232)
DRIZZLE_BAND: Tuple[int, int] = (300, 321)
RAIN_BAND: Tuple[int, int] = (500, 531)
SNOW_BAND: Tuple[int, int] = (600, 622)
ATMOSPHERE_BAND: Tuple[int, int] = (701, 781)
CLEAR_BAND: Tuple[int, int] = (800, 800)
CLOUDS_BAND: Tuple[int, int] = (801, 804)

FAMILY_BANDS: Dict[ConditionFamily, Tuple[int, int]] = {
    ConditionFamily.THUNDERSTORM: THUNDERSTORM_BAND,
    ConditionFamily.DRIZZLE: DRIZZLE_BAND,
    ConditionFamily.RAIN: RAIN_BAND,
    ConditionFamily.SNOW: SNOW_BAND,
    ConditionFamily.FOG: ATMOSPHERE_BAND,
    ConditionFamily.CLEAR: CLEAR_BAND,
    ConditionFamily.CLOUDS: CLOUDS_BAND,
}


def _code(internal_id: int, family: ConditionFamily, description: str, icon_key: str) -> ConditionCode:
    return ConditionCode(internal_id=internal_id, family=family, description=description, icon_key=icon_key)


WMO_CODES: Dict[int, ConditionCode] = {
    0: _code(800, ConditionFamily.CLEAR, "Clear sky", "01d"),
    1: _code(801, ConditionFamily.CLOUDS, "Mainly clear", "02d"),
    2: _code(802, ConditionFamily.CLOUDS, "Partly cloudy", "03d"),
    3: _code(803, ConditionFamily.CLOUDS, "Overcast", "04d"),
    45: _code(701, ConditionFamily.FOG, "Fog", "50d"),
    48: _code(741, ConditionFamily.FOG, "Depositing rime fog", "50d"),
    51: _code(300, ConditionFamily.DRIZZLE, "Light drizzle", "09d"),
    53: _code(301, ConditionFamily.DRIZZLE, "Moderate drizzle", "09d"),
    55: _code(302, ConditionFamily.DRIZZLE, "Dense drizzle", "09d"),
    61: _code(500, ConditionFamily.RAIN, "Slight rain", "10d"),
    63: _code(501, ConditionFamily.RAIN, "Moderate rain", "10d"),
    65: _code(502, ConditionFamily.RAIN, "Heavy rain", "10d"),
    71: _code(600, ConditionFamily.SNOW, "Slight snow", "13d"),
    73: _code(601, ConditionFamily.SNOW, "Moderate snow", "13d"),
    75: _code(602, ConditionFamily.SNOW, "Heavy snow", "13d"),
    95: _code(200, ConditionFamily.THUNDERSTORM, "Thunderstorm", "11d"),
    96: _code(201, ConditionFamily.THUNDERSTORM, "Thunderstorm with hail", "11d"),
    99: _code(202, ConditionFamily.THUNDERSTORM, "Thunderstorm with heavy hail", "11d"),
}

DEFAULT_CONDITION: ConditionCode = _code(800, ConditionFamily.CLEAR, "Unknown", "01d")


def decode(raw_code: object) -> ConditionCode:
    """Return the condition for a WMO code, or DEFAULT_CONDITION when unknown.

    Integral floats (Open-Meteo occasionally serializes 3.0) are accepted;
    booleans, strings and None are treated as unknown.
    """
    if isinstance(raw_code, bool):
        return DEFAULT_CONDITION
    if isinstance(raw_code, float) and raw_code.is_integer():
        raw_code = int(raw_code)
    if not isinstance(raw_code, int):
        return DEFAULT_CONDITION
    return WMO_CODES.get(raw_code, DEFAULT_CONDITION)


def family_for_id(internal_id: int) -> ConditionFamily | None:
    """Map an internal id back to its family band, or None outside every band."""
    for family, (low, high) in FAMILY_BANDS.items():
        if low <= internal_id <= high:
            return family
    return None
