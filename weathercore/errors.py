"""Failure taxonomy for the weather pipeline."""

from dataclasses import dataclass


class WeatherError(Exception):
    """Base class for pipeline failures."""


class LocationNotFound(WeatherError):
    """Geocoding produced no candidates for a query."""

    def __init__(self, query: str):
        super().__init__(f"Location '{query}' not found")
        self.query = query


class UpstreamUnavailable(WeatherError):
    """Transport or parse failure talking to an upstream endpoint."""

    def __init__(self, stage: str, reason: str):
        super().__init__(f"{stage} unavailable: {reason}")
        self.stage = stage
        self.reason = reason


class CacheMiss(WeatherError):
    """The pipeline failed and there is no prior snapshot to fall back on."""

    def __init__(self, query: str, cause: Exception | None = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"No data available for '{query}'{detail}")
        self.query = query
        self.cause = cause


@dataclass(frozen=True)
class DegradedResult:
    """A stage failure that was absorbed instead of failing the run."""
    stage: str
    reason: str
