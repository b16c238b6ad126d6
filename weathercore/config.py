"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the weather core."""
    model_config = SettingsConfigDict(env_prefix="WEATHER_", extra="ignore")

    data_source: str = "open_meteo"  # options: open_meteo
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    air_quality_url: str = "https://air-quality-api.open-meteo.com/v1/air-quality"
    request_timeout_seconds: float = 10.0
    geocoding_count: int = 5
    geocoding_language: str = "en"
    forecast_days: int = 7

    http_cache_name: str = ".cache"
    http_cache_backend: str = "sqlite"
    http_cache_seconds: int = 300
    http_retries: int = 3
    http_backoff_factor: float = 0.2

    store_redis_url: str | None = None
    store_prefix: str = "weather:"

    default_city: str = "London"
    default_unit: str = "metric"
    log_level: str = "INFO"

    @field_validator("forecast_url", "geocoding_url", "air_quality_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize endpoint URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("default_unit", mode="after")
    @classmethod
    def check_unit(cls, v: str) -> str:
        """Only metric and imperial are understood upstream."""
        lowered = v.strip().lower()
        if lowered not in ("metric", "imperial"):
            raise ValueError(f"Unknown unit system '{v}'")
        return lowered


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
