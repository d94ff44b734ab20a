"""Application configuration pulled from environment variables via pydantic."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the pinpoint weather service."""
    model_config = SettingsConfigDict(env_prefix="PINPOINT_", extra="ignore")

    forecast_source: str = "open_meteo"  # options: open_meteo
    geocoding_url: str = "https://geocoding-api.open-meteo.com/v1/search"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Ring of synthetic stations drawn around a coordinate search.
    station_count: int = Field(default=8, ge=1)
    station_radius_deg: float = Field(default=0.1, gt=0)

    hourly_window_hours: int = Field(default=24, ge=1, le=24)
    hourly_limit: int = Field(default=24, ge=0, le=24)

    log_level: str = "INFO"
    job_name: str = "pinpoint"

    @field_validator("geocoding_url", "forecast_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
