"""Data sources for geocoding and forecast payloads."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .factory import build_data_source
from .open_meteo_client import (
    DailySeries,
    GeocodeResult,
    HourlySeries,
    RawCurrentReading,
    RawForecastPayload,
    fetch_current_by_city,
    fetch_current_by_coordinate,
    fetch_forecast_by_city,
    fetch_forecast_by_coordinate,
    geocode,
)

__all__ = [
    "build_data_source",
    "WeatherDataSource",
    "CallableWeatherDataSource",
    "DailySeries",
    "GeocodeResult",
    "HourlySeries",
    "RawCurrentReading",
    "RawForecastPayload",
    "fetch_current_by_city",
    "fetch_current_by_coordinate",
    "fetch_forecast_by_city",
    "fetch_forecast_by_coordinate",
    "geocode",
]
