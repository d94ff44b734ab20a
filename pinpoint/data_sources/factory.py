"""Factory helpers for choosing a weather data source at startup."""

from __future__ import annotations

from functools import partial

from pinpoint import config
from pinpoint.data_sources import open_meteo_client
from pinpoint.data_sources.base import CallableWeatherDataSource, WeatherDataSource
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "open_meteo"


def build_data_source(settings: config.Settings | None = None) -> WeatherDataSource:
    """Instantiate the configured weather data source."""
    settings = settings or config.settings
    source = (settings.forecast_source or DEFAULT_SOURCE_NAME).lower()

    if source == "open_meteo":
        logger.info("Using Open-Meteo data source")
        return CallableWeatherDataSource(
            geocoder=partial(open_meteo_client.geocode, settings=settings),
            current_by_coordinate=partial(open_meteo_client.fetch_current_by_coordinate, settings=settings),
            forecast_by_coordinate=partial(open_meteo_client.fetch_forecast_by_coordinate, settings=settings),
            current_by_city=partial(open_meteo_client.fetch_current_by_city, settings=settings),
            forecast_by_city=partial(open_meteo_client.fetch_forecast_by_city, settings=settings),
        )

    raise ValueError(f"Unknown forecast source '{source}'")
