"""Drive the geocode/fetch/normalize pipeline for city and coordinate searches."""
from __future__ import annotations

import asyncio
import datetime as dt
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from pinpoint import config
from pinpoint.data_sources import WeatherDataSource, build_data_source
from pinpoint.domain import Coordinate, SyntheticStation, WeatherViewModel
from pinpoint.normalizer import coordinate_label, normalize
from pinpoint.stations import RandomSource, synthesize_stations
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_service")

Clock = Callable[[], dt.datetime]
T = TypeVar("T")

STATIONS_FAILED_MESSAGE = "Failed to fetch nearby weather stations"


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class StationLookup:
    """Outcome of a nearby-station lookup: stations on success, a message on failure."""
    stations: List[SyntheticStation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CoordinateSearchResult:
    """Weather for a coordinate plus the independent station lookup."""
    weather: WeatherViewModel
    stations: StationLookup


class RequestTracker:
    """
    Generation counter for superseding in-flight searches.

    Call `begin()` when a search starts and keep the token; when the result
    arrives, `is_current(token)` says whether a newer search has started since.
    Callers that never consult it get last-resolved-wins behaviour.
    """

    def __init__(self) -> None:
        self._generation = 0

    @property
    def latest(self) -> int:
        return self._generation

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation

    async def track(self, awaitable: Awaitable[T]) -> Tuple[T, bool]:
        """Await a search under a fresh token; return (result, still_current)."""
        token = self.begin()
        result = await awaitable
        current = self.is_current(token)
        if not current:
            logger.debug("Discarding superseded search result", extra={"token": token, "latest": self._generation})
        return result, current


def _resolve(
    data_source: WeatherDataSource | None,
    clock: Clock | None,
    settings: config.Settings | None,
) -> Tuple[WeatherDataSource, Clock, config.Settings]:
    settings = settings or config.settings
    return data_source or build_data_source(settings), clock or utc_now, settings


async def get_weather_for_city(
    city: str,
    *,
    data_source: WeatherDataSource | None = None,
    clock: Clock | None = None,
    settings: config.Settings | None = None,
) -> WeatherViewModel:
    """
    Fetch current conditions and forecast for a city concurrently and normalize them.

    Each fetch geocodes on its own. Either failure fails the whole search;
    nothing partial is returned.
    """
    ds, clock, settings = _resolve(data_source, clock, settings)
    logger.info("Fetching weather for city", extra={"city": city})

    current, forecast = await asyncio.gather(
        ds.fetch_current_by_city(city),
        ds.fetch_forecast_by_city(city),
    )
    return normalize(
        city,
        current,
        forecast,
        clock(),
        window_hours=settings.hourly_window_hours,
        limit=settings.hourly_limit,
    )


async def get_weather_for_coordinate(
    coordinate: Coordinate,
    *,
    data_source: WeatherDataSource | None = None,
    clock: Clock | None = None,
    settings: config.Settings | None = None,
) -> WeatherViewModel:
    """Fetch current conditions and forecast for a coordinate concurrently and normalize them."""
    ds, clock, settings = _resolve(data_source, clock, settings)
    logger.info(
        "Fetching weather for coordinate",
        extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude},
    )

    current, forecast = await asyncio.gather(
        ds.fetch_current_by_coordinate(coordinate),
        ds.fetch_forecast_by_coordinate(coordinate),
    )
    return normalize(
        coordinate_label(coordinate),
        current,
        forecast,
        clock(),
        window_hours=settings.hourly_window_hours,
        limit=settings.hourly_limit,
    )


async def find_nearby_stations(
    coordinate: Coordinate,
    *,
    settings: config.Settings | None = None,
    rng: RandomSource | None = None,
) -> StationLookup:
    """Synthesize nearby stations. Failures are logged and reported, never raised."""
    settings = settings or config.settings
    try:
        stations = synthesize_stations(
            coordinate,
            count=settings.station_count,
            radius_deg=settings.station_radius_deg,
            rng=rng,
        )
    except Exception as exc:
        logger.warning("Nearby station lookup failed", extra={"error": str(exc)})
        return StationLookup(error=STATIONS_FAILED_MESSAGE)
    return StationLookup(stations=stations)


async def search_coordinate(
    coordinate: Coordinate,
    *,
    data_source: WeatherDataSource | None = None,
    clock: Clock | None = None,
    settings: config.Settings | None = None,
    rng: RandomSource | None = None,
) -> CoordinateSearchResult:
    """Weather for a coordinate, then nearby stations once the weather fetch has succeeded."""
    weather = await get_weather_for_coordinate(coordinate, data_source=data_source, clock=clock, settings=settings)
    stations = await find_nearby_stations(coordinate, settings=settings, rng=rng)
    if not stations.ok:
        logger.info("Returning weather without nearby stations", extra={"location": weather.location})
    return CoordinateSearchResult(weather=weather, stations=stations)
