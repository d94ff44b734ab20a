"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

from pinpoint.domain import Coordinate
from pinpoint.data_sources.open_meteo_client import GeocodeResult, RawCurrentReading, RawForecastPayload


class WeatherDataSource(Protocol):
    """Interface for anything that can geocode and provide current/forecast payloads."""

    async def geocode(self, city: str) -> GeocodeResult:
        """Resolve a city name to coordinates."""
        ...

    async def fetch_current_by_coordinate(self, coordinate: Coordinate) -> RawCurrentReading:
        """Return current conditions for a coordinate."""
        ...

    async def fetch_forecast_by_coordinate(self, coordinate: Coordinate) -> RawForecastPayload:
        """Return daily and hourly series for a coordinate."""
        ...

    async def fetch_current_by_city(self, city: str) -> RawCurrentReading:
        """Return current conditions for a city name."""
        ...

    async def fetch_forecast_by_city(self, city: str) -> RawForecastPayload:
        """Return daily and hourly series for a city name."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap five coroutine functions so they can be swapped for different backends."""

    geocoder: Callable[..., Awaitable[GeocodeResult]]
    current_by_coordinate: Callable[..., Awaitable[RawCurrentReading]]
    forecast_by_coordinate: Callable[..., Awaitable[RawForecastPayload]]
    current_by_city: Callable[..., Awaitable[RawCurrentReading]]
    forecast_by_city: Callable[..., Awaitable[RawForecastPayload]]

    async def geocode(self, *args, **kwargs) -> GeocodeResult:
        return await self.geocoder(*args, **kwargs)

    async def fetch_current_by_coordinate(self, *args, **kwargs) -> RawCurrentReading:
        return await self.current_by_coordinate(*args, **kwargs)

    async def fetch_forecast_by_coordinate(self, *args, **kwargs) -> RawForecastPayload:
        return await self.forecast_by_coordinate(*args, **kwargs)

    async def fetch_current_by_city(self, *args, **kwargs) -> RawCurrentReading:
        return await self.current_by_city(*args, **kwargs)

    async def fetch_forecast_by_city(self, *args, **kwargs) -> RawForecastPayload:
        return await self.forecast_by_city(*args, **kwargs)
