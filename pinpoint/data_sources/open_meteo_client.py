"""Async helpers for the Open-Meteo geocoding and forecast APIs.

Requests go through a module-level `requests.Session`; each blocking call is
pushed onto a worker thread with `asyncio.to_thread` so callers can await
several of them concurrently. Payloads come back as lightweight dataclasses in
upstream units (°C, km/h); conversion to display units happens in the
normalizer.
"""
from __future__ import annotations

import asyncio
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from pinpoint import config
from pinpoint.domain import Coordinate
from pinpoint.errors import MalformedPayloadError, NotFoundError, TransportError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="open_meteo_client")

session = requests.Session()

CURRENT_VARS = [
    "temperature_2m",
    "relative_humidity_2m",
    "wind_speed_10m",
    "weather_code",
    "apparent_temperature",
]
DAILY_VARS = ["weather_code", "temperature_2m_max", "temperature_2m_min"]
HOURLY_VARS = ["temperature_2m", "wind_speed_10m", "weather_code", "precipitation_probability"]

EXPECTED_UNITS = {
    "temperature_2m": "°C",
    "apparent_temperature": "°C",
    "temperature_2m_max": "°C",
    "temperature_2m_min": "°C",
    "relative_humidity_2m": "%",
    "wind_speed_10m": "km/h",
    "precipitation_probability": "%",
}


@dataclass
class GeocodeResult:
    """Best geocoding match for a city search."""
    name: str
    country: Optional[str]
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


@dataclass
class RawCurrentReading:
    """Current conditions as reported upstream (°C, %, km/h)."""
    temperature_c: float
    relative_humidity: float
    wind_speed_kmh: float
    weather_code: int
    apparent_temperature_c: Optional[float] = None
    units: Dict[str, str] = field(default_factory=dict)


@dataclass
class DailySeries:
    """Parallel daily arrays; index 0 is the request day."""
    time: List[dt.date] = field(default_factory=list)
    temperature_max_c: List[Optional[float]] = field(default_factory=list)
    temperature_min_c: List[Optional[float]] = field(default_factory=list)
    weather_code: List[Optional[int]] = field(default_factory=list)


@dataclass
class HourlySeries:
    """Parallel hourly arrays with timezone-aware timestamps."""
    time: List[dt.datetime] = field(default_factory=list)
    temperature_c: List[Optional[float]] = field(default_factory=list)
    wind_speed_kmh: List[Optional[float]] = field(default_factory=list)
    weather_code: List[Optional[int]] = field(default_factory=list)
    precipitation_probability: List[Optional[float]] = field(default_factory=list)


@dataclass
class RawForecastPayload:
    """Daily and hourly series from a single forecast call."""
    daily: DailySeries
    hourly: HourlySeries
    timezone: str = "UTC"


def _resolve_tz(data: Dict[str, Any]) -> dt.tzinfo:
    """Pick the timezone Open-Meteo resolved for `timezone=auto`."""
    name = data.get("timezone")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.debug("Unknown timezone name from upstream", extra={"timezone": name})
    offset = data.get("utc_offset_seconds")
    if isinstance(offset, (int, float)):
        return dt.timezone(dt.timedelta(seconds=offset))
    return dt.timezone.utc


def _iso_to_dt_with_tz(s: str, tz: dt.tzinfo) -> dt.datetime:
    """Interpret an Open-Meteo local wall-clock string as being in `tz`."""
    naive = dt.datetime.fromisoformat(s)
    return naive.replace(tzinfo=tz)


def _warn_on_unexpected_units(units: Optional[dict], *, context: str) -> None:
    """Log a warning if Open-Meteo returns units the normalizer does not expect."""
    if not units:
        return
    for name, expected in EXPECTED_UNITS.items():
        actual = units.get(name)
        if actual and actual != expected:
            logger.warning(
                "Unexpected Open-Meteo unit",
                extra={"context": context, "field": name, "unit": actual, "expected": expected},
            )


def _get_json(url: str, params: Dict[str, Any], *, timeout: float, failure_message: str) -> Dict[str, Any]:
    """Blocking GET returning the decoded JSON body, or TransportError."""
    logger.debug("Open-Meteo request", extra={"url": url, "params": params})
    try:
        resp = session.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.HTTPError as exc:
        status = getattr(exc.response, "status_code", None)
        logger.warning("Open-Meteo returned an error status", extra={"url": url, "status": status})
        raise TransportError(failure_message) from exc
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Open-Meteo request failed", extra={"url": url, "error": str(exc)})
        raise TransportError(failure_message) from exc
    if not isinstance(data, dict):
        raise TransportError(failure_message)
    return data


async def _fetch_json(url: str, params: Dict[str, Any], *, settings: config.Settings, failure_message: str) -> Dict[str, Any]:
    return await asyncio.to_thread(
        _get_json,
        url,
        params,
        timeout=settings.request_timeout_seconds,
        failure_message=failure_message,
    )


def parse_current(data: Dict[str, Any]) -> RawCurrentReading:
    """Build a RawCurrentReading from a `current=` forecast response."""
    current = data.get("current")
    if not isinstance(current, dict):
        raise MalformedPayloadError("Weather response is missing current conditions")
    units = data.get("current_units") or {}
    _warn_on_unexpected_units(units, context="current")
    try:
        return RawCurrentReading(
            temperature_c=current["temperature_2m"],
            relative_humidity=current["relative_humidity_2m"],
            wind_speed_kmh=current["wind_speed_10m"],
            weather_code=current["weather_code"],
            apparent_temperature_c=current.get("apparent_temperature", None),
            units=dict(units),
        )
    except KeyError as exc:
        raise MalformedPayloadError(f"Weather response is missing current field {exc.args[0]!r}") from exc


def parse_forecast(data: Dict[str, Any]) -> RawForecastPayload:
    """Build a RawForecastPayload from a `daily=`/`hourly=` forecast response.

    A missing hourly block yields an empty series; a missing daily block is malformed.
    Array lengths are not checked here, the normalizer owns that.
    """
    daily = data.get("daily")
    if not isinstance(daily, dict):
        raise MalformedPayloadError("Forecast response is missing the daily series")
    hourly = data.get("hourly") or {}
    _warn_on_unexpected_units(data.get("daily_units"), context="daily")
    _warn_on_unexpected_units(data.get("hourly_units"), context="hourly")

    tz = _resolve_tz(data)
    try:
        daily_series = DailySeries(
            time=[dt.date.fromisoformat(t) for t in daily.get("time", [])],
            temperature_max_c=list(daily.get("temperature_2m_max", [])),
            temperature_min_c=list(daily.get("temperature_2m_min", [])),
            weather_code=list(daily.get("weather_code", [])),
        )
        times = [_iso_to_dt_with_tz(t, tz) for t in hourly.get("time", [])]
    except (TypeError, ValueError) as exc:
        raise MalformedPayloadError("Forecast response has unreadable timestamps") from exc

    hourly_series = HourlySeries(
        time=times,
        temperature_c=list(hourly.get("temperature_2m", [])),
        wind_speed_kmh=list(hourly.get("wind_speed_10m", [])),
        weather_code=list(hourly.get("weather_code", [])),
        precipitation_probability=list(hourly.get("precipitation_probability", [None] * len(times))),
    )
    return RawForecastPayload(daily=daily_series, hourly=hourly_series, timezone=str(tz))


async def geocode(city: str, *, settings: config.Settings | None = None) -> GeocodeResult:
    """Resolve a city name to its best match; NotFoundError when there is none."""
    settings = settings or config.settings
    params = {"name": city, "count": 1, "language": "en", "format": "json"}
    data = await _fetch_json(
        settings.geocoding_url,
        params,
        settings=settings,
        failure_message="Failed to fetch city coordinates",
    )

    results = data.get("results") or []
    if not results:
        logger.info("No geocoding match", extra={"city": city})
        raise NotFoundError(city)

    first = results[0]
    try:
        match = GeocodeResult(
            name=first["name"],
            country=first.get("country"),
            latitude=first["latitude"],
            longitude=first["longitude"],
        )
    except (KeyError, TypeError) as exc:
        raise MalformedPayloadError("Geocoding response is missing coordinates") from exc
    logger.debug(
        "Geocoded city",
        extra={"city": city, "match": match.name, "latitude": match.latitude, "longitude": match.longitude},
    )
    return match


async def _fetch_current(coordinate: Coordinate, settings: config.Settings, failure_message: str) -> RawCurrentReading:
    params = {
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
        "current": ",".join(CURRENT_VARS),
        "timezone": "auto",
    }
    data = await _fetch_json(settings.forecast_url, params, settings=settings, failure_message=failure_message)
    return parse_current(data)


async def _fetch_forecast(coordinate: Coordinate, settings: config.Settings, failure_message: str) -> RawForecastPayload:
    params = {
        "latitude": coordinate.latitude,
        "longitude": coordinate.longitude,
        "daily": ",".join(DAILY_VARS),
        "hourly": ",".join(HOURLY_VARS),
        "timezone": "auto",
    }
    data = await _fetch_json(settings.forecast_url, params, settings=settings, failure_message=failure_message)
    return parse_forecast(data)


async def fetch_current_by_coordinate(coordinate: Coordinate, *, settings: config.Settings | None = None) -> RawCurrentReading:
    """Fetch current conditions for a coordinate."""
    return await _fetch_current(
        coordinate, settings or config.settings, "Failed to fetch weather data for coordinates"
    )


async def fetch_forecast_by_coordinate(coordinate: Coordinate, *, settings: config.Settings | None = None) -> RawForecastPayload:
    """Fetch daily and hourly series for a coordinate in one call."""
    return await _fetch_forecast(
        coordinate, settings or config.settings, "Failed to fetch forecast data for coordinates"
    )


async def fetch_current_by_city(city: str, *, settings: config.Settings | None = None) -> RawCurrentReading:
    """Geocode `city`, then fetch its current conditions.

    The resolved coordinate is not shared with fetch_forecast_by_city, so a
    city search geocodes twice.
    """
    settings = settings or config.settings
    match = await geocode(city, settings=settings)
    return await _fetch_current(match.coordinate, settings, "Failed to fetch weather data")


async def fetch_forecast_by_city(city: str, *, settings: config.Settings | None = None) -> RawForecastPayload:
    """Geocode `city`, then fetch its daily and hourly series."""
    settings = settings or config.settings
    match = await geocode(city, settings=settings)
    return await _fetch_forecast(match.coordinate, settings, "Failed to fetch forecast data")
