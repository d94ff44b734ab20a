"""HTTP API exposing weather lookups and nearby-station synthesis."""

from typing import List, NoReturn, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .config import settings
from .data_sources import build_data_source
from .domain import SyntheticStation, WeatherViewModel, parse_coordinate, require_city
from .errors import MalformedPayloadError, NotFoundError, TransportError, ValidationError, WeatherLookupError
from .forecast_service import STATIONS_FAILED_MESSAGE, find_nearby_stations, get_weather_for_city, search_coordinate
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="pinpoint/api")

router = APIRouter()
DATA_SOURCE = build_data_source(settings)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (MalformedPayloadError, status.HTTP_502_BAD_GATEWAY),
)


class CoordinateWeatherResponse(BaseModel):
    """Weather for a coordinate plus the nearby-station side channel."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    weather: WeatherViewModel
    stations: List[SyntheticStation]
    stations_error: Optional[str] = None


def _raise_http(exc: WeatherLookupError) -> NoReturn:
    """Translate a pipeline error into an HTTPException carrying its message."""
    code = next((c for cls, c in _STATUS_BY_ERROR if isinstance(exc, cls)), status.HTTP_502_BAD_GATEWAY)
    if code >= 500:
        logger.warning("Weather lookup failed", extra={"status": code, "error": exc.message})
    else:
        logger.info("Weather lookup rejected", extra={"status": code, "error": exc.message})
    raise HTTPException(status_code=code, detail=exc.message) from exc


@router.get("/weather", response_model=WeatherViewModel)
async def weather_for_city(city: str = Query(default="")):
    """Current conditions, 3-day forecast and 24-hour outlook for a city name."""
    try:
        name = require_city(city)
        return await get_weather_for_city(name, data_source=DATA_SOURCE, settings=settings)
    except WeatherLookupError as exc:
        _raise_http(exc)


@router.get("/weather/coordinates", response_model=CoordinateWeatherResponse)
async def weather_for_coordinates(latitude: float = Query(...), longitude: float = Query(...)):
    """Weather for a coordinate; nearby stations ride along and never fail the request."""
    try:
        coordinate = parse_coordinate(latitude, longitude)
        result = await search_coordinate(coordinate, data_source=DATA_SOURCE, settings=settings)
    except WeatherLookupError as exc:
        _raise_http(exc)

    return CoordinateWeatherResponse(
        weather=result.weather,
        stations=result.stations.stations,
        stations_error=result.stations.error,
    )


@router.get("/stations", response_model=List[SyntheticStation])
async def nearby_stations(latitude: float = Query(...), longitude: float = Query(...)):
    """Synthetic stations on a ring around a coordinate, nearest first."""
    try:
        coordinate = parse_coordinate(latitude, longitude)
    except ValidationError as exc:
        _raise_http(exc)

    lookup = await find_nearby_stations(coordinate, settings=settings)
    if not lookup.ok:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=lookup.error or STATIONS_FAILED_MESSAGE,
        )
    return lookup.stations
