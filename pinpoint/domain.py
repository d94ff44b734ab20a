"""Domain vocabulary and presentation-ready schemas for weather lookups.

`Coordinate` is the only input value type; everything else here is output:
the normalized view model handed to presentation and the synthetic stations
offered for exploratory re-querying. Models serialize with camelCase keys
(`windSpeed`, `distanceKm`, ...) so a browser client can consume them directly.
"""

from __future__ import annotations

import math
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pinpoint.errors import ValidationError


class _ViewModel(BaseModel):
    """Base model with strict extra handling and camelCase aliases."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class Coordinate(BaseModel):
    """Immutable latitude/longitude pair in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CurrentConditions(_ViewModel):
    """Current conditions in display units (°F, %, km/h)."""
    temperature: int
    condition: str
    icon: str
    humidity: int
    wind_speed: int


class ForecastDay(_ViewModel):
    """One day of the short-range daily forecast."""
    day: str
    high: int
    low: int
    condition: str
    icon: str


class HourlyEntry(_ViewModel):
    """One hour of the next-24-hour outlook."""
    time: str
    temperature: int
    wind_speed: int
    condition: str
    icon: str
    precipitation_probability: int


class WeatherViewModel(_ViewModel):
    """Sole output of the lookup pipeline."""
    location: str
    current: CurrentConditions
    forecast: List[ForecastDay]
    hourly: List[HourlyEntry] = Field(default_factory=list, max_length=24)


class SyntheticStation(_ViewModel):
    """A fabricated sampling point near a coordinate; not a physical station."""
    id: str
    name: str
    latitude: float
    longitude: float
    distance_km: float
    elevation_meters: int

    @property
    def coordinate(self) -> Coordinate:
        """Queryable position; a ring point past a pole or the antimeridian is folded back in range."""
        lat, lon = self.latitude, self.longitude
        if lat > 90:
            lat, lon = 180 - lat, lon + 180
        elif lat < -90:
            lat, lon = -180 - lat, lon + 180
        if not -180 <= lon <= 180:
            lon = (lon + 180) % 360 - 180
        return Coordinate(latitude=lat, longitude=lon)


def parse_coordinate(latitude: object, longitude: object) -> Coordinate:
    """Validate raw user input and build a Coordinate.

    Raises ValidationError with a message suitable for direct display.
    """
    try:
        lat = float(latitude)  # type: ignore[arg-type]
        lon = float(longitude)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("Please enter valid coordinates")
    if math.isnan(lat) or math.isnan(lon):
        raise ValidationError("Please enter valid coordinates")
    if lat < -90 or lat > 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if lon < -180 or lon > 180:
        raise ValidationError("Longitude must be between -180 and 180")
    return Coordinate(latitude=lat, longitude=lon)


def require_city(name: str | None) -> str:
    """Trim a city search term; blank input is rejected."""
    city = (name or "").strip()
    if not city:
        raise ValidationError("Please enter a city name")
    return city
