"""Synthesize a ring of virtual stations around a coordinate.

Open-Meteo serves a model grid rather than real station observations, so the
"nearby stations" offered for re-querying are points placed on a small circle
around the origin. Positions use a plane approximation (fine at ~0.1°);
distances are true great-circle distances back to the origin.
"""
from __future__ import annotations

import math
import random
from typing import List, Protocol

from pinpoint.domain import Coordinate, SyntheticStation
from pinpoint.geo import haversine_km

DEFAULT_STATION_COUNT = 8
DEFAULT_RADIUS_DEG = 0.1
MIN_ELEVATION_M = 100
ELEVATION_SPAN_M = 1000


class RandomSource(Protocol):
    def random(self) -> float: ...


def synthesize_stations(
    origin: Coordinate,
    *,
    count: int = DEFAULT_STATION_COUNT,
    radius_deg: float = DEFAULT_RADIUS_DEG,
    rng: RandomSource | None = None,
) -> List[SyntheticStation]:
    """Return `count` stations evenly spaced on a circle, nearest first.

    Elevation is a synthetic draw in [100, 1100) metres, fresh on every call.
    """
    rng = rng or random
    stations: List[SyntheticStation] = []
    for i in range(count):
        angle = i * 2 * math.pi / count
        lat = origin.latitude + radius_deg * math.cos(angle)
        lon = origin.longitude + radius_deg * math.sin(angle)
        # model_construct: rings drawn near a pole may step past ±90
        distance = haversine_km(origin, Coordinate.model_construct(latitude=lat, longitude=lon))
        stations.append(
            SyntheticStation(
                id=f"station_{i}",
                name=f"Weather Point {i + 1}",
                latitude=lat,
                longitude=lon,
                distance_km=round(distance, 1),
                elevation_meters=MIN_ELEVATION_M + int(rng.random() * ELEVATION_SPAN_M),
            )
        )
    # sorted() is stable, so equal distances keep ring order
    return sorted(stations, key=lambda s: s.distance_km)
