"""Turn raw Open-Meteo payloads into the presentation view model.

Temperatures leave here in whole °F, wind in whole km/h. The hourly outlook is
the window (now, now + 24h] in upstream order, capped at 24 entries. The daily
forecast is the three days after the request day, labelled by position from
a fixed table rather than by real weekday.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional, Sequence

from pinpoint.data_sources.open_meteo_client import DailySeries, HourlySeries, RawCurrentReading, RawForecastPayload
from pinpoint.domain import Coordinate, CurrentConditions, ForecastDay, HourlyEntry, WeatherViewModel
from pinpoint.errors import MalformedPayloadError
from pinpoint.units import celsius_to_fahrenheit
from pinpoint.weather_codes import lookup
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="normalizer")

FORECAST_DAYS = 3
DAY_LABELS = ("Today", "Tomorrow", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
LOCATION_PIN = "📍"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def coordinate_label(coordinate: Coordinate) -> str:
    return f"{LOCATION_PIN} {coordinate.latitude:.4f}, {coordinate.longitude:.4f}"


def hour_label(when: dt.datetime) -> str:
    """12-hour clock label for the hour, e.g. "3 PM", "12 AM"."""
    return f"{when.hour % 12 or 12} {'AM' if when.hour < 12 else 'PM'}"


def day_label(position: int, date: dt.date) -> str:
    if position < len(DAY_LABELS):
        return DAY_LABELS[position]
    return date.strftime("%A")


def _require(value: Optional[float], what: str) -> float:
    if value is None:
        raise MalformedPayloadError(f"Forecast response is missing {what}")
    return value


def _check_aligned(length: int, series: Sequence[Sequence], context: str) -> None:
    if any(len(s) != length for s in series):
        raise MalformedPayloadError(f"Forecast {context} series have mismatched lengths")


def normalize_current(current: RawCurrentReading) -> CurrentConditions:
    info = lookup(current.weather_code)
    return CurrentConditions(
        temperature=round_half_up(celsius_to_fahrenheit(_require(current.temperature_c, "the current temperature"))),
        condition=info.condition,
        icon=info.icon,
        humidity=round_half_up(_require(current.relative_humidity, "the current humidity")),
        wind_speed=round_half_up(_require(current.wind_speed_kmh, "the current wind speed")),
    )


def normalize_daily(daily: DailySeries, *, days: int = FORECAST_DAYS) -> List[ForecastDay]:
    """Map daily entries 1..days (skipping today) to ForecastDay rows."""
    count = len(daily.time)
    _check_aligned(count, [daily.temperature_max_c, daily.temperature_min_c, daily.weather_code], "daily")
    if count < days + 1:
        raise MalformedPayloadError(
            f"Forecast response has {count} daily entries; at least {days + 1} are required"
        )

    out: List[ForecastDay] = []
    for position in range(days):
        i = position + 1
        info = lookup(daily.weather_code[i])
        out.append(
            ForecastDay(
                day=day_label(position, daily.time[i]),
                high=round_half_up(celsius_to_fahrenheit(_require(daily.temperature_max_c[i], "a daily high"))),
                low=round_half_up(celsius_to_fahrenheit(_require(daily.temperature_min_c[i], "a daily low"))),
                condition=info.condition,
                icon=info.icon,
            )
        )
    return out


def normalize_hourly(
    hourly: HourlySeries,
    now: dt.datetime,
    *,
    window_hours: int = 24,
    limit: int = 24,
) -> List[HourlyEntry]:
    """Entries with now < time <= now + window_hours, in upstream order, at most `limit`."""
    count = len(hourly.time)
    _check_aligned(
        count,
        [hourly.temperature_c, hourly.wind_speed_kmh, hourly.weather_code, hourly.precipitation_probability],
        "hourly",
    )
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    end = now + dt.timedelta(hours=window_hours)

    out: List[HourlyEntry] = []
    for i, when in enumerate(hourly.time):
        if len(out) >= limit:
            break
        if not (now < when <= end):
            continue
        info = lookup(hourly.weather_code[i])
        out.append(
            HourlyEntry(
                time=hour_label(when),
                temperature=round_half_up(celsius_to_fahrenheit(_require(hourly.temperature_c[i], "an hourly temperature"))),
                wind_speed=round_half_up(_require(hourly.wind_speed_kmh[i], "an hourly wind speed")),
                condition=info.condition,
                icon=info.icon,
                precipitation_probability=round_half_up(hourly.precipitation_probability[i] or 0),
            )
        )
    return out


def normalize(
    location_label: str,
    current: RawCurrentReading,
    forecast: RawForecastPayload,
    now: dt.datetime,
    *,
    window_hours: int = 24,
    limit: int = 24,
) -> WeatherViewModel:
    """Build the view model from one current reading and one forecast payload.

    Deterministic for a fixed `now`. A naive `now` is taken to be UTC.
    Raises MalformedPayloadError when the daily series is too short or any
    parallel series are misaligned.
    """
    view = WeatherViewModel(
        location=location_label,
        current=normalize_current(current),
        forecast=normalize_daily(forecast.daily),
        hourly=normalize_hourly(forecast.hourly, now, window_hours=window_hours, limit=limit),
    )
    logger.debug(
        "Normalized weather payloads",
        extra={"location": location_label, "forecast_count": len(view.forecast), "hourly_count": len(view.hourly)},
    )
    return view
