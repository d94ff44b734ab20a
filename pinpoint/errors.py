"""Error taxonomy for the weather lookup pipeline.

Every error carries a human-readable `message` that presentation can show as-is.
"""
from __future__ import annotations


class WeatherLookupError(Exception):
    """Base class for failures surfaced by the lookup pipeline."""

    default_message = "Failed to fetch weather data"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(WeatherLookupError):
    """Geocoding returned no match for a city name."""

    def __init__(self, city: str) -> None:
        self.city = city
        super().__init__(f'City "{city}" not found')


class TransportError(WeatherLookupError):
    """Non-2xx status, network failure, or unreadable body from an upstream call."""


class MalformedPayloadError(WeatherLookupError):
    """Upstream payload is missing fields or its parallel series do not line up."""

    default_message = "Weather service returned an unexpected response"


class ValidationError(WeatherLookupError):
    """Caller-side input is out of range. Never raised by the fetch/normalize pipeline."""

    default_message = "Invalid input"
