"""WMO weather-interpretation codes mapped to an icon glyph and a readable label."""
from __future__ import annotations

from typing import Dict, NamedTuple


class WeatherInfo(NamedTuple):
    icon: str
    condition: str


UNKNOWN_WEATHER = WeatherInfo(icon="🌤️", condition="Unknown")

WEATHER_CODES: Dict[int, WeatherInfo] = {
    0: WeatherInfo("☀️", "Clear Sky"),
    1: WeatherInfo("🌤️", "Mainly Clear"),
    2: WeatherInfo("⛅", "Partly Cloudy"),
    3: WeatherInfo("☁️", "Overcast"),
    45: WeatherInfo("🌫️", "Foggy"),
    48: WeatherInfo("🌫️", "Depositing Rime Fog"),
    51: WeatherInfo("🌦️", "Light Drizzle"),
    53: WeatherInfo("🌦️", "Moderate Drizzle"),
    55: WeatherInfo("🌧️", "Dense Drizzle"),
    56: WeatherInfo("🌧️", "Light Freezing Drizzle"),
    57: WeatherInfo("🌧️", "Dense Freezing Drizzle"),
    61: WeatherInfo("🌧️", "Slight Rain"),
    63: WeatherInfo("🌧️", "Moderate Rain"),
    65: WeatherInfo("🌧️", "Heavy Rain"),
    66: WeatherInfo("🌧️", "Light Freezing Rain"),
    67: WeatherInfo("🌧️", "Heavy Freezing Rain"),
    71: WeatherInfo("❄️", "Slight Snow"),
    73: WeatherInfo("❄️", "Moderate Snow"),
    75: WeatherInfo("❄️", "Heavy Snow"),
    77: WeatherInfo("❄️", "Snow Grains"),
    80: WeatherInfo("🌦️", "Slight Rain Showers"),
    81: WeatherInfo("🌧️", "Moderate Rain Showers"),
    82: WeatherInfo("🌧️", "Violent Rain Showers"),
    85: WeatherInfo("❄️", "Slight Snow Showers"),
    86: WeatherInfo("❄️", "Heavy Snow Showers"),
    95: WeatherInfo("⛈️", "Thunderstorm"),
    96: WeatherInfo("⛈️", "Thunderstorm with Slight Hail"),
    99: WeatherInfo("⛈️", "Thunderstorm with Heavy Hail"),
}


def lookup(code: object) -> WeatherInfo:
    """Return the icon/condition pair for a WMO code, or the fallback for anything unrecognised."""
    if isinstance(code, bool):
        return UNKNOWN_WEATHER
    if isinstance(code, float) and code.is_integer():
        code = int(code)
    if not isinstance(code, int):
        return UNKNOWN_WEATHER
    return WEATHER_CODES.get(code, UNKNOWN_WEATHER)
