# WMO weather code lookup used at render time

from __future__ import annotations
from typing import Dict, Optional
from .models import WeatherCodeDescriptor

UNKNOWN = WeatherCodeDescriptor(text="Unknown", icon="❓")

# extendable without changing resolve()
WEATHER_CODES: Dict[int, WeatherCodeDescriptor] = {
    0: WeatherCodeDescriptor("Clear sky", "☀️"),
    1: WeatherCodeDescriptor("Mainly clear", "🌤️"),
    2: WeatherCodeDescriptor("Partly cloudy", "⛅"),
    3: WeatherCodeDescriptor("Overcast", "☁️"),
    45: WeatherCodeDescriptor("Fog", "🌫️"),
    48: WeatherCodeDescriptor("Fog (rime)", "🌫️"),
    51: WeatherCodeDescriptor("Light drizzle", "🌦️"),
    61: WeatherCodeDescriptor("Slight rain", "🌧️"),
    63: WeatherCodeDescriptor("Moderate rain", "🌧️"),
    65: WeatherCodeDescriptor("Heavy rain", "⛈️"),
    71: WeatherCodeDescriptor("Light snow", "❄️"),
    80: WeatherCodeDescriptor("Showers", "🌧️"),
    95: WeatherCodeDescriptor("Thunderstorm", "⛈️"),
}

def resolve(code: Optional[int]) -> WeatherCodeDescriptor:
    """Map a weather code to its text/icon pair, falling back to UNKNOWN."""
    if code is None:
        return UNKNOWN
    return WEATHER_CODES.get(code, UNKNOWN)
