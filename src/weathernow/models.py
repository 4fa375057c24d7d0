# value objects to keep data shapes explicit and reusable across the app

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

@dataclass(frozen=True)
class LocationCandidate:
    # one geocoding match, kept in the order the provider ranked it
    name: str
    country: str
    latitude: float
    longitude: float
    admin1: Optional[str] = None
    population: Optional[int] = None

    @property
    def label(self) -> str:
        # "name, admin1" when the region is known, else just the name
        return f"{self.name}, {self.admin1}" if self.admin1 else self.name

@dataclass(frozen=True)
class CurrentConditions:
    temperature: Optional[float]
    windspeed: Optional[float]
    winddirection: Optional[float]
    weathercode: Optional[int]
    observed_at: Optional[str]

@dataclass(frozen=True)
class DailyForecast:
    # one row of the short-range forecast
    date: str
    weathercode: Optional[int]
    temp_max: Optional[float]
    temp_min: Optional[float]

@dataclass(frozen=True)
class WeatherSnapshot:
    place_name: str
    current: CurrentConditions
    daily: Tuple[DailyForecast, ...] = ()
    timezone: Optional[str] = None

@dataclass(frozen=True)
class WeatherCodeDescriptor:
    text: str
    icon: str

@dataclass(frozen=True)
class Position:
    # coordinates reported by a location provider
    latitude: float
    longitude: float
