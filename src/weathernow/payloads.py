# transform raw Open-Meteo payloads into our small, typed value objects and check shape
# pure functions, so the client stays a thin i/o layer and these stay trivially testable

from __future__ import annotations
import logging
import math
from typing import Any, List, Optional, Sequence
from .models import (
    CurrentConditions,
    DailyForecast,
    LocationCandidate,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)

# the forecast panel only ever shows the first few days
MAX_DAILY = 3

def _at(values: Any, idx: int) -> Any:
    # index into a parallel array that may be missing or shorter than "time"
    if isinstance(values, (list, tuple)) and idx < len(values):
        return values[idx]
    return None

def _num(value: Any) -> Optional[float]:
    # JSON numbers only; bools, strings and NaN/Infinity count as missing
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    return value if math.isfinite(value) else None

def _code(value: Any) -> Optional[int]:
    value = _num(value)
    return None if value is None else int(value)

def parse_candidates(data: Any) -> List[LocationCandidate]:
    # geocoding shape: {"results": [{"name", "admin1"?, "country", "latitude", "longitude", "population"?}]}
    if not isinstance(data, dict):
        raise ValueError("Unsupported payload shape for parse_candidates()")

    results = data.get("results") or []
    if not isinstance(results, list):
        raise ValueError("Unsupported payload shape for parse_candidates(): results is not a list")
    candidates: List[LocationCandidate] = []
    for item in results:
        try:
            candidates.append(
                LocationCandidate(
                    name=str(item["name"]),
                    country=str(item.get("country") or ""),
                    latitude=float(item["latitude"]),
                    longitude=float(item["longitude"]),
                    admin1=item.get("admin1") or None,
                    population=item.get("population"),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed geocoding result %r: %s", item, exc)
    return candidates

def parse_daily(daily: Any, limit: int = MAX_DAILY) -> List[DailyForecast]:
    # daily shape: parallel arrays keyed by variable, zipped on "time"
    if not isinstance(daily, dict):
        return []
    times: Sequence[Any] = daily.get("time") or []
    if not isinstance(times, (list, tuple)):
        return []
    rows = []
    for idx, day in enumerate(times[:limit]):
        rows.append(
            DailyForecast(
                date=str(day),
                weathercode=_code(_at(daily.get("weathercode"), idx)),
                temp_max=_num(_at(daily.get("temperature_2m_max"), idx)),
                temp_min=_num(_at(daily.get("temperature_2m_min"), idx)),
            )
        )
    return rows

def parse_snapshot(data: Any, place_name: Optional[str] = None) -> WeatherSnapshot:
    """Build a WeatherSnapshot from a forecast payload.

    Raises ValueError when the payload carries no current conditions. The
    display name falls back to the timezone reported by the API.
    """
    current = data.get("current_weather") if isinstance(data, dict) else None
    if not current or not isinstance(current, dict):
        raise ValueError("missing current_weather")

    timezone = data.get("timezone")
    return WeatherSnapshot(
        place_name=place_name if place_name is not None else str(timezone or ""),
        current=CurrentConditions(
            temperature=_num(current.get("temperature")),
            windspeed=_num(current.get("windspeed")),
            winddirection=_num(current.get("winddirection")),
            weathercode=_code(current.get("weathercode")),
            observed_at=current.get("time"),
        ),
        daily=tuple(parse_daily(data.get("daily"))),
        timezone=timezone,
    )
