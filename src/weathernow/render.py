# plain-text views of AppState for the terminal front end

from __future__ import annotations
import math
from typing import List, Optional, Sequence
from .codes import resolve
from .models import LocationCandidate, WeatherSnapshot
from .state import AppState

NO_VALUE = "—"

def _half_up(value: float) -> int:
    # halves round up, so 2.5 shows as 3 and -2.5 as -2
    return math.floor(value + 0.5)

def _round(value: Optional[float]) -> str:
    return NO_VALUE if value is None else str(_half_up(value))

def _plain(value: Optional[float]) -> str:
    if value is None:
        return NO_VALUE
    return f"{value:g}"

def render_candidates(candidates: Sequence[LocationCandidate]) -> List[str]:
    lines = []
    for idx, loc in enumerate(candidates, start=1):
        population = NO_VALUE if loc.population is None else loc.population
        lines.append(f"{idx}. {loc.label}")
        lines.append(
            f"   {loc.country} {NO_VALUE} {loc.latitude:.2f}, {loc.longitude:.2f}"
            f"   Pop: {population}"
        )
    return lines

def render_weather(snapshot: WeatherSnapshot) -> List[str]:
    current = snapshot.current
    condition = resolve(current.weathercode)
    temp = current.temperature if current.temperature is not None else 0
    lines = [
        f"{condition.icon}  {snapshot.place_name or 'Location'}  {_half_up(temp)}°C",
        f"As of: {current.observed_at or NO_VALUE}",
        "",
        "Current Details",
        f"  Temperature: {_plain(current.temperature)}°C",
        f"  Wind Speed: {_plain(current.windspeed)} km/h",
        f"  Wind Direction: {_plain(current.winddirection)}°",
        f"  Condition: {condition.text}",
    ]
    if snapshot.daily:
        lines += ["", f"{len(snapshot.daily)}-day Forecast"]
        for day in snapshot.daily:
            lines.append(
                f"  {day.date}  {resolve(day.weathercode).text:<15} "
                f"{_round(day.temp_max)}° / {_round(day.temp_min)}°"
            )
    return lines

def render(state: AppState) -> str:
    """Whole screen for a state, in the order the sections appear on the page."""
    lines: List[str] = []
    if state.loading_locations:
        lines.append("Looking up locations...")
    if state.candidates:
        lines += render_candidates(state.candidates)
    if state.loading_weather:
        lines.append("Loading weather…")
    if state.error:
        lines.append(f"Error: {state.error}")
    if state.weather is not None and not state.loading_weather:
        lines += render_weather(state.weather)
    return "\n".join(lines)
