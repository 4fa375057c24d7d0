# settings and logging setup in one place so the rest of the code never reads the environment

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()  # a local .env is merged into the environment, real env vars win

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
IP_LOCATION_URL = "http://ip-api.com/json/"
USER_AGENT = "weathernow/0.1"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"

def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds (got {raw!r})") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {raw!r})")
    return value

@dataclass(frozen=True)
class Settings:
    geocoding_url: str = GEOCODING_URL
    forecast_url: str = FORECAST_URL
    ip_location_url: str = IP_LOCATION_URL
    # no timeout by default: a hung request keeps its loading flag set
    timeout: Optional[float] = None
    user_agent: str = USER_AGENT
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            geocoding_url=os.getenv("WEATHERNOW_GEOCODING_URL", GEOCODING_URL),
            forecast_url=os.getenv("WEATHERNOW_FORECAST_URL", FORECAST_URL),
            ip_location_url=os.getenv("WEATHERNOW_IP_LOCATION_URL", IP_LOCATION_URL),
            timeout=_optional_float("WEATHERNOW_TIMEOUT"),
            user_agent=os.getenv("WEATHERNOW_USER_AGENT", USER_AGENT),
            log_level=os.getenv("WEATHERNOW_LOG_LEVEL", "WARNING").upper(),
        )

def setup_logging(level: str = "WARNING") -> None:
    """Attach a single stderr handler to the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)

    # connection pool chatter is noise at INFO
    logging.getLogger("urllib3").setLevel(logging.WARNING)
