# location providers stand in for a device's "get current position" capability
# a provider either returns a Position or raises DeviceError with a short reason

from __future__ import annotations
import logging
from typing import Protocol
import requests
from .client import HTTPClient, WeatherNowError
from .config import IP_LOCATION_URL
from .models import Position

logger = logging.getLogger(__name__)

class CapabilityError(WeatherNowError):
    # no location provider is configured at all
    def __init__(self, message: str = "Geolocation not available in your browser."):
        super().__init__(message)

class DeviceError(WeatherNowError):
    # the provider exists but could not produce a position
    pass

class LocationProvider(Protocol):
    def get_current_position(self) -> Position:
        ...

class StaticLocationProvider:
    # always reports the same coordinates, handy for kiosks and tests
    def __init__(self, latitude: float, longitude: float):
        self.position = Position(latitude=latitude, longitude=longitude)

    def get_current_position(self) -> Position:
        return self.position

class IPLocationProvider(HTTPClient):
    # approximate the machine's position from its public IP address (ip-api.com)
    DEFAULT_URL = IP_LOCATION_URL
    URL_SETTING = "ip_location_url"

    def get_current_position(self) -> Position:
        try:
            resp = self._session().get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("IP location lookup failed: %s", exc)
            raise DeviceError(str(exc) or "Position unavailable") from exc

        if resp.status_code != 200:
            raise DeviceError(f"Location service returned status {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise DeviceError("Location service sent an unreadable response") from exc

        if not isinstance(data, dict) or data.get("status") != "success":
            reason = data.get("message") if isinstance(data, dict) else None
            logger.debug("ip-api failed: %s", reason)
            raise DeviceError(reason or "Position unavailable")

        try:
            position = Position(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise DeviceError("Location service response had no coordinates") from exc

        logger.info("Location detected via ip-api: %s, %s", data.get("city"), data.get("country"))
        return position
