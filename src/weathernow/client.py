# OOP boundary for external i/o
# all http, status checks and payload validation live here, so the state machine only sees
# typed value objects or a WeatherNowError carrying a user-facing message
# use a thread-local session per executor worker

from __future__ import annotations
import json
import logging
import threading
from typing import Any, Dict, List, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from .config import FORECAST_URL, GEOCODING_URL, USER_AGENT, Settings
from .models import LocationCandidate, WeatherSnapshot
from .payloads import parse_candidates, parse_snapshot

logger = logging.getLogger(__name__)

class WeatherNowError(RuntimeError):
    # base type, .message is what the user gets to see
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class NetworkError(WeatherNowError):
    # transport failure or non-success http status
    pass

class FormatError(WeatherNowError):
    # body is not parseable
    pass

class DataError(WeatherNowError):
    # parseable but missing what we need
    pass

class NoResults(WeatherNowError):
    # informational, the search simply matched nothing
    def __init__(self, message: str = "No matching locations found."):
        super().__init__(message)

def _is_success(resp: requests.Response) -> bool:
    return 200 <= resp.status_code < 300

class HTTPClient:
    # session handling shared by every outbound endpoint
    # subclasses name their default url and the Settings field that overrides it
    DEFAULT_URL: str
    URL_SETTING: str

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        user_agent: str = USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or self.DEFAULT_URL
        self.timeout = timeout
        self.user_agent = user_agent
        # an injected session is shared by every thread, otherwise each worker builds its own
        self._shared = session
        self._local = threading.local()
        # one attempt per request, never retried
        self._retry = Retry(total=0, raise_on_status=False)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any):
        return cls(
            url=getattr(settings, cls.URL_SETTING),
            timeout=settings.timeout,
            user_agent=settings.user_agent,
            **kwargs,
        )

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        if self._shared is not None:
            return self._shared
        sess = getattr(self._local, "session", None)
        if sess is None:
            sess = self._build_session()
            self._local.session = sess
        return sess

class GeocodingClient(HTTPClient):
    DEFAULT_URL = GEOCODING_URL
    URL_SETTING = "geocoding_url"
    MAX_RESULTS = 5
    LANGUAGE = "en"
    FALLBACK_MESSAGE = "Failed to search location."

    def search(self, query: str) -> List[LocationCandidate]:
        """Look up a place name and return up to five candidates in provider order.

        Raises NoResults when nothing matches and NetworkError for any
        transport, status or decoding failure.
        """
        if not query or not query.strip():
            raise ValueError("query must not be blank")

        params: Dict[str, Any] = {
            "name": query,
            "count": self.MAX_RESULTS,
            "language": self.LANGUAGE,
            "format": "json",
        }
        logger.info("Searching locations for %r", query)

        try:
            resp = self._session().get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Geocoding request for %r failed: %s", query, exc)
            raise NetworkError(str(exc) or self.FALLBACK_MESSAGE) from exc

        if not _is_success(resp):
            logger.warning("Geocoding returned HTTP %s for %r", resp.status_code, query)
            raise NetworkError("Geocoding failed")

        try:
            candidates = parse_candidates(resp.json())
        except ValueError as exc:
            logger.warning("Unreadable geocoding response for %r: %s", query, exc)
            raise NetworkError(str(exc) or self.FALLBACK_MESSAGE) from exc

        if not candidates:
            raise NoResults()
        return candidates

class ForecastClient(HTTPClient):
    DEFAULT_URL = FORECAST_URL
    URL_SETTING = "forecast_url"
    DAILY_VARIABLES = "temperature_2m_max,temperature_2m_min,weathercode"
    FALLBACK_MESSAGE = "Failed to fetch weather."

    def fetch_by_coordinates(
        self, lat: float, lon: float, place_name: Optional[str] = None
    ) -> WeatherSnapshot:
        # current conditions plus the first days of the daily forecast for one point
        params: Dict[str, Any] = {
            "latitude": lat,
            "longitude": lon,
            "current_weather": "true",
            "daily": self.DAILY_VARIABLES,
            "timezone": "auto",
        }
        logger.info("Fetching weather: %s %s", self.url, params)

        try:
            resp = self._session().get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Weather request for (%s, %s) failed: %s", lat, lon, exc)
            raise NetworkError(str(exc) or self.FALLBACK_MESSAGE) from exc

        if not _is_success(resp):
            raise NetworkError(f"Weather request failed with status {resp.status_code}")

        # read as text first so the raw body is available when parsing fails
        body = resp.text
        try:
            data = json.loads(body)
        except ValueError as exc:
            logger.error("Failed to parse weather JSON. Raw response: %s", body)
            raise FormatError("Unexpected response format from API") from exc

        try:
            return parse_snapshot(data, place_name)
        except ValueError as exc:
            keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
            logger.error("Weather payload without current conditions; top-level keys: %s", keys)
            raise DataError("Weather data not found in API response") from exc
