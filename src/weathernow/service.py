# orchestration and business rules
# turns user intent (search, pick a candidate, use my location) into client calls and
# records every outcome in a single AppState; all failures end up as one error message
# network work can run on an Executor, late results from superseded actions are dropped

from __future__ import annotations
import logging
import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional
from .client import ForecastClient, GeocodingClient, NoResults, WeatherNowError
from .config import Settings
from .location import CapabilityError, DeviceError, IPLocationProvider, LocationProvider
from .models import LocationCandidate
from .state import AppState, RequestState

logger = logging.getLogger(__name__)

MY_LOCATION_LABEL = "Your location"

def _done(result: Any = None) -> Future:
    fut: Future = Future()
    fut.set_result(result)
    return fut

class WeatherApp:
    """Owns the application state and drives the geocoding and forecast clients.

    Every action bumps a generation counter. A worker only writes its result
    back if no newer action has started in the meantime, so a slow response
    can never overwrite what the user asked for afterwards. The transport call
    itself is not cancelled.

    Without an executor actions run inline and return an already-completed
    Future; with one they return immediately and the Future completes once
    the state has been updated (or the result discarded).
    """

    def __init__(
        self,
        geocoder: GeocodingClient,
        forecaster: ForecastClient,
        locator: Optional[LocationProvider] = None,
        executor: Optional[Executor] = None,
    ):
        self.geocoder = geocoder
        self.forecaster = forecaster
        self.locator = locator
        self.executor = executor
        self.state = AppState()
        self._lock = threading.Lock()
        self._generation = 0

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        executor: Optional[Executor] = None,
        use_ip_location: bool = True,
    ) -> "WeatherApp":
        locator = IPLocationProvider.from_settings(settings) if use_ip_location else None
        return cls(
            geocoder=GeocodingClient.from_settings(settings),
            forecaster=ForecastClient.from_settings(settings),
            locator=locator,
            executor=executor,
        )

    def snapshot(self) -> AppState:
        # consistent copy for renderers running on another thread
        with self._lock:
            return self.state.copy()

    # actions

    def search(self, text: str) -> Optional[Future]:
        """Start a place-name search. Blank input is ignored and returns None."""
        if not text or not text.strip():
            return None

        with self._lock:
            generation = self._next_generation()
            self._update(
                query=text,
                error=None,
                geocoding=RequestState.pending(),
                forecast=RequestState.idle(),
            )
        return self._dispatch(lambda: self._run_search(generation, text))

    def select_location(self, candidate: LocationCandidate) -> Future:
        return self.fetch_coordinates(candidate.latitude, candidate.longitude, candidate.label)

    def fetch_coordinates(
        self, lat: float, lon: float, place_name: Optional[str] = None
    ) -> Future:
        generation = self._start_forecast(lat, lon, place_name)
        return self._dispatch(lambda: self._run_forecast(generation, lat, lon, place_name))

    def use_my_location(self) -> Future:
        with self._lock:
            # in-flight searches and forecasts are superseded either way,
            # their results will be dropped so their loading flags go too
            generation = self._next_generation()
            self._settle_pending()
            if self.locator is None:
                self.state.error = CapabilityError().message
                logger.info("Location requested but no provider is configured")
                return _done()
            self.state.error = None
            self.state.forecast = RequestState.pending()
        return self._dispatch(lambda: self._run_locate(generation))

    # workers

    def _run_search(self, generation: int, text: str) -> None:
        try:
            candidates = self.geocoder.search(text)
        except NoResults as exc:
            self._apply(generation, geocoding=RequestState.succeeded(()), error=exc.message)
        except WeatherNowError as exc:
            logger.warning("Search for %r failed: %s", text, exc.message)
            self._apply(generation, geocoding=RequestState.failed(exc.message), error=exc.message)
        else:
            self._apply(generation, geocoding=RequestState.succeeded(tuple(candidates)))

    def _run_forecast(
        self, generation: int, lat: float, lon: float, place_name: Optional[str]
    ) -> None:
        try:
            snapshot = self.forecaster.fetch_by_coordinates(lat, lon, place_name)
        except WeatherNowError as exc:
            logger.warning("Weather fetch error for (%s, %s): %s", lat, lon, exc.message)
            self._apply(generation, forecast=RequestState.failed(exc.message), error=exc.message)
        else:
            self._apply(generation, forecast=RequestState.succeeded(snapshot))

    def _run_locate(self, generation: int) -> None:
        try:
            position = self.locator.get_current_position()
        except DeviceError as exc:
            self._apply(
                generation,
                forecast=RequestState.idle(),
                error=f"Could not get location: {exc.message}",
            )
            return

        # the forecast continues on this worker so the action's Future covers it
        follow_up = self._start_forecast(
            position.latitude, position.longitude, MY_LOCATION_LABEL, expected=generation
        )
        if follow_up is None:
            logger.debug("Discarding position from superseded location request")
            return
        self._run_forecast(follow_up, position.latitude, position.longitude, MY_LOCATION_LABEL)

    # bookkeeping

    def _next_generation(self) -> int:
        # caller holds the lock
        self._generation += 1
        return self._generation

    def _settle_pending(self) -> None:
        # caller holds the lock
        if self.state.geocoding.is_pending:
            self.state.geocoding = RequestState.idle()
        if self.state.forecast.is_pending:
            self.state.forecast = RequestState.idle()

    def _update(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self.state, name, value)

    def _start_forecast(
        self,
        lat: float,
        lon: float,
        place_name: Optional[str],
        expected: Optional[int] = None,
    ) -> Optional[int]:
        with self._lock:
            if expected is not None and expected != self._generation:
                return None
            generation = self._next_generation()
            self._update(
                query=place_name if place_name is not None else f"{lat:.2f}, {lon:.2f}",
                error=None,
                geocoding=RequestState.idle(),
                forecast=RequestState.pending(),
            )
            return generation

    def _apply(self, generation: int, **changes: Any) -> bool:
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding stale result (generation %d, current %d)",
                    generation,
                    self._generation,
                )
                return False
            self._update(**changes)
            return True

    def _dispatch(self, job: Callable[[], None]) -> Future:
        if self.executor is None:
            return _done(job())
        return self.executor.submit(job)
