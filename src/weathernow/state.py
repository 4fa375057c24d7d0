# the single state container the controller owns; everything a renderer needs lives here

from __future__ import annotations
from dataclasses import asdict, dataclass, field, is_dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from .models import LocationCandidate, WeatherSnapshot

class Status(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

@dataclass(frozen=True)
class RequestState:
    # lifecycle of one operation kind; payload only when succeeded, message only when failed
    status: Status = Status.IDLE
    payload: Any = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestState":
        return cls()

    @classmethod
    def pending(cls) -> "RequestState":
        return cls(status=Status.PENDING)

    @classmethod
    def succeeded(cls, payload: Any) -> "RequestState":
        return cls(status=Status.SUCCEEDED, payload=payload)

    @classmethod
    def failed(cls, message: str) -> "RequestState":
        return cls(status=Status.FAILED, message=message)

    @property
    def is_pending(self) -> bool:
        return self.status is Status.PENDING

@dataclass
class AppState:
    query: str = ""
    geocoding: RequestState = field(default_factory=RequestState.idle)
    forecast: RequestState = field(default_factory=RequestState.idle)
    error: Optional[str] = None

    @property
    def candidates(self) -> Tuple[LocationCandidate, ...]:
        if self.geocoding.status is Status.SUCCEEDED:
            return tuple(self.geocoding.payload or ())
        return ()

    @property
    def weather(self) -> Optional[WeatherSnapshot]:
        if self.forecast.status is Status.SUCCEEDED:
            return self.forecast.payload
        return None

    @property
    def loading_locations(self) -> bool:
        return self.geocoding.is_pending

    @property
    def loading_weather(self) -> bool:
        return self.forecast.is_pending

    def copy(self) -> "AppState":
        # request states and their payloads are immutable, a shallow copy is enough
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "geocoding": _request_dict(self.geocoding),
            "forecast": _request_dict(self.forecast),
            "error": self.error,
        }

def _request_dict(state: RequestState) -> Dict[str, Any]:
    payload = state.payload
    if isinstance(payload, (list, tuple)):
        payload = [asdict(p) for p in payload]
    elif is_dataclass(payload):
        payload = asdict(payload)
    return {"status": state.status.value, "payload": payload, "message": state.message}
