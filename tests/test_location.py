import pytest
import requests
from conftest import FakeResponse, FakeSession
from weathernow.location import (
    CapabilityError,
    DeviceError,
    IPLocationProvider,
    StaticLocationProvider,
)
from weathernow.models import Position


def test_ip_location_success():
    session = FakeSession(FakeResponse(payload={
        "status": "success", "city": "Hyderabad", "country": "India", "lat": 17.385, "lon": 78.4867,
    }))
    provider = IPLocationProvider(session=session)

    assert provider.get_current_position() == Position(17.385, 78.4867)
    assert session.calls[0]["url"] == "http://ip-api.com/json/"


def test_ip_location_reported_failure():
    session = FakeSession(FakeResponse(payload={"status": "fail", "message": "private range"}))
    with pytest.raises(DeviceError) as info:
        IPLocationProvider(session=session).get_current_position()
    assert info.value.message == "private range"


def test_ip_location_transport_failure():
    session = FakeSession(requests.ConnectionError("connection refused"))
    with pytest.raises(DeviceError) as info:
        IPLocationProvider(session=session).get_current_position()
    assert info.value.message == "connection refused"


def test_ip_location_bad_status():
    session = FakeSession(FakeResponse(status_code=429, text="slow down"))
    with pytest.raises(DeviceError):
        IPLocationProvider(session=session).get_current_position()


def test_ip_location_missing_coordinates():
    session = FakeSession(FakeResponse(payload={"status": "success"}))
    with pytest.raises(DeviceError):
        IPLocationProvider(session=session).get_current_position()


def test_static_provider():
    assert StaticLocationProvider(1.5, 2.5).get_current_position() == Position(1.5, 2.5)


def test_capability_error_message():
    assert CapabilityError().message == "Geolocation not available in your browser."


def test_ip_location_from_settings():
    from weathernow.config import Settings

    provider = IPLocationProvider.from_settings(Settings(ip_location_url="http://geo.local/json", timeout=2.0))
    assert provider.url == "http://geo.local/json"
    assert provider.timeout == 2.0


def test_ip_location_session_never_retries():
    provider = IPLocationProvider()
    session = provider._session()
    assert session.get_adapter("http://ip-api.com").max_retries.total == 0
    assert provider._session() is session
