# client tests run against a fake session, they check the wire params and the error mapping

import logging
import pytest
import requests
from conftest import FakeResponse, FakeSession
from weathernow.client import (
    DataError,
    ForecastClient,
    FormatError,
    GeocodingClient,
    NetworkError,
    NoResults,
    WeatherNowError,
)
from weathernow.config import Settings


def test_search_sends_expected_params(london_results):
    session = FakeSession(FakeResponse(payload=london_results))
    client = GeocodingClient(session=session)

    candidates = client.search("London")

    assert len(candidates) == 5
    call = session.calls[0]
    assert call["url"] == "https://geocoding-api.open-meteo.com/v1/search"
    assert call["params"] == {"name": "London", "count": 5, "language": "en", "format": "json"}
    assert call["timeout"] is None


def test_search_no_results():
    client = GeocodingClient(session=FakeSession(FakeResponse(payload={"results": []})))
    with pytest.raises(NoResults) as info:
        client.search("Atlantis")
    assert info.value.message == "No matching locations found."


def test_search_missing_results_key():
    client = GeocodingClient(session=FakeSession(FakeResponse(payload={"generationtime_ms": 0.3})))
    with pytest.raises(NoResults):
        client.search("Atlantis")


def test_search_http_error():
    client = GeocodingClient(session=FakeSession(FakeResponse(status_code=503, text="busy")))
    with pytest.raises(NetworkError) as info:
        client.search("London")
    assert info.value.message == "Geocoding failed"


def test_search_transport_error_keeps_message():
    session = FakeSession(requests.ConnectionError("Name or service not known"))
    with pytest.raises(NetworkError) as info:
        GeocodingClient(session=session).search("London")
    assert info.value.message == "Name or service not known"


def test_search_transport_error_without_message():
    session = FakeSession(requests.ConnectionError())
    with pytest.raises(NetworkError) as info:
        GeocodingClient(session=session).search("London")
    assert info.value.message == "Failed to search location."


def test_search_invalid_json_is_network_error():
    client = GeocodingClient(session=FakeSession(FakeResponse(text="<html>")))
    with pytest.raises(NetworkError):
        client.search("London")


def test_search_rejects_blank_query():
    session = FakeSession()
    with pytest.raises(ValueError):
        GeocodingClient(session=session).search("   ")
    assert session.calls == []


def test_fetch_sends_expected_params(london_forecast):
    session = FakeSession(FakeResponse(payload=london_forecast))
    client = ForecastClient(session=session)

    snapshot = client.fetch_by_coordinates(51.51, -0.13, "London, England")

    assert snapshot.place_name == "London, England"
    assert len(snapshot.daily) == 3
    call = session.calls[0]
    assert call["url"] == "https://api.open-meteo.com/v1/forecast"
    assert call["params"] == {
        "latitude": 51.51,
        "longitude": -0.13,
        "current_weather": "true",
        "daily": "temperature_2m_max,temperature_2m_min,weathercode",
        "timezone": "auto",
    }


def test_fetch_without_hint_uses_timezone(london_forecast):
    client = ForecastClient(session=FakeSession(FakeResponse(payload=london_forecast)))
    assert client.fetch_by_coordinates(51.5, -0.12).place_name == "Europe/London"


def test_fetch_http_status():
    client = ForecastClient(session=FakeSession(FakeResponse(status_code=500, text="oops")))
    with pytest.raises(NetworkError) as info:
        client.fetch_by_coordinates(51.5, -0.12)
    assert info.value.message == "Weather request failed with status 500"


def test_fetch_unparseable_body_logs_raw_text(caplog):
    client = ForecastClient(session=FakeSession(FakeResponse(text="<html>gateway</html>")))
    with caplog.at_level(logging.ERROR, logger="weathernow.client"):
        with pytest.raises(FormatError) as info:
            client.fetch_by_coordinates(51.5, -0.12)
    assert info.value.message == "Unexpected response format from API"
    assert "<html>gateway</html>" in caplog.text
    assert "<html>" not in info.value.message


def test_fetch_missing_current_weather():
    from conftest import load_fixture

    payload = load_fixture("forecast_no_current.json")
    client = ForecastClient(session=FakeSession(FakeResponse(payload=payload)))
    with pytest.raises(DataError) as info:
        client.fetch_by_coordinates(51.5, -0.12)
    assert info.value.message == "Weather data not found in API response"


def test_fetch_transport_error():
    session = FakeSession(requests.Timeout())
    with pytest.raises(NetworkError) as info:
        ForecastClient(session=session).fetch_by_coordinates(51.5, -0.12)
    assert info.value.message == "Failed to fetch weather."


def test_errors_share_a_base():
    for cls in (NetworkError, FormatError, DataError, NoResults):
        assert issubclass(cls, WeatherNowError)


def test_from_settings_uses_configured_urls():
    settings = Settings(geocoding_url="http://geo.local/search", forecast_url="http://wx.local/forecast", timeout=4.0)
    assert GeocodingClient.from_settings(settings).url == "http://geo.local/search"
    forecaster = ForecastClient.from_settings(settings)
    assert forecaster.url == "http://wx.local/forecast"
    assert forecaster.timeout == 4.0


def test_built_session_never_retries():
    client = ForecastClient()
    session = client._session()
    adapter = session.get_adapter("https://api.open-meteo.com")
    assert adapter.max_retries.total == 0
    assert session.headers["User-Agent"] == "weathernow/0.1"
    # same thread gets the same session back
    assert client._session() is session


def test_search_results_not_a_list_is_network_error():
    client = GeocodingClient(session=FakeSession(FakeResponse(payload={"results": 5})))
    with pytest.raises(NetworkError):
        client.search("London")


def test_fetch_tolerates_infinite_weathercode():
    body = '{"timezone": "UTC", "current_weather": {"temperature": 12.5, "weathercode": Infinity}}'
    client = ForecastClient(session=FakeSession(FakeResponse(text=body)))

    snapshot = client.fetch_by_coordinates(0.0, 0.0)

    assert snapshot.current.weathercode is None
    assert snapshot.current.temperature == 12.5
    assert snapshot.place_name == "UTC"
