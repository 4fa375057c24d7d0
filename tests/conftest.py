# shared fakes so no test ever touches the network

import json
from pathlib import Path
import pytest

DATA_DIR = Path(__file__).parent / "data"


def load_fixture(name):
    return json.loads((DATA_DIR / name).read_text(encoding="utf-8"))


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


class FakeSession:
    # replays queued responses (or raises queued exceptions) and records every call
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.headers = {}

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def london_results():
    return load_fixture("geocoding_london.json")


@pytest.fixture
def london_forecast():
    return load_fixture("forecast_london.json")
