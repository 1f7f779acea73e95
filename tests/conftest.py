import json

import pytest
import requests

from src.boatrace.api_client import ResultsApiClient
from src.boatrace.store import ResultStore


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Substitui requests.Session: registra chamadas e devolve respostas programadas."""

    def __init__(self, get_responses=None, post_error=None):
        self.get_responses = list(get_responses or [])
        self.post_error = post_error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append(("GET", url, params, None))
        if not self.get_responses:
            raise requests.ConnectionError("no response queued")
        resp = self.get_responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    def post(self, url, data=None, headers=None, timeout=None):
        self.calls.append(("POST", url, headers, json.loads(data.decode("utf-8"))))
        if self.post_error is not None:
            raise self.post_error
        return FakeResponse("")

    def close(self):
        self.closed = True


def payload_response(items, ok=True):
    return FakeResponse(json.dumps({"ok": ok, "items": items}))


@pytest.fixture
def sample_items():
    return [
        {"id": "1", "date": "2024-03-31", "invest": 1000, "returnVal": 1500, "type": "無料", "userCount": 3},
        {"id": "2", "date": "2024-04-01", "invest": 2000, "returnVal": 0, "type": "paid"},
        {"id": "3", "date": "2024/03/05", "invest": 500, "returnVal": 250, "type": "free", "userCount": 1},
    ]


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def client(fake_session):
    return ResultsApiClient("https://example.test/exec", session=fake_session)


@pytest.fixture
def store(client):
    return ResultStore(client)


@pytest.fixture
def make_payload():
    return payload_response


@pytest.fixture
def make_response():
    return FakeResponse
