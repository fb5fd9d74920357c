from __future__ import annotations

from urllib.parse import urlsplit

import pytest

from vedomost.client.api import VedomostApi
from vedomost.client.store import AttendanceStore
from vedomost.client.token_store import MemoryTokenStore

BASE_URL = "http://journal.test"


class FlaskResponseAdapter:
    """The slice of requests.Response that ApiClient reads."""

    def __init__(self, resp):
        self.status_code = resp.status_code
        self.headers = resp.headers
        self.content = resp.data
        self._resp = resp

    def json(self):
        data = self._resp.get_json(silent=True)
        if data is None:
            raise ValueError("response body is not JSON")
        return data


class FlaskTransport:
    """Routes ApiClient calls into the Flask test client instead of the network."""

    def __init__(self, test_client):
        self._client = test_client
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, url, json=None, params=None, headers=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append((method, path, dict(headers or {})))
        resp = self._client.open(path, method=method, json=json, query_string=params, headers=headers)
        return FlaskResponseAdapter(resp)


@pytest.fixture
def transport(client):
    return FlaskTransport(client)


@pytest.fixture
def api(transport):
    return VedomostApi(BASE_URL, token_store=MemoryTokenStore(), session=transport)


@pytest.fixture
def notes():
    return []


@pytest.fixture
def store(api, notes):
    return AttendanceStore(api, notifier=lambda level, message: notes.append((level, message)))


@pytest.fixture
def views(store):
    rendered = []
    store.subscribe(rendered.append)
    return rendered
