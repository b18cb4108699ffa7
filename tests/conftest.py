"""
pytest configuration and shared fixtures for the CovidStats tests.

Key concern: tests must not touch the network or the user's cache dir.
We achieve this by:
  1. Writing bundle files into tmp_path.
  2. Serving per-code payloads from an httpx.MockTransport (FakeEndpoint).
  3. Pointing the disk cache at tmp_path.
"""

import json

import httpx
import pytest

from cache import CacheManager, DiskCache
from registry import load_registry
from sources import RemoteSnapshotSource, SnapshotStore

BASE_URL = "https://data.example.test/covid-data"

GLOBALS = {
    "17031": {"title": "Cook, Illinois", "admin": "Cook", "proviceState": "Illinois",
              "countryRegion": "US", "lat": "41.84", "long": "-87.81"},
    "NY": {"title": "New York", "admin": None, "proviceState": "New York",
           "countryRegion": "US", "lat": "42.16", "long": "-74.94"},
    "France": {"title": "France", "admin": None, "proviceState": "",
               "countryRegion": "France", "lat": "46.22", "long": "2.21"},
    "Canada.Ontario": {"title": "Ontario, Canada", "admin": None, "proviceState": "Ontario",
                       "countryRegion": "Canada", "lat": "51.25", "long": "-85.32"},
}


def make_payload(deaths, confirmed, time="2020-10-07T12:00:00Z", version=1) -> dict:
    return {
        "time": time,
        "version": version,
        "snapshot": {"lastDeaths": list(deaths), "lastConfirmed": list(confirmed)},
    }


class FakeEndpoint:
    """Serves per-code payloads and counts requests."""

    def __init__(self):
        self.responses = {}
        self.requests = []

    def set(self, code, payload=None, status=200, body=None):
        if body is None:
            body = json.dumps(payload) if payload is not None else ""
        self.responses[code] = (status, body)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        code = request.url.path.rsplit("/", 1)[-1]
        if code not in self.responses:
            return httpx.Response(404, text="not found")
        status, body = self.responses[code]
        return httpx.Response(status, text=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def payload():
    """Factory for per-code payload dicts."""
    return make_payload


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON payload under tmp_path and return its path as a string."""
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write


@pytest.fixture
def global_bundle(write_json):
    return write_json("global.json", {"time": "2020-10-07T00:00:00Z", "version": 1, "globals": GLOBALS})


@pytest.fixture
def registry(global_bundle):
    return load_registry(global_bundle)


@pytest.fixture
def endpoint():
    return FakeEndpoint()


@pytest.fixture
def remote_source(endpoint):
    return RemoteSnapshotSource(
        BASE_URL,
        async_client=httpx.AsyncClient(transport=endpoint.transport),
        sync_client=httpx.Client(transport=endpoint.transport),
    )


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_dir):
    return CacheManager(ttl=600, max_size=100, disk=DiskCache(str(cache_dir)))


@pytest.fixture
def store(registry, remote_source, cache):
    return SnapshotStore(registry, [remote_source], cache)
