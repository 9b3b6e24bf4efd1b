"""
Shared fixtures: a call-counting stand-in for the NASA client, a controllable
clock for the cache, and a TestClient bound to a freshly built app.
"""
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from config.settings import Settings
from nasa.adapters import NasaAdapters
from webapp.backend.cache import ResponseCache
from webapp.backend.main import create_app


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubNasaClient:
    """Records every upstream call and answers from canned payloads."""

    def __init__(self):
        self.api_key = "TEST_KEY"
        self.base_url = "https://api.nasa.gov"
        self.calls: List[Tuple[str, Dict[str, Any], Dict[str, Any]]] = []
        self.responses: Dict[str, Any] = {}
        self.failures: Dict[str, Exception] = {}

    async def fetch(self, resource, path_params: Optional[Dict[str, Any]] = None,
                    params: Optional[Dict[str, Any]] = None) -> Any:
        self.calls.append((resource.name, dict(path_params or {}), dict(params or {})))
        if resource.name in self.failures:
            raise self.failures[resource.name]
        return self.responses.get(resource.name, {"resource": resource.name})

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


def make_settings(**overrides) -> Settings:
    values = {
        "nasa_api_key": "TEST_KEY",
        "environment": "test",
        "rate_limit_max_requests": 1000,
        "cache_sweep_interval": 3600,
        "log_requests": False,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stub_client():
    return StubNasaClient()


@pytest.fixture
def cache(clock):
    return ResponseCache(default_ttl=300, clock=clock)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def app_settings():
    return make_settings()


@pytest.fixture
def app(app_settings, stub_client, cache):
    return create_app(app_settings, adapters=NasaAdapters(stub_client), cache=cache)


@pytest.fixture
def client(app):
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def neo_feed():
    """Five objects across two dates, two of them potentially hazardous."""

    def neo(neo_id, hazardous, dmin, dmax):
        return {
            "id": neo_id,
            "name": f"({neo_id})",
            "is_potentially_hazardous_asteroid": hazardous,
            "estimated_diameter": {
                "kilometers": {"estimated_diameter_min": dmin, "estimated_diameter_max": dmax}
            },
            "close_approach_data": [{"orbiting_body": "Earth"}],
        }

    return {
        "links": {"self": "http://api.nasa.gov/neo/rest/v1/feed"},
        "element_count": 5,
        "near_earth_objects": {
            "2021-03-05": [
                neo("1001", False, 0.1, 0.3),
                neo("1002", True, 0.5, 1.5),
                neo("1003", False, 0.2, 0.4),
            ],
            "2021-03-06": [
                neo("1004", True, 1.0, 2.0),
                neo("1005", False, 0.2, 0.2),
            ],
        },
    }
