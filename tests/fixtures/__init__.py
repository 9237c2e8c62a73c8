"""Test fixtures for character gateway tests."""

import pytest
import httpx
from fastapi.testclient import TestClient

from character_gateway.config import Settings
from character_gateway.main import create_app


UPSTREAM_BASE_URL = "https://upstream.test/api"
UPSTREAM_HOST = "upstream.test"
CHARACTER_PATH = "/api/characters/3000"
TEST_API_KEY = "s3cr3t-key-123"

JON_SNOW = b'{"name":"Jon Snow"}'

SETTINGS_ENV_VARS = [
    "HOST",
    "PORT",
    "API_KEY",
    "API_KEY_LOCATION",
    "API_KEY_NAME",
    "UPSTREAM_BASE_URL",
    "UPSTREAM_RESOURCE",
    "UPSTREAM_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "ACCESS_LOG",
    "CORS_ENABLED",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove gateway settings from the environment for the test."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings(clean_environment):
    """Factory for settings pointing at the fake upstream."""
    def _make(**overrides) -> Settings:
        values = {
            "_env_file": None,
            "upstream_base_url": UPSTREAM_BASE_URL,
            "api_key": TEST_API_KEY,
            "upstream_timeout": 1.0,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def test_settings(make_settings) -> Settings:
    """Default test settings with a credential configured."""
    return make_settings()


@pytest.fixture
def make_test_client(make_settings):
    """Factory for a started TestClient whose upstream is ``handler``.

    ``handler`` receives the outbound ``httpx.Request`` and returns an
    ``httpx.Response`` (or raises an httpx error); it may be async.
    """
    clients = []

    def _make(handler, **overrides) -> TestClient:
        app = create_app(
            make_settings(**overrides),
            transport=httpx.MockTransport(handler)
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def upstream_calls():
    """List that recording upstream handlers append requests to."""
    return []


@pytest.fixture
def jon_snow_upstream(upstream_calls):
    """Upstream handler returning Jon Snow."""
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_calls.append(request)
        return httpx.Response(
            200,
            content=JON_SNOW,
            headers={"content-type": "application/json; charset=utf-8"}
        )

    return handler
