"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any application import so the global
settings object is built with test values.
"""

import os

os.environ["APP_ENV"] = "testing"
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("APP_VALIDATE_EXTERNAL_CONFIG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bind8.core.app_factory import create_app  # noqa: E402


class FakeClock:
    """Deterministic millisecond clock for the rate limit store."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client():
    """Test client over a fresh app, lifespan included."""
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def api_key_headers() -> dict[str, str]:
    return {"X-API-Key": "test-api-key-123"}
