"""Pytest configuration and shared fixtures.

Usage Guide:
- For schema validation tests: import dict factories from tests.factories
- For client tests: use the `api` fixture (fake Sweap API on an
  httpx.MockTransport) together with the `client` fixture
"""

from datetime import UTC, datetime

import pytest

from sweap.client import SweapClient
from sweap.config import Settings
from sweap.logging import reset_logging
from tests.fixtures import API_URL, TOKEN_URL, MockSweapAPI

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for Pydantic)
MAY_01 = datetime(2024, 5, 1, 9, 0, 0, tzinfo=UTC)    # Event created
MAY_02 = datetime(2024, 5, 2, 14, 30, 0, tzinfo=UTC)  # Guest created
MAY_03 = datetime(2024, 5, 3, 8, 15, 0, tzinfo=UTC)   # Guest updated
JUN_20 = datetime(2024, 6, 20, 18, 0, 0, tzinfo=UTC)  # Event starts

# ISO 8601 strings (for API mocks)
MAY_01_ISO = "2024-05-01T09:00:00Z"
MAY_02_ISO = "2024-05-02T14:30:00Z"
MAY_03_ISO = "2024-05-03T08:15:00Z"
JUN_20_ISO = "2024-06-20T18:00:00Z"
JUN_20_END_ISO = "2024-06-20T23:30:00Z"

EVENT_ID = "8baf13a5-0d6b-4fb2-9d39-4fa4e1b2c6a1"


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials from the environment out of the tests."""
    for name in ("CLIENT_ID", "CLIENTID", "CLIENT_SECRET", "ENVIRONMENT", "DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake API."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        client_id="test-client",
        client_secret="test-secret",
        api_url=API_URL,
        token_url=TOKEN_URL,
    )


# -----------------------------------------------------------------------------
# API Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def api() -> MockSweapAPI:
    """Fresh fake Sweap API without routes."""
    return MockSweapAPI()


@pytest.fixture
async def client(api: MockSweapAPI, settings: Settings):
    """SweapClient wired to the fake API."""
    client = SweapClient(settings=settings, transport=api.transport)
    yield client
    await client.close()


# -----------------------------------------------------------------------------
# Utility Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def reset_loguru():
    """Reset loguru state before and after a test."""
    reset_logging()
    yield
    reset_logging()
