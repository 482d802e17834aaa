"""Fixtures for integration tests against the real gateway.

These tests require a bot token. Credentials are loaded from .env.test
automatically.

Run integration tests:
    uv run pytest tests/integration/ -v

Skip integration tests (run only unit tests):
    uv run pytest tests/ --ignore=tests/integration/

To override .env.test values, set environment variables:
    DATCORD_TOKEN="Bot your-token" uv run pytest tests/integration/ -v
"""

import pytest

from datcord.client.rest import ApiClient
from datcord.config import ClientConfig

from live_settings import integration_settings


@pytest.fixture
def client_config() -> dict:
    return {"api": {"host": integration_settings.datcord_api_host}, "intents": 0}


@pytest.fixture
async def api_client(client_config):
    """Real REST client; function scope avoids event loop issues with async tests."""
    client = ApiClient(
        integration_settings.datcord_token, ClientConfig.from_dict(client_config)
    )
    yield client
    await client.aclose()
