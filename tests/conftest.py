"""
Pytest fixtures for datcord tests.

Provides fakes for fast testing without a real gateway or API server.

Key fixture pattern:
- fake_socket: FakeGatewaySocket standing in for the WebSocket connection
- mock_rest: AsyncMock ApiClient whose get() answers gateway discovery
- connect_gateway: factory that patches the socket factory and connects
"""

import asyncio
import contextlib
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from datcord.platform.gateway import Gateway
from datcord.testing import FakeGatewaySocket

GATEWAY_URL = "wss://gateway.test"
HELLO = {"op": 10, "d": {"heartbeat_interval": 41250}, "s": None, "t": None}


def pytest_ignore_collect(collection_path):
    """Skip integration tests in CI environment.

    GitHub Actions sets CI=true automatically.
    """
    if os.environ.get("CI") == "true":
        if "integration" in str(collection_path):
            return True
    return None


@pytest.fixture
def fake_socket() -> FakeGatewaySocket:
    return FakeGatewaySocket()


@pytest.fixture
def mock_rest() -> AsyncMock:
    """ApiClient mock: discovery returns GATEWAY_URL."""
    rest = AsyncMock()
    rest.get.return_value = {"url": GATEWAY_URL}
    return rest


@pytest.fixture
async def connect_gateway(fake_socket, mock_rest):
    """
    Build and connect a Gateway against fake_socket.

    Hello is queued automatically unless hello=False:

        async def test_something(connect_gateway, fake_socket):
            gateway = await connect_gateway()
            assert fake_socket.sent_opcodes == [1, 2]
    """
    gateways: list[Gateway] = []

    async def factory(config=None, hello=True, listeners=None) -> Gateway:
        gateway = Gateway("Bot test-token", config, rest=mock_rest)
        for event, listener in (listeners or {}).items():
            gateway.on(event, listener)
        if hello:
            fake_socket.push(HELLO)
        with patch(
            "datcord.platform.gateway.ws_connect",
            AsyncMock(return_value=fake_socket),
        ):
            await gateway.connect()
        gateways.append(gateway)
        return gateway

    yield factory

    for gateway in gateways:
        gateway._stop_heartbeat()
        task = gateway._reader_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        await gateway.events.drain()


@pytest.fixture
def recorder() -> MagicMock:
    """Plain listener that records every call."""
    return MagicMock()
