"""Testing utilities for code built on datcord."""

from .fake_socket import FakeGatewaySocket

__all__ = ["FakeGatewaySocket"]
