"""
Lifecycle events emitted by the gateway.

Channel names are module constants; payloads are plain dataclasses.
Dispatch channels (gateway.event.<NAME>) carry the frame's raw `d` payload
and gateway.message carries the GatewayMessage itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SOCKET_OPEN = "socket.open"
SOCKET_CLOSE = "socket.close"
SOCKET_ERROR = "socket.error"
GATEWAY_OPEN = "gateway.open"
GATEWAY_CLOSE = "gateway.close"
GATEWAY_ERROR = "gateway.error"
GATEWAY_MESSAGE = "gateway.message"
GATEWAY_SEND = "gateway.send"
GATEWAY_PROTOCOL_ERROR = "gateway.protocol_error"
DISPATCH_PREFIX = "gateway.event."


def dispatch_channel(event_name: str) -> str:
    """Channel name for a dispatch event, e.g. gateway.event.MESSAGE_CREATE."""
    return f"{DISPATCH_PREFIX}{event_name}"


@dataclass
class OpenEvent:
    """socket.open / gateway.open."""


@dataclass
class CloseEvent:
    """socket.close / gateway.close."""

    code: int | None = None
    reason: str | None = None


@dataclass
class ErrorEvent:
    """socket.error / gateway.error."""

    error: BaseException | None = None


@dataclass
class SendEvent:
    """gateway.send - emitted after a frame is written."""

    opcode: int
    data: Any = None


@dataclass
class ProtocolErrorEvent:
    """gateway.protocol_error - an inbound frame could not be decoded."""

    error: BaseException
    raw: str | bytes | None = None
