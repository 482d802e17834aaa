"""
datcord Platform Layer - Live connection to the gateway.

Components:
    Gateway: WebSocket connection, handshake, heartbeat and routing (REST via .rest)
    EventEmitter: Named-channel subscriptions
    event: Channel names and lifecycle event payloads
"""

from .emitter import EventEmitter
from .errors import GatewayError, GatewayProtocolError
from .event import (
    CloseEvent,
    ErrorEvent,
    OpenEvent,
    ProtocolErrorEvent,
    SendEvent,
    dispatch_channel,
)
from .gateway import DEFAULT_CLOSE_CODE, Gateway, HeartbeatState

__all__ = [
    "Gateway",
    "HeartbeatState",
    "DEFAULT_CLOSE_CODE",
    "EventEmitter",
    "GatewayError",
    "GatewayProtocolError",
    "OpenEvent",
    "CloseEvent",
    "ErrorEvent",
    "SendEvent",
    "ProtocolErrorEvent",
    "dispatch_channel",
]
