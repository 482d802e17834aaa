"""
datcord - Minimal async client for the Discord gateway and REST API.

Platform Layer:
    Gateway: WebSocket connection, heartbeat and event routing
    EventEmitter: Named-channel event subscriptions

Client Layer:
    ApiClient: Authenticated REST GET/POST
    GatewayMessage: Normalized gateway frame
    Opcode: Gateway operation codes

Configuration:
    ClientConfig: Connection settings with defaults
    load_client_config: Load token + settings from datcord.yaml

Example:
    from datcord import Gateway

    gateway = Gateway("Bot your-token", {"intents": 513})

    @gateway.on("gateway.event.MESSAGE_CREATE")
    async def on_message(message):
        if message["content"] == "!ping":
            await gateway.rest.post(
                f"/channels/{message['channel_id']}/messages", {"content": "pong"}
            )

    async with gateway:
        await gateway.run_forever()
"""

# Client layer
from .client import ApiClient, GatewayMessage, Opcode

# Configuration
from .config import ClientConfig, Presence, load_client_config

# Platform layer
from .platform import EventEmitter, Gateway, GatewayError, GatewayProtocolError

__all__ = [
    # Platform
    "Gateway",
    "EventEmitter",
    "GatewayError",
    "GatewayProtocolError",
    # Client
    "ApiClient",
    "GatewayMessage",
    "Opcode",
    # Configuration
    "ClientConfig",
    "Presence",
    "load_client_config",
]

__version__ = "0.1.0"
