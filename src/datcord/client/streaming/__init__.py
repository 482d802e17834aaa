"""Gateway wire models.

Usage:
    from datcord.client.streaming import GatewayMessage, Opcode
"""

from datcord.client.streaming.models import (
    GATEWAY_ENCODING,
    GATEWAY_VERSION,
    GatewayMessage,
    HelloPayload,
    IdentifyPayload,
    Opcode,
    gateway_socket_url,
)

__all__ = [
    "GatewayMessage",
    "HelloPayload",
    "IdentifyPayload",
    "Opcode",
    "gateway_socket_url",
    "GATEWAY_VERSION",
    "GATEWAY_ENCODING",
]
