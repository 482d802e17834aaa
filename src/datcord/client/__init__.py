"""Client modules for REST and gateway communication."""

from datcord.client.rest import ApiClient
from datcord.client.streaming import GatewayMessage, Opcode

__all__ = ["ApiClient", "GatewayMessage", "Opcode"]
