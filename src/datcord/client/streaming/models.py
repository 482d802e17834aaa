from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from datcord.config import ClientProperties, Presence

GATEWAY_VERSION = 9
GATEWAY_ENCODING = "json"


class Opcode(IntEnum):
    """Gateway operation codes."""

    DISPATCH = 0
    HEARTBEAT = 1
    IDENTIFY = 2
    PRESENCE_UPDATE = 3
    VOICE_STATE_UPDATE = 4
    RESUME = 6
    RECONNECT = 7
    REQUEST_GUILD_MEMBERS = 8
    INVALID_SESSION = 9
    HELLO = 10
    HEARTBEAT_ACK = 11


# Gateway frames
# Using Pydantic for runtime validation of the envelope only; `d` stays raw


class GatewayMessage(BaseModel):
    """
    Normalized gateway frame.

    Wire keys are op/d/s/t; attribute names are opcode/data/sequence/event.
    Frames sent by the client always carry s=null and t=null.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    opcode: int = Field(alias="op")
    data: Any = Field(default=None, alias="d")
    sequence: Optional[int] = Field(default=None, alias="s")
    event: Optional[str] = Field(default=None, alias="t")

    @classmethod
    def outbound(cls, opcode: int, data: Any) -> "GatewayMessage":
        return cls(opcode=int(opcode), data=data)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, include={"opcode", "data", "sequence", "event"})


class HelloPayload(BaseModel):
    """Payload of a Hello (opcode 10) frame."""

    model_config = ConfigDict(extra="allow")

    heartbeat_interval: int


class IdentifyPayload(BaseModel):
    """Payload of an Identify (opcode 2) frame."""

    token: str
    properties: ClientProperties
    presence: Presence
    intents: int


def gateway_socket_url(url: str) -> str:
    """Append the protocol version and encoding query to a discovered gateway URL."""
    return f"{url}?v={GATEWAY_VERSION}&encoding={GATEWAY_ENCODING}"
