"""
Client configuration models.

Every field has a default, so a partially filled configuration never leaves
an undefined value for the REST client or the gateway to trip over.
"""

from __future__ import annotations

import platform
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_INTENTS = 32641


class ApiConfig(BaseModel):
    """REST endpoint the client talks to."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = "discord.com"
    base_path: str = Field(default="/api/v9", alias="basePath")
    port: int = 443


class Presence(BaseModel):
    """Presence sent with Identify."""

    model_config = ConfigDict(frozen=True, extra="allow")

    since: int | None = None
    activities: list[dict[str, Any]] = Field(default_factory=list)
    status: str = "online"
    afk: bool = False


class ClientProperties(BaseModel):
    """Connection properties reported to the gateway on Identify."""

    model_config = ConfigDict(frozen=True)

    os: str = Field(default_factory=lambda: platform.system().lower() or "unknown")
    browser: str = "datcord"
    device: str = "datcord"


class ClientConfig(BaseModel):
    """
    Configuration shared by ApiClient and Gateway.

    Accepts both snake_case and the camelCase keys used by older config
    files (basePath, gatewayQuery, defaultPresence).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api: ApiConfig = Field(default_factory=ApiConfig)
    gateway_query: str = Field(default="/gateway", alias="gatewayQuery")
    default_presence: Presence = Field(
        default_factory=Presence, alias="defaultPresence"
    )
    intents: int = DEFAULT_INTENTS
    cache: bool = True
    properties: ClientProperties = Field(default_factory=ClientProperties)
    wait_for_ready: bool = Field(default=False, alias="waitForReady")

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ClientConfig":
        """Build a config from a plain mapping, filling defaults for missing keys."""
        return cls.model_validate(data or {})
