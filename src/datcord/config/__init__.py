"""
Client configuration.

Usage:
    from datcord.config import load_client_config

    token, config = load_client_config("my_bot")
"""

from datcord.config.loader import get_config_path, load_client_config
from datcord.config.models import (
    DEFAULT_INTENTS,
    ApiConfig,
    ClientConfig,
    ClientProperties,
    Presence,
)

__all__ = [
    "load_client_config",
    "get_config_path",
    "ApiConfig",
    "ClientConfig",
    "ClientProperties",
    "Presence",
    "DEFAULT_INTENTS",
]
