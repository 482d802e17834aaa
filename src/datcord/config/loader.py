"""
Client configuration loading utilities.

Bot credentials and connection settings live in a YAML file at the project
root, one section per bot profile:

    my_bot:
      token: "Bot abc..."
      config:
        intents: 513
        defaultPresence:
          status: idle
"""

import logging
import os
import yaml
from pathlib import Path
from typing import Tuple

from pydantic import ValidationError

from .models import ClientConfig

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """
    Get the path to the client configuration file.

    Looks for datcord.yaml in the current working directory (project root).
    """
    return Path(os.getcwd()) / "datcord.yaml"


def load_client_config(profile: str) -> Tuple[str, ClientConfig]:
    """
    Load a bot token and its connection settings from YAML at project root.

    Args:
        profile: The key identifying the bot in the config file

    Returns:
        Tuple of (token, ClientConfig)

    Raises:
        FileNotFoundError: If datcord.yaml doesn't exist
        ValueError: If the profile or its token is missing, or the settings are invalid
    """
    config_path = get_config_path()
    logger.debug(f"Loading config from: {config_path}")

    if not config_path.exists():
        raise FileNotFoundError(
            f"datcord.yaml not found at {config_path}. "
            "Copy datcord.yaml.example to datcord.yaml and add your bot token."
        )

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        section = config.get(profile, {})

        if not section:
            raise ValueError(
                f"Profile '{profile}' not found in {config_path}. "
                f"Please add the bot configuration."
            )

        token = section.get("token")
        if not token:
            raise ValueError(
                f"Missing required field for profile '{profile}': token. "
                f"Please add the bot token to {config_path}"
            )

        try:
            client_config = ClientConfig.from_dict(section.get("config"))
        except ValidationError as e:
            raise ValueError(f"Invalid config for profile '{profile}': {e}") from e

        return token, client_config
    except ValueError:
        raise
    except Exception as e:
        raise RuntimeError(f"Error loading client config: {e}") from e
