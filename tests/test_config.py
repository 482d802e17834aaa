"""
Config loading tests - verify client configuration management.

Tests cover defaults, partial overrides, and all error paths for loading
bot credentials from YAML configuration files.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from datcord.config import (
    DEFAULT_INTENTS,
    ClientConfig,
    Presence,
    load_client_config,
)


def test_defaults_cover_every_field():
    """An empty config should resolve to documented defaults."""
    config = ClientConfig.from_dict(None)

    assert config.api.host == "discord.com"
    assert config.api.base_path == "/api/v9"
    assert config.api.port == 443
    assert config.gateway_query == "/gateway"
    assert config.default_presence == Presence(
        since=None, activities=[], status="online", afk=False
    )
    assert config.intents == 32641
    assert config.cache is True
    assert config.wait_for_ready is False


def test_partial_nested_sections_keep_defaults():
    """Supplying one nested field should not drop its siblings."""
    config = ClientConfig.from_dict(
        {"api": {"port": 8443}, "defaultPresence": {"status": "dnd"}}
    )

    assert config.api.host == "discord.com"
    assert config.api.port == 8443
    assert config.default_presence.status == "dnd"
    assert config.default_presence.activities == []
    assert config.default_presence.afk is False


def test_snake_case_and_camel_case_keys():
    camel = ClientConfig.from_dict({"gatewayQuery": "/gateway/bot"})
    snake = ClientConfig.from_dict({"gateway_query": "/gateway/bot"})

    assert camel == snake


def test_config_is_immutable():
    config = ClientConfig()

    with pytest.raises(ValidationError):
        config.intents = 1


def test_load_valid_config_success(tmp_path, monkeypatch):
    """Should successfully load token and settings from valid config."""
    config_content = """
console_bot:
  token: Bot test-token-abc
  config:
    intents: 513
    defaultPresence:
      status: idle
    """
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text(config_content)

    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    token, config = load_client_config("console_bot")

    assert token == "Bot test-token-abc"
    assert config.intents == 513
    assert config.default_presence.status == "idle"
    assert config.default_presence.afk is False


def test_load_without_config_section_uses_defaults(tmp_path, monkeypatch):
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text("console_bot:\n  token: Bot abc\n")
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    token, config = load_client_config("console_bot")

    assert token == "Bot abc"
    assert config == ClientConfig()


def test_missing_config_file(tmp_path, monkeypatch):
    """Should raise FileNotFoundError with helpful message when config missing."""
    non_existent = tmp_path / "does_not_exist.yaml"
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: non_existent)

    with pytest.raises(FileNotFoundError) as exc_info:
        load_client_config("any_bot")

    assert "datcord.yaml not found" in str(exc_info.value)
    assert "datcord.yaml.example" in str(exc_info.value)


def test_profile_not_in_config(tmp_path, monkeypatch):
    """Should raise ValueError when requested profile doesn't exist."""
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text("console_bot:\n  token: Bot abc\n")
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    with pytest.raises(ValueError) as exc_info:
        load_client_config("nonexistent_bot")

    assert "nonexistent_bot" in str(exc_info.value)
    assert "not found" in str(exc_info.value)


def test_missing_token_field(tmp_path, monkeypatch):
    """Should raise ValueError when token is missing or empty."""
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text('console_bot:\n  token: ""\n  config:\n    intents: 1\n')
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    with pytest.raises(ValueError) as exc_info:
        load_client_config("console_bot")

    assert "token" in str(exc_info.value)


def test_invalid_settings_raise_value_error(tmp_path, monkeypatch):
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text(
        "console_bot:\n  token: Bot abc\n  config:\n    intents: lots\n"
    )
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    with pytest.raises(ValueError) as exc_info:
        load_client_config("console_bot")

    assert "Invalid config" in str(exc_info.value)


def test_malformed_yaml_raises_runtime_error(tmp_path, monkeypatch):
    """Should wrap YAML parse errors in RuntimeError."""
    config_file = tmp_path / "datcord.yaml"
    config_file.write_text("console_bot: [unclosed\n")
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: config_file)

    with pytest.raises(RuntimeError) as exc_info:
        load_client_config("console_bot")

    assert "Error loading client config" in str(exc_info.value)


def test_example_profile_shows_defaults_except_intents(monkeypatch):
    """datcord.yaml.example documents the defaults; only intents differ."""
    example = Path(__file__).resolve().parents[1] / "datcord.yaml.example"
    monkeypatch.setattr("datcord.config.loader.get_config_path", lambda: example)

    token, config = load_client_config("console_bot")

    assert token == "Bot YOUR_TOKEN"
    assert config.intents == 33280
    assert config.model_copy(update={"intents": DEFAULT_INTENTS}) == ClientConfig()
