#!/usr/bin/env python3
"""
Chat in a channel from the terminal.

Lines typed on stdin are posted to the channel; messages other users post
there are printed as they arrive.

Usage:
    uv run python examples/console_client.py --channel 123456789012345678
    uv run python examples/console_client.py --profile my_bot --channel 1234...

Setup:
1. Copy datcord.yaml.example to datcord.yaml and add your bot token
2. Optionally set DATCORD_PROFILE / DATCORD_CHANNEL_ID in .env
"""

import argparse
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from datcord import Gateway
from datcord.config import DEFAULT_INTENTS, load_client_config

# Load environment from .env
load_dotenv()

# GUILD_MESSAGES | MESSAGE_CONTENT
CONSOLE_INTENTS = (1 << 9) | (1 << 15)


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure logging."""
    log_level = level.upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return logging.getLogger(__name__)


def prompt() -> None:
    sys.stdout.write("You : ")
    sys.stdout.flush()


async def read_lines(gateway: Gateway, channel_id: str) -> None:
    """Forward stdin lines to the channel until EOF."""
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        await gateway.rest.post(
            f"/channels/{channel_id}/messages", {"content": line.rstrip("\n")}
        )
        prompt()
    await gateway.close(1000, "bye")


async def run(profile: str, channel_id: str, logger: logging.Logger) -> None:
    token, config = load_client_config(profile)
    if config.intents == DEFAULT_INTENTS:
        config = config.model_copy(update={"intents": CONSOLE_INTENTS})
    gateway = Gateway(token, config)

    @gateway.on("gateway.open")
    def on_open(event):
        print("Connected to the gateway.")
        prompt()

    @gateway.on("gateway.close")
    def on_close(event):
        print(f"\nGateway closed: {event.code} - {event.reason}")

    @gateway.on("gateway.error")
    def on_error(event):
        logger.error(f"Gateway error: {event.error}")

    @gateway.on("gateway.event.MESSAGE_CREATE")
    def on_message(message):
        author = message.get("author", {})
        if (
            message.get("channel_id") != channel_id
            or message.get("webhook_id")
            or author.get("bot")
        ):
            return
        sys.stdout.write(f"\r{author.get('username')} : {message.get('content')}\n")
        prompt()

    async with gateway:
        reader = asyncio.create_task(read_lines(gateway, channel_id))
        await gateway.run_forever()
        reader.cancel()


def main() -> None:
    parser = argparse.ArgumentParser(description="datcord console client")
    parser.add_argument(
        "--profile", default=os.getenv("DATCORD_PROFILE", "console_bot")
    )
    parser.add_argument("--channel", default=os.getenv("DATCORD_CHANNEL_ID"))
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logger = setup_logging(args.log_level)
    if not args.channel:
        parser.error("--channel (or DATCORD_CHANNEL_ID) is required")

    try:
        asyncio.run(run(args.profile, args.channel, logger))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
