"""Logs the connected guilds once the bot is ready."""

import logging

from blitz.plugins import Event

logger = logging.getLogger("plugin.ping")


async def announce(client, config):
    guilds = ", ".join(guild.name for guild in client.guilds) or "no guilds"
    logger.info(f"Ready as {client.user} in {guilds}")


event = Event(event="ready", once=True, action=announce)
