"""Bot orchestrator - loads plugins, registers commands and routes platform events."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import discord

from blitz.plugins.loader import PluginLoader
from blitz.plugins.registry import DispatchRegistry
from blitz.plugins.schema import CHAT_INPUT
from blitz.plugins.types import Plugin

logger = logging.getLogger(__name__)


class BotState(str, Enum):
    """Bot lifecycle states."""

    UNINITIALIZED = "uninitialized"
    LOADED = "loaded"
    COMMANDS_REGISTERED = "commands_registered"
    RUNNING = "running"


@dataclass
class Subscription:
    """A plugin handler subscribed to a platform event."""

    handler: Callable[..., Any]
    once: bool = False


def default_intents() -> discord.Intents:
    """Guilds, guild messages, message content and members."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.members = True
    return intents


class BlitzBot(discord.Client):
    """Discord client driven entirely by plugins.

    Startup: load_plugins() -> connect -> register_commands() on first ready.
    Plugins are loaded once; replacing one requires a restart.
    """

    def __init__(
        self,
        token: str,
        intents: Optional[discord.Intents] = None,
        plugins_dir: Optional[Union[str, Path]] = None,
        guild_id: Optional[Union[str, int]] = None,
        **options: Any,
    ):
        super().__init__(intents=intents or default_intents(), **options)
        self._token = token
        self.plugin_loader = PluginLoader(plugins_dir)
        self.guild_id = str(guild_id) if guild_id else None
        self.plugins: List[Plugin] = []
        self.registry: Optional[DispatchRegistry] = None
        self.state = BotState.UNINITIALIZED
        self._subscriptions: Dict[str, List[Subscription]] = {}

    async def launch(self) -> None:
        """Load plugins, then connect and run until the connection closes."""
        self.load_plugins()
        await self.start(self._token)

    def load_plugins(self) -> DispatchRegistry:
        """Discover plugins, build the dispatch table and bind plugin events.

        Runs once; later calls return the existing registry.
        """
        if self.registry is not None:
            return self.registry

        self.plugins = self.plugin_loader.load_plugins()
        self.registry = DispatchRegistry(self.plugins)
        self.registry.bind_events(self, self.subscribe)
        self.state = BotState.LOADED

        logger.info(
            f"Loaded {len(self.plugins)} plugins with {self.registry.count()} commands"
        )
        return self.registry

    def subscribe(self, event: str, handler: Callable[..., Any], once: bool = False) -> None:
        """Subscribe a handler to a platform event ("on_ready" and "ready" are the same)."""
        name = event[3:] if event.startswith("on_") else event
        self._subscriptions.setdefault(name, []).append(Subscription(handler=handler, once=once))

    def dispatch(self, event: str, /, *args: Any, **kwargs: Any) -> None:
        super().dispatch(event, *args, **kwargs)

        subscriptions = self._subscriptions.get(event)
        if not subscriptions:
            return

        for subscription in list(subscriptions):
            if subscription.once:
                subscriptions.remove(subscription)
            self._schedule_event(subscription.handler, event, *args, **kwargs)

    async def on_ready(self) -> None:
        if self.user:
            logger.info(f"{self.user.name} is online!")

        # on_ready repeats after reconnects; commands are pushed only once
        if self.state is BotState.LOADED:
            await self.register_commands()
            self.state = BotState.RUNNING

    async def register_commands(self) -> bool:
        """Push every dispatched command descriptor to Discord in one replace-all call.

        Targets the configured guild, or the global scope when none is set.

        Returns:
            True if the push succeeded
        """
        if self.user is None or self.application_id is None:
            logger.error("Client user is not available. Commands registration aborted.")
            return False

        payload = self.registry.command_payloads() if self.registry else []

        try:
            if self.guild_id:
                await self.http.bulk_upsert_guild_commands(
                    self.application_id, self.guild_id, payload
                )
            else:
                await self.http.bulk_upsert_global_commands(self.application_id, payload)
        except Exception as e:
            logger.error(f"Failed to register application commands: {e}", exc_info=True)
            return False

        self.state = BotState.COMMANDS_REGISTERED
        logger.info(
            f"Successfully registered {len(payload)} application commands "
            f"({'guild ' + self.guild_id if self.guild_id else 'global'})"
        )
        return True

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.type is not discord.InteractionType.application_command:
            return

        data = interaction.data or {}
        if data.get("type", CHAT_INPUT) != CHAT_INPUT:
            return

        if self.registry is None:
            logger.warning(f"Received command {data.get('name')} before plugins were loaded")
            return

        await self.registry.route_command(self, interaction, data.get("name", ""))
