"""Dispatch registry - the merged command table and event bindings of all plugins."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import discord
from discord.utils import maybe_coroutine

from blitz.constants import COMMAND_ERROR_REPLY
from blitz.plugins.types import Command, Event, Plugin

logger = logging.getLogger(__name__)

# subscribe(event_name, handler, once) as offered by the platform client
Subscriber = Callable[..., None]


@dataclass(frozen=True)
class CommandEntry:
    """A dispatch table entry: the command and the plugin that owns it."""

    command: Command
    plugin: Plugin


class DispatchRegistry:
    """Merged, read-only view of all loaded plugins.

    Commands are inserted in discovery order; a later plugin defining the same
    command name replaces the earlier entry (last write wins).
    """

    def __init__(self, plugins: Sequence[Plugin]):
        self._plugins: Tuple[Plugin, ...] = tuple(plugins)
        self._entries: Dict[str, CommandEntry] = {}

        for plugin in self._plugins:
            for command in plugin.commands:
                previous = self._entries.get(command.name)
                if previous is not None:
                    logger.warning(
                        f"Command '{command.name}' from plugin '{plugin.name}' overrides "
                        f"the one from plugin '{previous.plugin.name}'"
                    )
                self._entries[command.name] = CommandEntry(command=command, plugin=plugin)

    @property
    def plugins(self) -> Tuple[Plugin, ...]:
        return self._plugins

    def get(self, name: str) -> Optional[Command]:
        """Get the command dispatched for a name."""
        entry = self._entries.get(name)
        return entry.command if entry else None

    def owner(self, name: str) -> Optional[Plugin]:
        """Get the plugin whose command is dispatched for a name."""
        entry = self._entries.get(name)
        return entry.plugin if entry else None

    def names(self) -> List[str]:
        return list(self._entries)

    def count(self) -> int:
        return len(self._entries)

    def command_payloads(self) -> List[Dict[str, Any]]:
        """Serialized descriptors of every dispatched command, for remote registration."""
        return [entry.command.data.to_payload() for entry in self._entries.values()]

    async def route_command(self, client: Any, interaction: Any, name: str) -> bool:
        """Invoke the command registered under `name`.

        Handler failures are logged and acknowledged to the user with a generic
        ephemeral reply; they never propagate.

        Args:
            client: Platform client passed through to the handler
            interaction: The invocation context
            name: Command name from the interaction

        Returns:
            True if the handler completed
        """
        entry = self._entries.get(name)
        if entry is None:
            logger.warning(f"Command {name} not found.")
            return False

        plugin = entry.plugin
        try:
            await maybe_coroutine(entry.command.action, client, interaction, plugin.config.config)
            return True
        except Exception as e:
            plugin.logger.error(f"Error executing command {name}: {e}", exc_info=True)
            await self._acknowledge_failure(interaction, name)
            return False

    def bind_events(self, client: Any, subscribe: Subscriber) -> int:
        """Subscribe every plugin event through `subscribe`.

        Each handler closes over its plugin's config, so no lookup happens when
        the event fires.

        Returns:
            Number of subscriptions made
        """
        bound = 0
        for plugin in self._plugins:
            for event in plugin.events:
                subscribe(event.event, self._event_handler(client, plugin, event), once=event.once)
                bound += 1
        logger.debug(f"Bound {bound} event handler(s)")
        return bound

    @staticmethod
    def _event_handler(client: Any, plugin: Plugin, event: Event) -> Callable[..., Any]:
        async def handler(*args: Any) -> None:
            try:
                await maybe_coroutine(event.action, client, plugin.config.config, *args)
            except Exception as e:
                plugin.logger.error(f"Error handling event {event.event}: {e}", exc_info=True)

        return handler

    @staticmethod
    async def _acknowledge_failure(interaction: Any, name: str) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(COMMAND_ERROR_REPLY, ephemeral=True)
            else:
                await interaction.response.send_message(COMMAND_ERROR_REPLY, ephemeral=True)
        except discord.DiscordException as e:
            logger.error(f"Could not acknowledge failure of command {name}: {e}")
