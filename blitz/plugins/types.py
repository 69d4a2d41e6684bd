"""Plugin records - the typed shape of what discovery produces."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from blitz.plugins.schema import SlashCommand

# Marks a field that a loaded export does not define at all
MISSING: Any = object()


def export_field(value: Any, key: str) -> Any:
    """Read `key` from a loaded export, which may be a mapping or a plain object.

    Returns MISSING when the export does not define the field.
    """
    if isinstance(value, Mapping):
        return value.get(key, MISSING)
    try:
        return getattr(value, key, MISSING)
    except Exception:
        # Properties on arbitrary plugin objects may raise anything
        return MISSING


@dataclass
class PluginConfig:
    """Final metadata for one plugin, after defaults are applied."""

    name: str
    version: str
    description: str
    config: Dict[str, Any] = field(default_factory=dict)  # Shared by reference with every handler


@dataclass(frozen=True)
class Command:
    """A user-invokable slash command.

    `action` is called as action(client, interaction, config) and is usually a
    coroutine function.
    """

    data: SlashCommand
    action: Callable[..., Any]

    @property
    def name(self) -> str:
        return self.data.name

    @classmethod
    def from_export(cls, value: Any) -> Command:
        """Normalize a validated export into a Command."""
        if isinstance(value, cls):
            return value
        return cls(data=export_field(value, "data"), action=export_field(value, "action"))


@dataclass(frozen=True)
class Event:
    """A platform event subscription.

    `action` is called as action(client, config, *payload).
    """

    event: str
    action: Callable[..., Any]
    once: bool = False

    @classmethod
    def from_export(cls, value: Any) -> Event:
        """Normalize a validated export into an Event."""
        if isinstance(value, cls):
            return value
        once = export_field(value, "once")
        return cls(
            event=export_field(value, "event"),
            action=export_field(value, "action"),
            once=False if once is MISSING else once,
        )


@dataclass(frozen=True)
class Plugin:
    """One discovered plugin: config plus its commands and events."""

    config: PluginConfig
    commands: Tuple[Command, ...] = ()
    events: Tuple[Event, ...] = ()
    path: Optional[Path] = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def logger(self) -> logging.Logger:
        """Logger for this plugin's handlers (plugin.<name>)."""
        return logging.getLogger(f"plugin.{self.config.name}")

    def to_dict(self) -> dict:
        """Serialize plugin for CLI output."""
        return {
            "name": self.config.name,
            "version": self.config.version,
            "description": self.config.description,
            "commands": [command.name for command in self.commands],
            "events": [
                {"event": event.event, "once": event.once} for event in self.events
            ],
            "config": self.config.config,
            "path": str(self.path) if self.path else None,
        }
