"""Shared fixtures: plugin trees written into tmp_path."""

import textwrap
from pathlib import Path
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

COMMAND_SOURCE = '''
from blitz.plugins import Command, SlashCommand


async def action(client, interaction, config):
    await interaction.response.send_message(config.get("reply", "{name}"))


command = Command(data=SlashCommand(name="{name}", description="Test command"), action=action)
'''

EVENT_SOURCE = '''
from blitz.plugins import Event


async def action(client, config, *args):
    config.setdefault("seen", []).append(args)


event = Event(event="{name}", once={once}, action=action)
'''


def command_source(name: str) -> str:
    return COMMAND_SOURCE.replace("{name}", name)


def event_source(name: str, once: bool = False) -> str:
    return EVENT_SOURCE.replace("{name}", name).replace("{once}", str(once))


def write_plugin(
    root: Path,
    dir_name: str,
    config: Optional[str] = None,
    commands: Optional[Dict[str, str]] = None,
    events: Optional[Dict[str, str]] = None,
) -> Path:
    """Create <root>/<dir_name> with an optional config and source files."""
    plugin_dir = root / dir_name
    plugin_dir.mkdir(parents=True)
    if config is not None:
        (plugin_dir / "blitz.config.yaml").write_text(textwrap.dedent(config), encoding="utf-8")
    for subdir, files in (("commands", commands), ("events", events)):
        if files is None:
            continue
        (plugin_dir / subdir).mkdir()
        for filename, source in files.items():
            (plugin_dir / subdir / filename).write_text(source, encoding="utf-8")
    return plugin_dir


@pytest.fixture
def plugins_root(tmp_path) -> Path:
    root = tmp_path / "plugins"
    root.mkdir()
    return root


@pytest.fixture
def interaction():
    """A chat-input interaction that has not been answered yet."""
    mock = MagicMock()
    mock.type = discord.InteractionType.application_command
    mock.data = {"name": "ping", "type": 1}
    mock.response.is_done = MagicMock(return_value=False)
    mock.response.send_message = AsyncMock()
    mock.followup.send = AsyncMock()
    return mock
