"""Tests for DispatchRegistry."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from blitz.constants import COMMAND_ERROR_REPLY
from blitz.plugins.registry import DispatchRegistry
from blitz.plugins.schema import SlashCommand
from blitz.plugins.types import Command, Event, Plugin, PluginConfig


def make_plugin(name, commands=(), events=(), config=None):
    return Plugin(
        config=PluginConfig(name=name, version="1.0", description="", config=config or {}),
        commands=tuple(commands),
        events=tuple(events),
    )


def make_command(name, action=None):
    return Command(
        data=SlashCommand(name=name, description=f"{name} command"),
        action=action or AsyncMock(),
    )


class TestDispatchTable:
    """Tests for the merged command table."""

    def test_merges_all_plugins(self):
        registry = DispatchRegistry([
            make_plugin("a", [make_command("one"), make_command("two")]),
            make_plugin("b", [make_command("three")]),
        ])

        assert registry.names() == ["one", "two", "three"]
        assert registry.count() == 3
        assert registry.owner("three").name == "b"

    def test_last_plugin_wins_name_collision(self, caplog):
        first = make_command("ping")
        second = make_command("ping")
        registry = DispatchRegistry([make_plugin("early", [first]), make_plugin("late", [second])])

        assert registry.count() == 1
        assert registry.get("ping") is second
        assert registry.owner("ping").name == "late"
        assert "overrides" in caplog.text

    def test_payloads_one_per_dispatched_name(self):
        registry = DispatchRegistry([
            make_plugin("early", [make_command("ping")]),
            make_plugin("late", [make_command("ping"), make_command("echo")]),
        ])

        payloads = registry.command_payloads()

        assert [p["name"] for p in payloads] == ["ping", "echo"]
        assert payloads[0]["description"] == "ping command"

    def test_unknown_name(self):
        registry = DispatchRegistry([])
        assert registry.get("nope") is None
        assert registry.owner("nope") is None


class TestRouteCommand:
    """Tests for command routing."""

    @pytest.mark.asyncio
    async def test_invokes_action_with_owner_config(self, interaction):
        action = AsyncMock()
        config = {"reply": "pong"}
        registry = DispatchRegistry([make_plugin("p", [make_command("ping", action)], config=config)])
        client = MagicMock()

        assert await registry.route_command(client, interaction, "ping") is True

        action.assert_awaited_once_with(client, interaction, config)
        # Same object, not a copy
        assert action.await_args.args[2] is config

    @pytest.mark.asyncio
    async def test_collision_uses_winning_plugin_config(self, interaction):
        action = AsyncMock()
        registry = DispatchRegistry([
            make_plugin("early", [make_command("ping")], config={"who": "early"}),
            make_plugin("late", [make_command("ping", action)], config={"who": "late"}),
        ])

        await registry.route_command(MagicMock(), interaction, "ping")

        assert action.await_args.args[2] == {"who": "late"}

    @pytest.mark.asyncio
    async def test_sync_action_is_supported(self, interaction):
        calls = []
        registry = DispatchRegistry([
            make_plugin("p", [make_command("ping", lambda *args: calls.append(args))])
        ])

        assert await registry.route_command(MagicMock(), interaction, "ping") is True
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_command_is_dropped(self, interaction, caplog):
        registry = DispatchRegistry([])

        assert await registry.route_command(MagicMock(), interaction, "ghost") is False

        assert "Command ghost not found." in caplog.text
        interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_sends_one_reply(self, interaction):
        failing = AsyncMock(side_effect=RuntimeError("handler bug"))
        healthy = AsyncMock()
        registry = DispatchRegistry([
            make_plugin("p", [make_command("broken", failing), make_command("fine", healthy)])
        ])

        assert await registry.route_command(MagicMock(), interaction, "broken") is False

        interaction.response.send_message.assert_awaited_once_with(COMMAND_ERROR_REPLY, ephemeral=True)
        interaction.followup.send.assert_not_awaited()

        # Later invocations are unaffected
        assert await registry.route_command(MagicMock(), interaction, "fine") is True
        healthy.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_after_reply_uses_followup(self, interaction):
        interaction.response.is_done.return_value = True
        registry = DispatchRegistry([
            make_plugin("p", [make_command("ping", AsyncMock(side_effect=ValueError("late")))])
        ])

        await registry.route_command(MagicMock(), interaction, "ping")

        interaction.followup.send.assert_awaited_once_with(COMMAND_ERROR_REPLY, ephemeral=True)
        interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_acknowledgment_is_not_raised(self, interaction, caplog):
        response = MagicMock(status=404, reason="Not Found")
        interaction.response.send_message.side_effect = discord.NotFound(response, "Unknown interaction")
        registry = DispatchRegistry([
            make_plugin("p", [make_command("ping", AsyncMock(side_effect=RuntimeError("x")))])
        ])

        assert await registry.route_command(MagicMock(), interaction, "ping") is False
        assert "Could not acknowledge failure" in caplog.text

    @pytest.mark.asyncio
    async def test_already_responded_is_not_raised(self, interaction, caplog):
        interaction.response.send_message.side_effect = discord.InteractionResponded(MagicMock())
        registry = DispatchRegistry([
            make_plugin("p", [make_command("ping", AsyncMock(side_effect=RuntimeError("x")))])
        ])

        assert await registry.route_command(MagicMock(), interaction, "ping") is False
        assert "Could not acknowledge failure" in caplog.text


class TestBindEvents:
    """Tests for event subscription."""

    @pytest.mark.asyncio
    async def test_subscribes_every_event_with_plugin_config(self):
        action = AsyncMock()
        config = {"channel": 1}
        plugin = make_plugin(
            "p",
            events=[Event(event="ready", action=action, once=True), Event(event="message", action=AsyncMock())],
            config=config,
        )
        subscribe = MagicMock()
        client = MagicMock()

        bound = DispatchRegistry([plugin]).bind_events(client, subscribe)

        assert bound == 2
        names = [(c.args[0], c.kwargs["once"]) for c in subscribe.call_args_list]
        assert names == [("ready", True), ("message", False)]

        handler = subscribe.call_args_list[0].args[1]
        await handler("payload", 2)
        action.assert_awaited_once_with(client, config, "payload", 2)

    @pytest.mark.asyncio
    async def test_event_failure_is_logged_only(self, caplog):
        plugin = make_plugin(
            "noisy", events=[Event(event="message", action=AsyncMock(side_effect=KeyError("k")))]
        )
        subscribe = MagicMock()
        DispatchRegistry([plugin]).bind_events(MagicMock(), subscribe)

        await subscribe.call_args.args[1]("msg")

        assert "Error handling event message" in caplog.text
