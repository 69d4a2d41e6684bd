"""Tests for the slash command schema."""

import pytest
from pydantic import ValidationError

from blitz.plugins.schema import OptionType, SlashCommand


class TestSlashCommand:
    """Tests for SlashCommand."""

    def test_payload(self):
        command = SlashCommand(name="echo", description="Repeat").add_option(
            "text", "What to repeat", required=True
        )
        payload = command.to_payload()

        assert payload["name"] == "echo"
        assert payload["type"] == 1
        assert payload["options"] == [
            {"name": "text", "description": "What to repeat", "type": 3, "required": True}
        ]

    def test_add_option_returns_new_instance(self):
        base = SlashCommand(name="roll", description="Roll dice")
        extended = base.add_option("sides", "Number of sides", type=OptionType.INTEGER)

        assert base.options == ()
        assert len(extended.options) == 1

    def test_is_immutable(self):
        command = SlashCommand(name="ping", description="Ping")
        with pytest.raises(ValidationError):
            command.name = "pong"

    @pytest.mark.parametrize("name", ["", "Ping", "has space", "x" * 33])
    def test_rejects_invalid_names(self, name):
        with pytest.raises(ValidationError):
            SlashCommand(name=name, description="Test")

    def test_required_options_must_come_first(self):
        base = SlashCommand(name="greet", description="Greet").add_option("who", "Who")
        with pytest.raises(ValidationError):
            base.add_option("greeting", "Greeting", required=True)
