"""Slash command schema - the descriptor every Command's `data` must be."""

from enum import IntEnum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

NAME_PATTERN = r"^[-_a-z0-9]{1,32}$"

# Discord application command type for slash (chat input) commands
CHAT_INPUT = 1


class OptionType(IntEnum):
    """Application command option types."""

    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


class CommandOption(BaseModel):
    """One parameter of a slash command."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=NAME_PATTERN, description="Option name (lowercase)")
    description: str = Field(..., min_length=1, max_length=100)
    type: OptionType = Field(default=OptionType.STRING, description="Option value type")
    required: bool = Field(default=False)


class SlashCommand(BaseModel):
    """Immutable slash command descriptor.

    The `name` is the dispatch key. Use add_option() to derive a command with
    an extra parameter; the original instance is left untouched.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=NAME_PATTERN, description="Command name (lowercase)")
    description: str = Field(..., min_length=1, max_length=100)
    options: Tuple[CommandOption, ...] = Field(default=())
    nsfw: bool = Field(default=False)
    dm_permission: bool = Field(default=True)

    @model_validator(mode="after")
    def _required_options_first(self) -> "SlashCommand":
        seen_optional = False
        for option in self.options:
            if not option.required:
                seen_optional = True
            elif seen_optional:
                raise ValueError(
                    f"Required option '{option.name}' must come before optional options"
                )
        return self

    def add_option(
        self,
        name: str,
        description: str,
        type: OptionType = OptionType.STRING,
        required: bool = False,
    ) -> "SlashCommand":
        """Return a copy of this command with one more option appended."""
        option = CommandOption(name=name, description=description, type=type, required=required)
        return SlashCommand(
            name=self.name,
            description=self.description,
            options=self.options + (option,),
            nsfw=self.nsfw,
            dm_permission=self.dm_permission,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body used for remote command registration."""
        payload = self.model_dump(mode="json")
        payload["type"] = CHAT_INPUT
        return payload
