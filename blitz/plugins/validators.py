"""Shape checks for dynamically loaded plugin content.

Every function here is total: any input gives True or False, nothing is
logged, mutated or raised.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from blitz.plugins.manifest import PluginManifest
from blitz.plugins.schema import SlashCommand
from blitz.plugins.types import MISSING, export_field


def is_command(value: Any) -> bool:
    """Check that `value` has a SlashCommand `data` and a callable `action`."""
    if value is None:
        return False
    data = export_field(value, "data")
    action = export_field(value, "action")
    return isinstance(data, SlashCommand) and action is not MISSING and callable(action)


def is_event(value: Any) -> bool:
    """Check that `value` has a str `event`, an optional bool `once` and a callable `action`."""
    if value is None:
        return False
    event = export_field(value, "event")
    once = export_field(value, "once")
    action = export_field(value, "action")
    return (
        isinstance(event, str)
        and (once is MISSING or isinstance(once, bool))
        and action is not MISSING
        and callable(action)
    )


def is_plugin_config(value: Any) -> bool:
    """Check that `value` is a mapping accepted by PluginManifest.

    `name` and `version` must be non-empty strings; `description`, when
    present, a string; `config`, when present, a mapping.
    """
    if not isinstance(value, Mapping):
        return False
    try:
        PluginManifest.model_validate(dict(value))
    except ValidationError:
        return False
    return True
