"""Global constants for the Blitz bot runtime."""

import os
from pathlib import Path

# Per-plugin declarative config file
PLUGIN_CONFIG_FILE = "blitz.config.yaml"

# Per-plugin source directories and the module attribute each file must export
COMMANDS_DIR = "commands"
EVENTS_DIR = "events"
COMMAND_EXPORT = "command"
EVENT_EXPORT = "event"

# Loadable source files
SOURCE_SUFFIX = ".py"

# Defaults applied when blitz.config.yaml is absent or invalid
UNKNOWN_VERSION = "unknown"
DEFAULT_DESCRIPTION = "No description provided"

# Generic acknowledgment shown to users when a command handler fails
COMMAND_ERROR_REPLY = "There was an error executing this command!"

# Plugins root (supports BLITZ_PLUGINS_DIR, relative paths resolve against the working directory)
DEFAULT_PLUGINS_DIRNAME = "plugins"


def default_plugins_dir() -> Path:
    """Resolve the plugins root from BLITZ_PLUGINS_DIR or ./plugins."""
    env_dir = os.getenv("BLITZ_PLUGINS_DIR", "")
    if env_dir:
        path = Path(env_dir)
        return path if path.is_absolute() else (Path.cwd() / path).resolve()
    return Path.cwd() / DEFAULT_PLUGINS_DIRNAME
