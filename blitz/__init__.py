"""Blitz - a plugin-driven Discord bot runtime.

Imports are lazy so that plugin files and the inspection CLI can use the plugin
types without pulling in the Discord client.
"""

__version__ = "0.3.0"

__all__ = [
    "BlitzBot",
    "BotState",
    "BotSettings",
]


def __getattr__(name):
    if name in ("BlitzBot", "BotState"):
        from blitz import bot
        return getattr(bot, name)
    if name == "BotSettings":
        from blitz.config import BotSettings
        return BotSettings
    raise AttributeError(f"module 'blitz' has no attribute {name!r}")
