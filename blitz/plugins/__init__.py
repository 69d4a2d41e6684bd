"""Plugin system for the Blitz bot.

Imports are lazy to avoid pulling in discord.py when only the plugin records
or the schema builder are needed (e.g. inside plugin source files).
"""

__all__ = [
    "Command",
    "Event",
    "Plugin",
    "PluginConfig",
    "SlashCommand",
    "CommandOption",
    "OptionType",
    "PluginManifest",
    "ModuleLoader",
    "PluginLoader",
    "ConfigOutcome",
    "DispatchRegistry",
    "is_command",
    "is_event",
    "is_plugin_config",
]


def __getattr__(name):
    if name in ("Command", "Event", "Plugin", "PluginConfig"):
        from blitz.plugins import types
        return getattr(types, name)
    if name in ("SlashCommand", "CommandOption", "OptionType"):
        from blitz.plugins import schema
        return getattr(schema, name)
    if name == "PluginManifest":
        from blitz.plugins.manifest import PluginManifest
        return PluginManifest
    if name == "ModuleLoader":
        from blitz.plugins.module_loader import ModuleLoader
        return ModuleLoader
    if name in ("PluginLoader", "ConfigOutcome"):
        from blitz.plugins import loader
        return getattr(loader, name)
    if name == "DispatchRegistry":
        from blitz.plugins.registry import DispatchRegistry
        return DispatchRegistry
    if name in ("is_command", "is_event", "is_plugin_config"):
        from blitz.plugins import validators
        return getattr(validators, name)
    raise AttributeError(f"module 'blitz.plugins' has no attribute {name!r}")
