"""Plugin discovery - turns each subdirectory of the plugins root into a Plugin."""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Union

import yaml

from blitz.constants import (
    COMMAND_EXPORT,
    COMMANDS_DIR,
    DEFAULT_DESCRIPTION,
    EVENT_EXPORT,
    EVENTS_DIR,
    PLUGIN_CONFIG_FILE,
    UNKNOWN_VERSION,
    default_plugins_dir,
)
from blitz.plugins.manifest import PluginManifest
from blitz.plugins.module_loader import ModuleLoader
from blitz.plugins.types import Command, Event, Plugin, PluginConfig
from blitz.plugins.validators import is_command, is_event, is_plugin_config

logger = logging.getLogger(__name__)


class ConfigOutcome(str, Enum):
    """Result of reading a plugin's blitz.config.yaml."""

    ABSENT = "absent"
    INVALID = "invalid"
    VALID = "valid"


class PluginLoader:
    """Discovers plugins under a root directory.

    Layout of one plugin:

        <root>/<plugin>/blitz.config.yaml   (optional)
        <root>/<plugin>/commands/*.py       (optional, each exports `command`)
        <root>/<plugin>/events/*.py         (optional, each exports `event`)

    A broken plugin is logged and skipped; it never stops discovery of the others.
    """

    def __init__(self, plugins_dir: Optional[Union[str, Path]] = None):
        """Initialize the loader.

        Args:
            plugins_dir: Plugins root. Defaults to BLITZ_PLUGINS_DIR or ./plugins.
        """
        self.plugins_dir = Path(plugins_dir) if plugins_dir else default_plugins_dir()

    def load_plugins(self) -> List[Plugin]:
        """Load all plugins from the plugins root, in lexical directory order.

        Returns:
            Loaded plugins; empty if the root cannot be listed
        """
        plugins: List[Plugin] = []

        try:
            entries = sorted(self.plugins_dir.iterdir())
        except OSError as e:
            logger.error(f"Failed to load plugins directory {self.plugins_dir}: {e}")
            return plugins

        for entry in entries:
            if not entry.is_dir():
                continue
            plugin = self.load_plugin(entry)
            if plugin:
                plugins.append(plugin)

        logger.info(f"Discovered {len(plugins)} plugin(s) in {self.plugins_dir}")
        return plugins

    def load_plugin(self, plugin_dir: Union[str, Path]) -> Optional[Plugin]:
        """Load config, commands and events for one plugin directory.

        Args:
            plugin_dir: Path to the plugin directory

        Returns:
            Plugin if loaded, None if the plugin was rejected or failed
        """
        plugin_dir = Path(plugin_dir)
        dir_name = plugin_dir.name

        try:
            outcome, manifest = self.read_config(plugin_dir)
            config = self._build_config(dir_name, manifest)

            if not config.name or not config.version:
                logger.error(
                    f"Plugin {dir_name} is missing mandatory fields: "
                    f"'name' and/or 'version'. Skipping."
                )
                return None

            commands = self._load_entries(
                plugin_dir / COMMANDS_DIR, is_command, COMMAND_EXPORT, Command.from_export
            )
            events = self._load_entries(
                plugin_dir / EVENTS_DIR, is_event, EVENT_EXPORT, Event.from_export
            )

            logger.info(
                f"Successfully loaded plugin: {config.name} v{config.version} "
                f"({len(commands)} commands, {len(events)} events, config {outcome.value})"
            )
            return Plugin(
                config=config,
                commands=tuple(commands),
                events=tuple(events),
                path=plugin_dir,
            )

        except (Exception, SystemExit) as e:
            logger.error(f"Failed to load plugin {dir_name}: {e!r}", exc_info=True)
            return None

    def read_config(self, plugin_dir: Path) -> Tuple[ConfigOutcome, Optional[PluginManifest]]:
        """Read and validate blitz.config.yaml.

        An invalid document is discarded as a whole; no field of it is used.

        Args:
            plugin_dir: Path to the plugin directory

        Returns:
            (outcome, manifest) where manifest is set only when outcome is VALID
        """
        config_path = plugin_dir / PLUGIN_CONFIG_FILE

        try:
            raw = config_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No {PLUGIN_CONFIG_FILE} in {plugin_dir}; using defaults")
            return ConfigOutcome.ABSENT, None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {config_path}: {e}; using defaults")
            return ConfigOutcome.INVALID, None

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            logger.warning(f"Invalid YAML in {config_path}: {e}; using defaults")
            return ConfigOutcome.INVALID, None

        if not is_plugin_config(data):
            logger.warning(f"Invalid plugin configuration format in {config_path}; using defaults")
            return ConfigOutcome.INVALID, None

        return ConfigOutcome.VALID, PluginManifest.model_validate(data)

    @staticmethod
    def _build_config(dir_name: str, manifest: Optional[PluginManifest]) -> PluginConfig:
        """Apply defaults: directory name, "unknown" version, placeholder description."""
        if manifest is None:
            return PluginConfig(
                name=dir_name,
                version=UNKNOWN_VERSION,
                description=DEFAULT_DESCRIPTION,
                config={},
            )
        return PluginConfig(
            name=manifest.name,
            version=manifest.version,
            description=manifest.description,
            config=manifest.config,
        )

    @staticmethod
    def _load_entries(
        directory: Path,
        validator: Callable[[Any], bool],
        attribute: str,
        normalize: Callable[[Any], Any],
    ) -> List[Any]:
        """Load one of the plugin's source directories (commands/ or events/).

        A missing directory, or a file standing where the directory should be,
        contributes nothing.
        """
        try:
            if not directory.is_dir():
                return []
        except OSError as e:
            logger.error(f"Failed to load {attribute}s from: {directory}: {e}")
            return []

        values = ModuleLoader.load_modules_from_directory(directory, validator, attribute)
        return [normalize(value) for value in values]
