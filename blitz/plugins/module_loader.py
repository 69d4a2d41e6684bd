"""Dynamic module loading - turns plugin source files into exported values."""

import importlib.util
import logging
import re
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from blitz.constants import SOURCE_SUFFIX
from blitz.plugins.types import MISSING

logger = logging.getLogger(__name__)

# Synthetic package prefix for plugin modules in sys.modules
MODULE_PREFIX = "blitz_plugins"


class ModuleLoader:
    """Loads plugin source files and extracts one exported attribute from each.

    Every failure degrades to "value absent"; nothing raised by plugin code
    escapes this class.
    """

    @staticmethod
    def module_name_for(path: Path) -> str:
        """Build a unique module name from the file's last path components.

        e.g. plugins/ping/commands/ping.py -> blitz_plugins.ping.commands.ping
        """
        parts = [path.parent.parent.name, path.parent.name, path.stem]
        cleaned = [re.sub(r"\W", "_", part) or "_" for part in parts]
        return ".".join([MODULE_PREFIX, *cleaned])

    @classmethod
    def load_module(cls, path: Union[str, Path], attribute: str) -> Optional[Any]:
        """Execute a source file and return its `attribute` export.

        Args:
            path: Path to the source file (resolved to an absolute path)
            attribute: Name of the module-level value to return

        Returns:
            The exported value, or None if the file failed to load or does not
            define the attribute
        """
        try:
            absolute_path = Path(path).resolve()
            module_name = cls.module_name_for(absolute_path)

            # Add the file's directory to sys.path temporarily so sibling helpers import
            module_dir = str(absolute_path.parent)
            added_to_path = module_dir not in sys.path
            if added_to_path:
                sys.path.insert(0, module_dir)
            cached_before = set(sys.modules)

            try:
                spec = importlib.util.spec_from_file_location(module_name, absolute_path)
                if spec is None or spec.loader is None:
                    raise ImportError(f"Cannot create a module spec for {absolute_path}")

                module = importlib.util.module_from_spec(spec)
                # Registered before execution so dataclasses and pickling can find it
                sys.modules[module_name] = module
                try:
                    spec.loader.exec_module(module)
                except BaseException:
                    sys.modules.pop(module_name, None)
                    raise
            finally:
                if added_to_path and module_dir in sys.path:
                    sys.path.remove(module_dir)
                cls._forget_helpers(absolute_path.parent, cached_before)

            value = getattr(module, attribute, MISSING)
            if value is MISSING:
                logger.warning(f"Module {path} does not export '{attribute}'")
                return None
            return value

        except (Exception, SystemExit) as e:
            logger.error(f"Failed to load module at {path}: {e!r}", exc_info=True)
            return None

    @staticmethod
    def _forget_helpers(module_dir: Path, cached_before: set) -> None:
        """Drop sibling helpers cached under bare names while loading a plugin file.

        Another plugin's helper with the same name must not resolve to this one.
        """
        for name in set(sys.modules) - cached_before:
            if name.startswith(f"{MODULE_PREFIX}."):
                continue
            module_file = getattr(sys.modules.get(name), "__file__", None)
            if module_file and Path(module_file).resolve().is_relative_to(module_dir):
                del sys.modules[name]

    @classmethod
    def load_modules_from_directory(
        cls,
        directory: Union[str, Path],
        validator: Callable[[Any], bool],
        attribute: str,
    ) -> List[Any]:
        """Load every eligible source file in a directory.

        Only direct entries that are regular files ending in .py and not
        starting with "_" are considered, in sorted order. A value is kept
        only if it loaded and passes `validator`.

        Args:
            directory: Directory to scan (non-recursive)
            validator: Predicate that accepted values must satisfy
            attribute: Export name passed to load_module()

        Returns:
            Accepted values; empty if the directory cannot be listed
        """
        modules: List[Any] = []
        directory = Path(directory)

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.error(f"Failed to load modules from {directory}: {e}")
            return modules

        for entry in entries:
            if entry.suffix != SOURCE_SUFFIX or entry.name.startswith("_"):
                continue
            if not entry.is_file():
                continue

            value = cls.load_module(entry, attribute)
            if value is None:
                continue
            if not validator(value):
                logger.warning(
                    f"Skipping {entry}: '{attribute}' export failed validation"
                )
                continue

            modules.append(value)

        return modules
