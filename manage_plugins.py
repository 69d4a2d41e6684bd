#!/usr/bin/env python3
"""Plugin inspection CLI tool.

Loading a plugin executes its source files, exactly as the bot does at startup.
"""

import argparse
import json
import logging
import sys
from collections import defaultdict
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from blitz.constants import (
    COMMAND_EXPORT,
    COMMANDS_DIR,
    EVENT_EXPORT,
    EVENTS_DIR,
    SOURCE_SUFFIX,
    default_plugins_dir,
)
from blitz.plugins.loader import ConfigOutcome, PluginLoader

console = Console()


def get_loader(args) -> PluginLoader:
    """Create a PluginLoader for --plugins-dir or the configured default."""
    return PluginLoader(Path(args.plugins_dir) if args.plugins_dir else default_plugins_dir())


def cmd_list(args):
    """List all discovered plugins."""
    loader = get_loader(args)
    plugins = loader.load_plugins()

    if not plugins:
        console.print(f"No plugins found in {loader.plugins_dir}.")
        return

    table = Table(title=f"Plugins in {loader.plugins_dir}")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Commands")
    table.add_column("Events")
    table.add_column("Path", style="dim")

    for p in plugins:
        table.add_row(
            p.config.name,
            p.config.version,
            ", ".join(c.name for c in p.commands) or "-",
            ", ".join(e.event for e in p.events) or "-",
            str(p.path),
        )

    console.print(table)


def cmd_info(args):
    """Show detailed plugin information."""
    plugins = get_loader(args).load_plugins()

    plugin = next((p for p in plugins if p.config.name == args.name), None)
    if not plugin:
        console.print(f"Plugin '{args.name}' not found.")
        sys.exit(1)

    info = plugin.to_dict()
    console.print(f"Plugin: [bold]{info['name']}[/bold]")
    console.print(f"  Version:     {info['version']}")
    console.print(f"  Description: {info['description']}")
    console.print(f"  Path:        {info['path']}")
    console.print(f"  Commands:    {', '.join(info['commands']) or '-'}")
    for event in info["events"]:
        console.print(f"  Event:       {event['event']}{' (once)' if event['once'] else ''}")
    if info["config"]:
        console.print(f"  Config:      {json.dumps(info['config'], indent=4, ensure_ascii=False)}")


def find_issues(loader: PluginLoader) -> list:
    """Run health checks on a plugins root and return human-readable issues."""
    issues = []

    if not loader.plugins_dir.is_dir():
        return [f"Plugins directory missing: {loader.plugins_dir}"]

    plugins = {p.path: p for p in loader.load_plugins()}

    for plugin_dir in sorted(d for d in loader.plugins_dir.iterdir() if d.is_dir()):
        plugin = plugins.get(plugin_dir)
        if plugin is None:
            issues.append(f"Plugin directory '{plugin_dir.name}' failed to load")
            continue

        outcome, _ = loader.read_config(plugin_dir)
        if outcome is ConfigOutcome.INVALID:
            issues.append(f"Plugin '{plugin_dir.name}': invalid config file, defaults in use")

        # Source files that did not yield a command or event
        for subdir, export, loaded in (
            (COMMANDS_DIR, COMMAND_EXPORT, len(plugin.commands)),
            (EVENTS_DIR, EVENT_EXPORT, len(plugin.events)),
        ):
            source_dir = plugin_dir / subdir
            if not source_dir.is_dir():
                continue
            files = [
                f for f in source_dir.iterdir()
                if f.is_file() and f.suffix == SOURCE_SUFFIX and not f.name.startswith("_")
            ]
            if len(files) > loaded:
                issues.append(
                    f"Plugin '{plugin.name}': {len(files) - loaded} file(s) in {subdir}/ "
                    f"did not export a valid '{export}'"
                )

    # Command names defined by more than one plugin (last one wins)
    owners = defaultdict(list)
    for plugin in plugins.values():
        for command in plugin.commands:
            owners[command.name].append(plugin.name)
    for name, names in owners.items():
        if len(names) > 1:
            issues.append(
                f"Command '{name}' defined by {', '.join(names)}; '{names[-1]}' wins"
            )

    return issues


def cmd_doctor(args):
    """Run health checks on the plugin system."""
    loader = get_loader(args)
    issues = find_issues(loader)

    if issues:
        console.print(f"[red]Found {len(issues)} issue(s):[/red]")
        for i, issue in enumerate(issues, 1):
            console.print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        count = sum(1 for d in loader.plugins_dir.iterdir() if d.is_dir())
        console.print(f"[green]All checks passed.[/green] {count} plugin(s) found.")


def main():
    load_dotenv('.env')

    parser = argparse.ArgumentParser(description="Blitz Plugin Manager")
    parser.add_argument("--plugins-dir", help="Plugins root (default: BLITZ_PLUGINS_DIR or ./plugins)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show loader logs")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("name", help="Plugin name")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
