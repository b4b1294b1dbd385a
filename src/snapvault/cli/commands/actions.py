# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/cli/commands/actions.py

"""
Action command handlers - state-changing commands.

Handles: create, restore, delete
"""

from typing import Any, Optional

from rich.console import Console
from rich.markup import escape

from snapvault.config.manager import BackupConfig
from snapvault.core.filters import FilterKind, parse_filter
from snapvault.core.lifecycle import create_backup, delete_backups, restore_backup
from snapvault.system.display import print_json


def create(
    console: Console,
    config: BackupConfig,
    filter_kind: Optional[str] = None,
    values: Optional[list[str]] = None,
    verbose: bool = False,
    quiet: bool = False,
    to_json: bool = False,
) -> dict[str, Any]:
    """Create a backup, optionally tagged with extra groups.

    Only the 'groups' option is accepted here; its values are added to the
    groups of the new backup.
    """
    kind, values = parse_filter(filter_kind, values, allowed=(FilterKind.GROUPS,))
    extra_groups = values if kind == FilterKind.GROUPS else []

    entry = create_backup(config, extra_groups, verbose=verbose)

    if to_json:
        print_json(console, entry.describe())
    elif not quiet:
        console.print(f"[green]✓[/green] Created backup [bold]{escape(entry.name)}[/bold]")
        if verbose:
            console.print(f"[dim]Stored at {escape(entry.backup_path)}[/dim]")
    return entry.describe()


def restore(
    console: Console,
    config: BackupConfig,
    filter_kind: Optional[str] = None,
    values: Optional[list[str]] = None,
    verbose: bool = False,
    quiet: bool = False,
    to_json: bool = False,
) -> dict[str, Any]:
    """Restore the most recent matching backup onto the resource."""
    kind, values = parse_filter(filter_kind, values)
    entry = restore_backup(config, kind, values, verbose=verbose)

    if to_json:
        print_json(console, entry.describe())
    elif not quiet:
        console.print(f"[green]✓[/green] Restored {escape(str(config.resource_path))} from [bold]{escape(entry.name)}[/bold]")
    return entry.describe()


def delete(
    console: Console,
    config: BackupConfig,
    filter_kind: Optional[str] = None,
    values: Optional[list[str]] = None,
    keep_going: bool = False,
    quiet: bool = False,
    to_json: bool = False,
) -> list[str]:
    """Delete every matching backup."""
    kind, values = parse_filter(filter_kind, values)
    deleted = delete_backups(config, kind, values, keep_going=keep_going)
    names = [entry.name for entry in deleted]

    if to_json:
        print_json(console, names)
    elif not quiet:
        if not names:
            console.print("[dim]No backups matched, nothing deleted[/dim]")
        for name in names:
            console.print(f"[green]✓[/green] Deleted backup [bold]{escape(name)}[/bold]")
    return names
