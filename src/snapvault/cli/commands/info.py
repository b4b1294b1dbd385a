# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/cli/commands/info.py

"""
Info command handlers - read-only commands.

Handles: get, describe, dump, help-config
"""

from typing import Any, Optional

from rich.console import Console

from snapvault.config.manager import BackupConfig
from snapvault.core.filters import parse_filter
from snapvault.core.lifecycle import describe_backups, list_backups
from snapvault.system.display import (
    config_help_table, display_backup_details, display_backups, print_json
)


def get(
    console: Console,
    config: BackupConfig,
    filter_kind: Optional[str] = None,
    values: Optional[list[str]] = None,
    to_json: bool = False,
) -> list[dict[str, Any]]:
    """List matching backups: name, creation time and groups."""
    kind, values = parse_filter(filter_kind, values)
    summaries = list_backups(config, kind, values)

    if to_json:
        print_json(console, summaries)
    else:
        display_backups(console, summaries)
    return summaries


def describe(
    console: Console,
    config: BackupConfig,
    filter_kind: Optional[str] = None,
    values: Optional[list[str]] = None,
    to_json: bool = False,
) -> list[dict[str, Any]]:
    """List matching backups with every stored field and their location."""
    kind, values = parse_filter(filter_kind, values)
    entries = describe_backups(config, kind, values)

    if to_json:
        print_json(console, [entry.describe() for entry in entries])
    else:
        display_backup_details(console, entries)
    return [entry.describe() for entry in entries]


def dump(console: Console, config: BackupConfig) -> None:
    """Pretty print the parsed configuration."""
    console.print(config.dump_json().decode(), markup=False, highlight=False, soft_wrap=True)


def help_config(console: Console) -> None:
    console.print(config_help_table())
