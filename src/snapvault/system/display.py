# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/system/display.py

# Standard library imports
from typing import Any

# Third-party imports
import orjson
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Local snapvault imports
from snapvault.config.manager import CONFIG_FIELDS
from snapvault.core.catalog import BackupEntry


def summary_table(summaries: list[dict[str, Any]]) -> Table:
    """Convert backup summaries to a rich Table for display.

    Args:
        summaries: Dicts with name, created_at and groups

    Returns:
        Rich Table object ready for display
    """
    table = Table(title="Backups")
    table.add_column("Name")
    table.add_column("Created")
    table.add_column("Groups")

    for summary in summaries:
        table.add_row(escape(summary["name"]), summary["created_at"], escape(", ".join(summary["groups"])))
    return table


def describe_table(entries: list[BackupEntry]) -> Table:
    table = Table(title="Backups")
    table.add_column("Name")
    table.add_column("Created")
    table.add_column("Groups")
    table.add_column("Description")
    table.add_column("ACL", justify="center")
    table.add_column("Path")

    for entry in entries:
        table.add_row(
            escape(entry.name),
            entry.created_at,
            escape(", ".join(entry.groups)),
            escape(entry.description),
            "yes" if entry.acl else "no",
            escape(entry.meta.backup_path) if entry.meta else ""
        )
    return table


def config_help_table() -> Table:
    """Document every configuration key in JSON path format."""
    table = Table(title="Configuration file (JSON or YAML)")
    table.add_column("Key")
    table.add_column("Type")
    table.add_column("Description")
    for key, kind, description in CONFIG_FIELDS:
        table.add_row(key, f"<{kind}>", description)
    return table


def print_json(console: Console, data: Any) -> None:
    """Print data as indented JSON without rich markup processing."""
    console.print(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode(), markup=False, highlight=False, soft_wrap=True)


def display_backups(console: Console, summaries: list[dict[str, Any]]) -> None:
    if not summaries:
        console.print("[dim]No backups found[/dim]")
        return
    console.print(summary_table(summaries))


def display_backup_details(console: Console, entries: list[BackupEntry]) -> None:
    if not entries:
        console.print("[dim]No backups found[/dim]")
        return
    console.print(describe_table(entries))
