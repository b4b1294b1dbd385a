# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/cli/utils.py

"""
CLI utility functions shared by the snapvault commands.

All functions handle console output and typer exits consistently: a
failure prints one red line naming what went wrong and exits with status 1.
"""

from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape

from snapvault.config.manager import BackupConfig
from snapvault.system.exceptions import ConfigError, SnapvaultError, ValidationError
from snapvault.system.logging_setup import enable_file_logging


def load_config_with_console(console: Console, config_path: Optional[Path] = None,
                             verbose: bool = False) -> BackupConfig:
    """
    Load the backup configuration with proper error handling and console output.

    Args:
        console: Rich console for output
        config_path: Explicit config file, or None for BACKUP_CONFIG / backup.json
        verbose: Show loading message if True

    Returns:
        Loaded configuration object

    Raises:
        typer.Exit: If configuration loading fails
    """
    if verbose:
        console.print("[dim]Loading configuration...[/dim]")

    try:
        config = BackupConfig.load(config_path)
    except (ConfigError, ValidationError) as e:
        console.print(f"[red]✗[/red] Configuration error: {escape(str(e))}")
        console.print("Run 'snapvault help-config' for help")
        raise typer.Exit(1)

    enable_file_logging(config)
    return config


def handle_operation_error(console: Console, operation: str, error: Exception) -> None:
    """Report a failed operation and exit with a non-zero status."""
    console.print(f"[red]✗[/red] Error {operation}: {escape(str(error))}", highlight=False)
    raise typer.Exit(1)


def run_operation(console: Console, operation: str, handler: Callable[[], Any]) -> Any:
    """Run a command handler, turning snapvault errors into a clean exit."""
    try:
        return handler()
    except SnapvaultError as e:
        handle_operation_error(console, operation, e)
