# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/cli/main.py

"""
CLI dispatcher for snapvault.

Global options (config path, verbosity) are collected by the callback;
each command loads the configuration and routes to a handler in
snapvault.cli.commands.
"""

# Standard library imports
from dataclasses import dataclass
from importlib.metadata import version
from pathlib import Path
from typing import Optional, Any

# Third-party imports
import typer
from rich.console import Console

# Local snapvault imports
from snapvault.cli.utils import handle_operation_error, load_config_with_console, run_operation
from snapvault.cli.commands import info as info_commands
from snapvault.cli.commands import actions as action_commands
from snapvault.config.manager import CONFIG_ENV, DEFAULT_CONFIG
from snapvault.system.logging_setup import setup_logging

# Initialize Typer app
app = typer.Typer(
    help="""snapvault - Create and restore backups

[bold green]Catalog:[/bold green] get, describe
[bold magenta]Backups:[/bold magenta] create, restore, delete
[bold blue]Configuration:[/bold blue] dump, help-config

Filters: [bold]name NAME[/bold] selects one backup by name, [bold]groups GROUP...[/bold]
selects backups carrying every listed group (and tags new backups on create).
""",
    rich_markup_mode="rich"
)

console = Console()

FILTER_HELP = "Filter to apply: 'name' or 'groups'"
VALUES_HELP = "Filter value(s)"


@dataclass
class CLIState:
    config_path: Path
    verbose: bool = False
    debug: bool = False


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        try:
            pkg_version = version("snapvault")
        except Exception as e:
            handle_operation_error(console, "retrieving version", e)
        console.print(f"snapvault version {pkg_version}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG), "--config", "-c", envvar=CONFIG_ENV,
        help="Path to the backup configuration file (JSON or YAML)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", envvar="VERBOSE",
                                 help="Report invalid archives and task progress"),
    debug: bool = typer.Option(False, "--debug", envvar="DEBUG", help="Enable debug logging"),
) -> None:
    """snapvault - versioned snapshots of a file or directory, stored locally or over SSH."""
    setup_logging(verbose=verbose, debug=debug)
    ctx.obj = CLIState(config_path=config_path, verbose=verbose or debug, debug=debug)


def _state(ctx: typer.Context) -> CLIState:
    return ctx.obj


# =============================================================================
# CATALOG COMMANDS - Read-only views of the backups in storage
# =============================================================================

@app.command()
def get(
    ctx: typer.Context,
    filter_kind: Optional[str] = typer.Argument(None, metavar="FILTER", help=FILTER_HELP),
    values: Optional[list[str]] = typer.Argument(None, metavar="VALUES...", help=VALUES_HELP),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> Any:
    """[bold green]Catalog[/bold green]: List existing backups in storage."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    return run_operation(console, "listing backups", lambda: info_commands.get(
        console, config, filter_kind, values, to_json=to_json))


@app.command()
def describe(
    ctx: typer.Context,
    filter_kind: Optional[str] = typer.Argument(None, metavar="FILTER", help=FILTER_HELP),
    values: Optional[list[str]] = typer.Argument(None, metavar="VALUES...", help=VALUES_HELP),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> Any:
    """[bold green]Catalog[/bold green]: List existing backups in storage with extra info."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    return run_operation(console, "describing backups", lambda: info_commands.describe(
        console, config, filter_kind, values, to_json=to_json))


# =============================================================================
# BACKUP COMMANDS - State-changing operations
# =============================================================================

@app.command()
def create(
    ctx: typer.Context,
    filter_kind: Optional[str] = typer.Argument(None, metavar="[groups]", help="Use 'groups' to tag the new backup"),
    values: Optional[list[str]] = typer.Argument(None, metavar="GROUPS...", help="Extra groups for the new backup"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> Any:
    """[bold magenta]Backups[/bold magenta]: Create a backup."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    return run_operation(console, "creating backup", lambda: action_commands.create(
        console, config, filter_kind, values,
        verbose=state.verbose, quiet=quiet, to_json=to_json))


@app.command()
def restore(
    ctx: typer.Context,
    filter_kind: Optional[str] = typer.Argument(None, metavar="FILTER", help=FILTER_HELP),
    values: Optional[list[str]] = typer.Argument(None, metavar="VALUES...", help=VALUES_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> Any:
    """[bold magenta]Backups[/bold magenta]: Restore the most recent matching backup."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    return run_operation(console, "restoring backup", lambda: action_commands.restore(
        console, config, filter_kind, values,
        verbose=state.verbose, quiet=quiet, to_json=to_json))


@app.command()
def delete(
    ctx: typer.Context,
    filter_kind: Optional[str] = typer.Argument(None, metavar="FILTER", help=FILTER_HELP),
    values: Optional[list[str]] = typer.Argument(None, metavar="VALUES...", help=VALUES_HELP),
    keep_going: bool = typer.Option(False, "--keep-going", "-k",
                                    help="Attempt every deletion and report failures at the end"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output"),
    to_json: bool = typer.Option(False, "--json", help="Output results as JSON")
) -> Any:
    """[bold magenta]Backups[/bold magenta]: Delete every matching backup."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    return run_operation(console, "deleting backups", lambda: action_commands.delete(
        console, config, filter_kind, values,
        keep_going=keep_going, quiet=quiet, to_json=to_json))


# =============================================================================
# CONFIGURATION COMMANDS
# =============================================================================

@app.command()
def dump(ctx: typer.Context) -> None:
    """[bold blue]Configuration[/bold blue]: Pretty print the configuration file as JSON."""
    state = _state(ctx)
    config = load_config_with_console(console, state.config_path, state.verbose)
    info_commands.dump(console, config)


@app.command(name="help-config")
def help_config() -> None:
    """[bold blue]Configuration[/bold blue]: Describe the configuration file."""
    info_commands.help_config(console)


# =============================================================================
# ENTRY POINT
# =============================================================================

def cli_main() -> None:  # pragma: no cover - entry point
    """Entry point for the snapvault CLI application."""
    app()


if __name__ == "__main__":  # pragma: no cover
    cli_main()
