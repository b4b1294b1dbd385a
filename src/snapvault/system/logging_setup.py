# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/system/logging_setup.py

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from snapvault.config.manager import BackupConfig


def console_level(verbose: bool = False, debug: bool = False) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return "WARNING"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup loguru logging for the entire application.

    Configures a single stderr handler:
    - WARNING+ by default (clean CLI output)
    - INFO+ in verbose mode (invalid archives, restore source)
    - DEBUG+ in debug mode (every command line that is run)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        level=console_level(verbose, debug),
        format="<level>{level}</level>: {message}",
        colorize=True
    )


def enable_file_logging(config: "BackupConfig") -> None:
    """Add a DEBUG file handler if the configuration names a log directory."""
    if config.local_log is None:
        return

    try:
        log_dir = Path(config.local_log)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"snapvault-{config.name}.log"

        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="30 days",
            compression="gz"
        )
        logger.debug(f"File logging enabled: {log_file}")

    except Exception as e:
        # Don't fail the entire application if logging setup fails
        logger.warning(f"Failed to setup file logging: {e}")
