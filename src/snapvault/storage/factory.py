# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/storage/factory.py

"""Backend factory: the one place that knows local from remote storage."""

from typing import TYPE_CHECKING

from loguru import logger

from snapvault.system.exceptions import ValidationError
from .backends import Backend, LocalBackend, SSHBackend

if TYPE_CHECKING:
    from snapvault.config.manager import BackupConfig


def create_backend(config: 'BackupConfig', verbose: bool = False) -> Backend:
    """Create the backend for config.type.

    Args:
        config: Backup configuration
        verbose: Show transfer progress for remote mirroring

    Returns:
        LocalBackend or SSHBackend

    Raises:
        ValidationError: If the storage type is unknown or remote auth is unusable
    """
    if config.type == "local":
        return LocalBackend()
    elif config.type == "remote":
        logger.debug(f"Using SSH storage on {config.storage_host}")
        return SSHBackend.from_config(config, verbose=verbose)
    else:
        raise ValidationError(f"Unknown backup type '{config.type}'")
