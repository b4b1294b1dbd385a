# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/system/exceptions.py

"""
snapvault-specific exception classes.

Every failure the CLI reports derives from SnapvaultError, so the command
layer can turn any of them into a message and a non-zero exit status.
InvalidArchiveError is the exception: it never leaves the catalog scanner.
"""


class SnapvaultError(Exception):
    """Base exception for all snapvault errors."""
    pass


class ConfigError(SnapvaultError):
    """Raised when the configuration file cannot be found or read."""
    pass


class ValidationError(SnapvaultError):
    """Raised for malformed configuration, bad filter arguments, or a resource of the wrong kind."""
    pass


class ResourceMissingError(SnapvaultError):
    """Raised when a backup is requested for a resource that does not exist."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)


class NotFoundError(SnapvaultError):
    """Raised when no backup matches the requested filter."""
    pass


# === STORAGE ERRORS ===

class StorageError(SnapvaultError):
    """Any failure of a storage backend operation (local or remote)."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)


class BatchDeleteError(StorageError):
    """Raised after a best-effort batch delete in which some deletions failed."""

    def __init__(self, failures: list[tuple[str, Exception]]):
        self.failures = failures
        names = ", ".join(name for name, _ in failures)
        super().__init__(f"Failed to delete {len(failures)} backup(s): {names}")


class InvalidArchiveError(SnapvaultError):
    """A metadata file is unparsable or has no name. Scan-local, never fatal."""

    def __init__(self, message: str, path: str = None):
        self.path = path
        super().__init__(message)
