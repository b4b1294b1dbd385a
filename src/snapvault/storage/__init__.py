# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/storage/__init__.py

"""
Storage layer for snapvault - every byte that reaches or leaves snapshot storage.

This module provides:
- Backend implementations for the local filesystem and SSH remotes
- The backend factory, selected once from configuration
- POSIX ACL capture and restore
"""

from .backends import (
    Backend, LocalBackend, SSHBackend, MirrorDirection, Trailing, METADATA_FILENAME
)
from .factory import create_backend
from .acl import ACL_FILENAME, capture_acl, restore_acl

__all__ = [
    'Backend',
    'LocalBackend',
    'SSHBackend',
    'MirrorDirection',
    'Trailing',
    'METADATA_FILENAME',
    'create_backend',
    'ACL_FILENAME',
    'capture_acl',
    'restore_acl',
]
