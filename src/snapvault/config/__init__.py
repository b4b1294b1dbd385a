# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/config/__init__.py

from .manager import BackupConfig, CONFIG_FIELDS, default_config_path

__all__ = ['BackupConfig', 'CONFIG_FIELDS', 'default_config_path']
