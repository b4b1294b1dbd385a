# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/cli/commands/__init__.py

"""
Command handlers for the snapvault CLI.

- info: read-only commands (get, describe, dump, help-config)
- actions: state-changing commands (create, restore, delete)
"""
