# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/__init__.py

"""snapvault - point-in-time backups of a file or directory, kept locally or over SSH."""
