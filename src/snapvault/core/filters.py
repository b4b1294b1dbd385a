# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/core/filters.py

"""Narrowing and ordering of scanned backups.

Filters are plain predicates over BackupEntry values; nothing is built or
evaluated as a string, so group and name values are always literal.
"""

from enum import Enum
from typing import Iterable, Optional, Sequence

from snapvault.core.catalog import BackupEntry
from snapvault.system.exceptions import ValidationError


class FilterKind(str, Enum):
    NAME = "name"
    GROUPS = "groups"


def parse_filter(kind: Optional[str], values: Optional[Sequence[str]],
                 allowed: Iterable[FilterKind] = (FilterKind.NAME, FilterKind.GROUPS)
                 ) -> tuple[Optional[FilterKind], list[str]]:
    """Validate command-line filter arguments.

    Raises:
        ValidationError: For an unknown or disallowed filter, or a filter without a value
    """
    values = list(values or [])
    if not kind:
        return None, values

    allowed = set(allowed)
    try:
        filter_kind = FilterKind(kind)
    except ValueError:
        raise ValidationError(f"Invalid filter '{kind}'") from None
    if filter_kind not in allowed:
        raise ValidationError(f"Invalid filter '{kind}'")

    if not values or not values[0]:
        raise ValidationError(f"Filter '{kind}' is used, but no filter value provided")
    return filter_kind, values


def filter_entries(entries: Iterable[BackupEntry], base_name: str,
                   kind: Optional[FilterKind] = None,
                   values: Optional[Sequence[str]] = None) -> list[BackupEntry]:
    """Select the backups of one target and sort them oldest first.

    - Only entries whose groups contain base_name are kept.
    - NAME keeps entries whose name equals values[0]; further values are ignored.
    - GROUPS keeps entries that carry every one of values.

    Raises:
        ValidationError: If a filter kind is given without a value
    """
    values = list(values or [])
    if kind is not None and (not values or not values[0]):
        raise ValidationError(f"Filter '{FilterKind(kind).value}' is used, but no filter value provided")

    selected = [entry for entry in entries if entry.has_group(base_name)]

    if kind == FilterKind.NAME:
        name = values[0]
        selected = [entry for entry in selected if entry.name == name]
    elif kind == FilterKind.GROUPS:
        for group in values:
            selected = [entry for entry in selected if entry.has_group(group)]

    return sorted(selected, key=lambda entry: entry.created_at)
