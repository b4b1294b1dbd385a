# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/core/catalog.py

"""Snapshot metadata model and catalog scan.

Each snapshot directory holds an info.json with exactly the persisted
fields of BackupEntry. The location of the snapshot (meta.backup_path) is
worked out while scanning and never written back.
"""

from __future__ import annotations

import posixpath
from typing import Any, Final, Optional

import loguru
import orjson
import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from snapvault.storage.backends import Backend
from snapvault.system.exceptions import InvalidArchiveError

logger = loguru.logger

# Zero-padded and fixed width, so string order is chronological order
TIMESTAMP_FORMAT: Final = "%Y-%m-%d-%H-%M-%S"

PERSISTED_FIELDS: Final = ("name", "description", "acl", "created_at", "groups")


class EntryMeta(BaseModel):
    """Scan-time annotations of an entry."""
    model_config = ConfigDict(frozen=True)
    backup_path: str


class BackupEntry(BaseModel):
    """One point-in-time snapshot of the backup resource."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    description: str = ""
    acl: bool = False
    created_at: str = ""
    groups: list[str] = Field(default_factory=list)
    meta: Optional[EntryMeta] = None

    @field_validator("description", mode="before")
    @classmethod
    def null_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def backup_path(self) -> str:
        if self.meta is None:
            raise ValueError(f"Backup '{self.name}' has no storage location (not loaded by a scan)")
        return self.meta.backup_path

    def has_group(self, group: str) -> bool:
        return group in self.groups

    def to_info_json(self) -> bytes:
        """Serialize the persisted fields for info.json."""
        return orjson.dumps(
            self.model_dump(include=set(PERSISTED_FIELDS)),
            option=orjson.OPT_INDENT_2
        )

    def summary(self) -> dict[str, Any]:
        """The short view used by the `get` command."""
        return {"name": self.name, "created_at": self.created_at, "groups": list(self.groups)}

    def describe(self) -> dict[str, Any]:
        """The full view used by the `describe` command."""
        return self.model_dump(mode="json")


class ScanResult(BaseModel):
    """Result of scanning a storage root"""
    entries: list[BackupEntry] = []
    invalid: list[str] = []


def parse_entry(content: bytes, info_path: str) -> BackupEntry:
    """Parse info.json content and annotate it with its location.

    Raises:
        InvalidArchiveError: If the content is not a JSON object with a non-empty name
    """
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        raise InvalidArchiveError(f"Unparsable metadata: {e}", path=info_path) from e

    if not isinstance(data, dict):
        raise InvalidArchiveError("Metadata is not an object", path=info_path)

    # a stray meta object in the file must not decide where the snapshot lives
    data.pop("meta", None)
    try:
        entry = BackupEntry.model_validate(data)
    except pydantic.ValidationError as e:
        raise InvalidArchiveError(f"Invalid metadata: {e.error_count()} problem(s)", path=info_path) from e

    meta = EntryMeta(backup_path=posixpath.dirname(info_path))
    return entry.model_copy(update={"meta": meta})


def scan_catalog(backend: Backend, storage_root: str) -> ScanResult:
    """Collect every valid snapshot under storage_root.

    Invalid archives are skipped and reported at INFO level; they never fail
    the scan. Order of the result is whatever the backend listing gives.
    """
    result = ScanResult()
    for info_path in backend.list_metadata_files(storage_root):
        content = backend.read_file(info_path)
        try:
            entry = parse_entry(content, info_path)
        except InvalidArchiveError as e:
            logger.info(f"Invalid archive: {info_path}")
            logger.debug(f"{info_path}: {e}")
            result.invalid.append(info_path)
            continue
        result.entries.append(entry)

    logger.debug(f"Scanned {storage_root}: {len(result.entries)} backup(s), {len(result.invalid)} invalid")
    return result
