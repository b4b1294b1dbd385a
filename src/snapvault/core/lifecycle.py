# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/core/lifecycle.py

"""
Backup lifecycle operations: list, describe, create, restore, delete.

Every operation scans and filters through a storage backend and acts on
the result. Operations are sequential and not transactional; a failing
step aborts the operation and leaves earlier steps in place.
"""

import posixpath
import time
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional, Sequence

import loguru

from snapvault.config.manager import BackupConfig
from snapvault.core.catalog import BackupEntry, EntryMeta, TIMESTAMP_FORMAT, scan_catalog
from snapvault.core.filters import FilterKind, filter_entries
from snapvault.storage.acl import ACL_FILENAME, capture_acl, restore_acl
from snapvault.storage.backends import Backend, METADATA_FILENAME, MirrorDirection, Trailing
from snapvault.storage.factory import create_backend
from snapvault.system.exceptions import (
    BatchDeleteError, NotFoundError, ResourceMissingError, StorageError, ValidationError
)

logger = loguru.logger

DATA_NAME = "data"

# Attempts at finding a free snapshot name before giving up
MAX_NAME_ATTEMPTS = 3


def _now() -> datetime:
    return datetime.now()


def make_timestamp(moment: Optional[datetime] = None) -> str:
    """Local time in the fixed, sortable created_at format."""
    return (moment or _now()).strftime(TIMESTAMP_FORMAT)


def _wait_for_next_second() -> None:
    time.sleep(1.0 - _now().microsecond / 1_000_000)


@contextmanager
def _open_backend(config: BackupConfig, backend: Optional[Backend] = None,
                  verbose: bool = False) -> Iterator[Backend]:
    """Use the given backend as-is, or create one for the duration of an operation."""
    if backend is not None:
        yield backend
        return
    with create_backend(config, verbose=verbose) as created:
        yield created


def validate_resource(config: BackupConfig) -> None:
    """An existing resource must be of the configured kind."""
    path = config.resource_path
    if not path.exists():
        return
    if (config.resource_type == "file" and not path.is_file()) or \
       (config.resource_type == "directory" and not path.is_dir()):
        raise ValidationError(f"Backup resource {path} doesn't match type '{config.resource_type}'")


def fetch_backups(config: BackupConfig, backend: Backend,
                  kind: Optional[FilterKind] = None,
                  values: Optional[Sequence[str]] = None) -> list[BackupEntry]:
    """Scan storage and return the matching backups of this target, oldest first."""
    scan_result = scan_catalog(backend, config.storage_path)
    return filter_entries(scan_result.entries, config.name, kind, values)


def list_backups(config: BackupConfig, kind: Optional[FilterKind] = None,
                 values: Optional[Sequence[str]] = None,
                 backend: Optional[Backend] = None) -> list[dict[str, Any]]:
    """Summary view: name, created_at and groups of every matching backup."""
    with _open_backend(config, backend) as be:
        return [entry.summary() for entry in fetch_backups(config, be, kind, values)]


def describe_backups(config: BackupConfig, kind: Optional[FilterKind] = None,
                     values: Optional[Sequence[str]] = None,
                     backend: Optional[Backend] = None) -> list[BackupEntry]:
    """Full view of every matching backup, including its storage location."""
    with _open_backend(config, backend) as be:
        return fetch_backups(config, be, kind, values)


def _reserve_snapshot_dir(backend: Backend, storage_root: str, name: str) -> tuple[str, str]:
    """Create the directory of a new snapshot; returns (created_at, snapshot path).

    If a snapshot with the same timestamp already exists, wait for the
    next second and take a new timestamp. The mkdir itself fails if another
    process wins the race for the same name.
    """
    for _ in range(MAX_NAME_ATTEMPTS):
        created_at = make_timestamp()
        snapshot_path = posixpath.join(storage_root, f"{name}-{created_at}")
        if not backend.exists(snapshot_path):
            backend.mkdir(snapshot_path)
            return created_at, snapshot_path
        logger.info(f"{snapshot_path} already exists, waiting for the next second")
        _wait_for_next_second()

    raise StorageError(f"Could not find a free snapshot name for '{name}'", path=storage_root)


def create_backup(config: BackupConfig, groups: Optional[Sequence[str]] = None,
                  backend: Optional[Backend] = None, verbose: bool = False) -> BackupEntry:
    """Snapshot the resource into a new directory under storage_path.

    Layout: <storage>/<name>-<created_at>/{data, acl.txt, info.json}.
    info.json is written last. If the process dies before that, the
    directory stays on storage without metadata: scans never see it and no
    operation here removes it.

    Raises:
        ValidationError: If the resource exists but is of the wrong kind
        ResourceMissingError: If the resource doesn't exist
        StorageError: If any storage operation fails
    """
    validate_resource(config)
    resource = config.resource_path
    if not resource.exists():
        raise ResourceMissingError(f"Backup resource {resource} doesn't exist", path=str(resource))

    with _open_backend(config, backend, verbose) as be:
        storage_root = be.realpath(config.storage_path)
        created_at, snapshot_path = _reserve_snapshot_dir(be, storage_root, config.name)
        logger.info(f"Creating backup in {snapshot_path}")

        data_path = posixpath.join(snapshot_path, DATA_NAME)
        if config.resource_type == "directory":
            be.mkdir(data_path)
            be.mirror_tree(str(resource), data_path, MirrorDirection.PUSH,
                           delete_extraneous=True, trailing=Trailing.CONTENTS_ONLY)
        else:
            be.mirror_tree(str(resource), data_path, MirrorDirection.PUSH,
                           delete_extraneous=True, trailing=Trailing.WHOLE_ENTRY)

        if config.acl:
            acl = capture_acl(resource, config.resource_type)
            be.write_file(posixpath.join(snapshot_path, ACL_FILENAME), acl)

        entry = BackupEntry(
            name=f"{config.name}-{created_at}",
            description=config.description,
            acl=config.acl,
            created_at=created_at,
            groups=[config.name, created_at, *(groups or [])],
        )
        be.write_file(posixpath.join(snapshot_path, METADATA_FILENAME), entry.to_info_json())

    return entry.model_copy(update={"meta": EntryMeta(backup_path=snapshot_path)})


def restore_backup(config: BackupConfig, kind: Optional[FilterKind] = None,
                   values: Optional[Sequence[str]] = None,
                   backend: Optional[Backend] = None, verbose: bool = False) -> BackupEntry:
    """Restore the most recent matching backup onto the resource.

    Files of the live resource that are not in the backup are removed.

    Raises:
        NotFoundError: If no backup matches
    """
    validate_resource(config)
    resource = config.resource_path

    with _open_backend(config, backend, verbose) as be:
        entries = fetch_backups(config, be, kind, values)
        if not entries:
            raise NotFoundError("No backup to restore from")

        latest = entries[-1]
        logger.info(f"Restoring from: {latest.backup_path}")
        data_path = posixpath.join(latest.backup_path, DATA_NAME)

        if config.resource_type == "directory":
            if not resource.exists():
                try:
                    resource.mkdir()
                except OSError as e:
                    raise StorageError(f"Failed to create {resource}: {e}", path=str(resource)) from e
            be.mirror_tree(data_path, str(resource), MirrorDirection.PULL,
                           delete_extraneous=True, trailing=Trailing.CONTENTS_ONLY)
        else:
            be.mirror_tree(data_path, str(resource), MirrorDirection.PULL,
                           delete_extraneous=True, trailing=Trailing.WHOLE_ENTRY)

        if latest.acl:
            acl = be.read_file(posixpath.join(latest.backup_path, ACL_FILENAME))
            restore_acl(acl, resource, config.resource_type)

    return latest


def delete_backup(entry: BackupEntry, backend: Backend) -> None:
    """Irreversibly remove one backup's directory from storage."""
    logger.info(f"Deleting backup {entry.name} at {entry.backup_path}")
    backend.remove_tree(entry.backup_path)


def delete_backups(config: BackupConfig, kind: Optional[FilterKind] = None,
                   values: Optional[Sequence[str]] = None, keep_going: bool = False,
                   backend: Optional[Backend] = None) -> list[BackupEntry]:
    """Delete every matching backup, oldest first.

    By default the first failure aborts the batch. With keep_going, every
    deletion is attempted and a BatchDeleteError lists the failures at the end.

    Returns:
        The deleted backups
    """
    deleted = []
    failures = []

    with _open_backend(config, backend) as be:
        for entry in fetch_backups(config, be, kind, values):
            try:
                delete_backup(entry, be)
            except StorageError as e:
                if not keep_going:
                    raise
                logger.error(f"Failed to delete {entry.name}: {e}")
                failures.append((entry.name, e))
                continue
            deleted.append(entry)

    if failures:
        raise BatchDeleteError(failures)
    return deleted
