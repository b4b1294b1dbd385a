# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/storage/acl.py

"""POSIX ACL capture and restore for backup resources.

ACL listings are taken with paths relative to an anchor directory: the
parent of a file resource, or the directory resource itself. Restoring
from the same anchor puts the permissions back on the restored tree.
"""

import os
import tempfile
from pathlib import Path

from loguru import logger

from snapvault.system.exceptions import StorageError, ValidationError
from snapvault.system.execution import CommandExecutor as ce

ACL_FILENAME = "acl.txt"


def _anchor(resource_path: Path, resource_type: str) -> tuple[Path, str]:
    """Return (working directory, getfacl target) for a resource."""
    resource_path = Path(resource_path)
    if resource_type == "file":
        return resource_path.parent, resource_path.name
    return resource_path, "."


def _require(program: str) -> None:
    if not ce.is_available(program):
        raise ValidationError(f"{program} is not installed, but is required for ACL backup")


def capture_acl(resource_path: Path, resource_type: str) -> bytes:
    """Return the recursive getfacl listing of a resource."""
    _require("getfacl")
    cwd, target = _anchor(resource_path, resource_type)
    try:
        result = ce.run_local(["getfacl", "-R", target], cwd=cwd)
    except ValueError as e:
        raise StorageError(f"Failed to capture ACL of {resource_path}: {e}", path=str(resource_path)) from e
    return result.stdout.encode("utf-8")


def restore_acl(acl: bytes, resource_path: Path, resource_type: str) -> None:
    """Apply a getfacl listing to a restored resource.

    The listing is staged in a temporary file that is removed on every
    exit path.
    """
    _require("setfacl")
    cwd, _ = _anchor(resource_path, resource_type)

    tmp = tempfile.NamedTemporaryFile(mode="wb", prefix="snapvault-", suffix=".acl", delete=False)
    try:
        with tmp:
            tmp.write(acl)
        logger.debug(f"Restoring ACL for {resource_path} from {tmp.name}")
        ce.run_local(["setfacl", f"--restore={tmp.name}"], cwd=cwd)
    except ValueError as e:
        raise StorageError(f"Failed to restore ACL of {resource_path}: {e}", path=str(resource_path)) from e
    finally:
        os.unlink(tmp.name)
