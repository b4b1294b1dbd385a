# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/storage/backends.py

"""Storage backends: where snapshot trees live and how bytes get there.

Both backends expose the same capability set. Paths on the storage side are
plain POSIX strings; for LocalBackend they are also local paths, for
SSHBackend they name paths on the storage host. Every failure is reported
as StorageError and aborts the calling operation; nothing is retried.
"""

import base64
import os
import shlex
import shutil
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Optional, TYPE_CHECKING

import paramiko
from loguru import logger

from snapvault.system.exceptions import StorageError, ValidationError
from snapvault.system.execution import CommandExecutor as ce

if TYPE_CHECKING:
    from snapvault.config.manager import BackupConfig


METADATA_FILENAME = "info.json"


class Trailing(str, Enum):
    """How mirror_tree treats its source.

    CONTENTS_ONLY mirrors the contents of a source directory into the
    destination directory (rsync's trailing slash); WHOLE_ENTRY copies the
    source itself to the destination path.
    """
    CONTENTS_ONLY = "contents_only"
    WHOLE_ENTRY = "whole_entry"


class MirrorDirection(str, Enum):
    """Which side of a transfer lives on the storage host."""
    PUSH = "push"  # local resource -> storage
    PULL = "pull"  # storage -> local resource


class Backend(ABC):
    """Base class for snapshot storage backends."""

    def __enter__(self) -> "Backend":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release any connection held by the backend."""
        pass

    @abstractmethod
    def list_metadata_files(self, root: str) -> list[str]:
        """Recursively find files named info.json under root. A missing root yields []."""
        raise NotImplementedError("list_metadata_files() not implemented")

    @abstractmethod
    def read_file(self, path: str) -> bytes:
        raise NotImplementedError("read_file() not implemented")

    @abstractmethod
    def write_file(self, path: str, content: bytes) -> None:
        """Write content to path. The parent directory must already exist."""
        raise NotImplementedError("write_file() not implemented")

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create one directory. Fails if anything already exists at path."""
        raise NotImplementedError("mkdir() not implemented")

    @abstractmethod
    def remove_tree(self, path: str) -> None:
        """Recursively and irreversibly remove path."""
        raise NotImplementedError("remove_tree() not implemented")

    @abstractmethod
    def exists(self, path: str) -> bool:
        raise NotImplementedError("exists() not implemented")

    @abstractmethod
    def realpath(self, path: str) -> str:
        """Canonical absolute form of path on the storage side."""
        raise NotImplementedError("realpath() not implemented")

    @abstractmethod
    def mirror_tree(self, src: str, dst: str, direction: MirrorDirection,
                    delete_extraneous: bool = True,
                    trailing: Trailing = Trailing.CONTENTS_ONLY) -> None:
        """Copy src to dst; with delete_extraneous, remove from dst whatever src lacks."""
        raise NotImplementedError("mirror_tree() not implemented")


# ---- Local filesystem ----

def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _copy_entry(src: Path, dst: Path, delete: bool) -> None:
    """Copy src to the literal path dst, replacing what is there."""
    dst_is_dir = dst.is_dir() and not dst.is_symlink()

    if src.is_dir() and not src.is_symlink():
        if os.path.lexists(dst) and not dst_is_dir:
            dst.unlink()
        _sync_directory(src, dst, delete)
        return

    if dst_is_dir:
        if not delete:
            raise StorageError(f"Cannot replace directory {dst} with a file without deleting it", path=str(dst))
        shutil.rmtree(dst)
    elif os.path.lexists(dst):
        dst.unlink()
    shutil.copy2(src, dst, follow_symlinks=False)


def _sync_directory(src: Path, dst: Path, delete: bool) -> None:
    """Populate dst with the contents of src, optionally removing extras."""
    dst.mkdir(exist_ok=True)

    names = set()
    for child in src.iterdir():
        names.add(child.name)
        _copy_entry(child, dst / child.name, delete)

    if delete:
        for child in dst.iterdir():
            if child.name not in names:
                logger.debug(f"Removing extraneous {child}")
                _remove_path(child)


class LocalBackend(Backend):
    """Backend for storage on the local filesystem, using direct filesystem calls."""

    def list_metadata_files(self, root: str) -> list[str]:
        root_path = Path(root)
        if not root_path.is_dir():
            return []
        try:
            return [str(p) for p in root_path.rglob(METADATA_FILENAME) if p.is_file()]
        except OSError as e:
            raise StorageError(f"Failed to list {root}: {e}", path=root) from e

    def read_file(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", path=path) from e

    def write_file(self, path: str, content: bytes) -> None:
        try:
            Path(path).write_bytes(content)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}", path=path) from e

    def mkdir(self, path: str) -> None:
        try:
            Path(path).mkdir()
        except FileExistsError as e:
            raise StorageError(f"Path already exists: {path}", path=path) from e
        except OSError as e:
            raise StorageError(f"Failed to create directory {path}: {e}", path=path) from e

    def remove_tree(self, path: str) -> None:
        target = Path(path)
        if not os.path.lexists(target):
            raise StorageError(f"Path not found: {path}", path=path)
        try:
            _remove_path(target)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}", path=path) from e

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def realpath(self, path: str) -> str:
        return str(Path(path).resolve())

    def mirror_tree(self, src: str, dst: str, direction: MirrorDirection,
                    delete_extraneous: bool = True,
                    trailing: Trailing = Trailing.CONTENTS_ONLY) -> None:
        src_path, dst_path = Path(src), Path(dst)
        if not os.path.lexists(src_path):
            raise StorageError(f"Mirror source not found: {src}", path=src)

        logger.debug(f"Mirroring {src} -> {dst} ({direction.value}, {trailing.value}, delete={delete_extraneous})")
        try:
            if trailing == Trailing.CONTENTS_ONLY:
                if not src_path.is_dir():
                    raise StorageError(f"Mirror source is not a directory: {src}", path=src)
                _sync_directory(src_path, dst_path, delete_extraneous)
            else:
                _copy_entry(src_path, dst_path, delete_extraneous)
        except OSError as e:
            raise StorageError(f"Failed to mirror {src} to {dst}: {e}", path=dst) from e


# ---- Remote over SSH ----

class SSHBackend(Backend):
    """Backend for storage on a remote host reached over SSH.

    One paramiko session is opened on first use and reused for every
    command of the invocation. Tree mirroring runs rsync locally with the
    same authentication settings, wrapped in sshpass for password auth.
    """

    def __init__(self, host: str, port: Optional[int] = None, username: Optional[str] = None,
                 key_path: Optional[Path] = None, password_path: Optional[Path] = None,
                 verbose: bool = False) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.key_path = Path(key_path).expanduser().resolve() if key_path else None
        self.password_path = Path(password_path).expanduser().resolve() if password_path else None
        self.verbose = verbose
        self._client: Optional[paramiko.SSHClient] = None

        if self.password_path and not ce.is_available("sshpass"):
            raise ValidationError("sshpass is not installed, but is required for SSH auth with a password")

    @classmethod
    def from_config(cls, config: "BackupConfig", verbose: bool = False) -> "SSHBackend":
        return cls(
            host=config.storage_host,
            port=config.storage_port,
            username=config.storage_username,
            key_path=config.storage_private_key_path,
            password_path=config.storage_password_path,
            verbose=verbose,
        )

    @property
    def user_host(self) -> str:
        return f"{self.username}@{self.host}" if self.username else self.host

    def _read_password(self) -> str:
        try:
            return self.password_path.read_text().strip()
        except OSError as e:
            raise StorageError(f"Failed to read password file {self.password_path}: {e}") from e

    def _create_ssh_client(self) -> paramiko.SSHClient:
        """Create and connect SSH client with the configured credentials."""
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

        connect_kwargs = {"hostname": self.host, "port": self.port or 22, "timeout": 10}
        if self.username:
            connect_kwargs["username"] = self.username
        if self.key_path:
            connect_kwargs["key_filename"] = str(self.key_path)
        if self.password_path:
            connect_kwargs["password"] = self._read_password()

        try:
            client.connect(**connect_kwargs)
        except paramiko.AuthenticationException as e:
            client.close()
            raise StorageError(f"SSH authentication failed for {self.host}: {e}") from e
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise StorageError(f"SSH connection to {self.host} failed: {e}") from e
        logger.debug(f"Connected to {self.user_host}")
        return client

    @property
    def client(self) -> paramiko.SSHClient:
        if self._client is None:
            self._client = self._create_ssh_client()
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _execute(self, command: str, input_data: Optional[bytes] = None) -> tuple[int, bytes, bytes]:
        """Execute a remote command and return (exit_code, stdout, stderr)."""
        logger.debug(f"[{self.host}] {command}")
        try:
            stdin, stdout, stderr = self.client.exec_command(command)
            if input_data is not None:
                stdin.write(input_data)
                stdin.channel.shutdown_write()
            out = stdout.read()
            err = stderr.read()
            exit_code = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise StorageError(f"SSH command failed on {self.host}: {e}") from e
        return exit_code, out, err

    def _run(self, command: str, path: str, input_data: Optional[bytes] = None) -> bytes:
        exit_code, out, err = self._execute(command, input_data)
        if exit_code != 0:
            detail = err.decode("utf-8", errors="replace").strip() or f"exit code {exit_code}"
            raise StorageError(f"Remote command failed on {self.host}: {detail}", path=path)
        return out

    def list_metadata_files(self, root: str) -> list[str]:
        q = shlex.quote(root)
        # unreadable subdirectories are skipped, like the local rglob does
        out = self._run(f"if [ -d {q} ]; then find {q} -type f -name {METADATA_FILENAME} 2>/dev/null || true; fi", root)
        return [line for line in out.decode("utf-8").splitlines() if line]

    def read_file(self, path: str) -> bytes:
        out = self._run(f"base64 < {shlex.quote(path)}", path)
        return base64.b64decode(out)

    def write_file(self, path: str, content: bytes) -> None:
        self._run(f"base64 -d > {shlex.quote(path)}", path, input_data=base64.b64encode(content) + b"\n")

    def mkdir(self, path: str) -> None:
        self._run(f"mkdir -- {shlex.quote(path)}", path)

    def remove_tree(self, path: str) -> None:
        self._run(f"rm -r -- {shlex.quote(path)}", path)

    def exists(self, path: str) -> bool:
        q = shlex.quote(path)
        exit_code, _, _ = self._execute(f"test -e {q} || test -L {q}")
        return exit_code == 0

    def realpath(self, path: str) -> str:
        return self._run(f"realpath -- {shlex.quote(path)}", path).decode("utf-8").strip()

    def rsync_command(self, src: str, dst: str, direction: MirrorDirection,
                      delete_extraneous: bool = True,
                      trailing: Trailing = Trailing.CONTENTS_ONLY) -> list[str]:
        """Build the rsync command line for a transfer to or from the storage host."""
        if trailing == Trailing.CONTENTS_ONLY:
            src = src.rstrip("/") + "/"
            dst = dst.rstrip("/") + "/"

        if direction == MirrorDirection.PUSH:
            dst = f"{self.user_host}:{dst}"
        else:
            src = f"{self.user_host}:{src}"

        ssh_cmd = ["ssh"]
        if self.port:
            ssh_cmd += ["-p", str(self.port)]
        if self.key_path:
            ssh_cmd += ["-i", str(self.key_path)]

        cmd = []
        if self.password_path:
            cmd += ["sshpass", "-f", str(self.password_path)]
        cmd += ["rsync", "-rlh", "--protect-args"]
        if self.verbose:
            cmd += ["-v", "--progress"]
        if delete_extraneous:
            cmd.append("--delete")
        cmd += ["-e", shlex.join(ssh_cmd), src, dst]
        return cmd

    def mirror_tree(self, src: str, dst: str, direction: MirrorDirection,
                    delete_extraneous: bool = True,
                    trailing: Trailing = Trailing.CONTENTS_ONLY) -> None:
        rsync_cmd = self.rsync_command(src, dst, direction, delete_extraneous, trailing)
        try:
            ce.run_with_progress(rsync_cmd, verbose=self.verbose)
        except ValueError as e:
            raise StorageError(f"rsync operation failed: {e}", path=dst) from e
