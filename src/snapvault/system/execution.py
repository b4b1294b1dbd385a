# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/system/execution.py

"""Local command execution for rsync, sshpass, getfacl and setfacl."""

import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger


@dataclass
class CommandResult:
    """Outcome of a finished command."""
    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandExecutor:
    """Runs commands on the local machine. Failures raise ValueError when check=True."""

    @staticmethod
    def is_available(program: str) -> bool:
        """True if `program` can be found on PATH."""
        return shutil.which(program) is not None

    @staticmethod
    def run_local(cmd: list[str], check: bool = True, timeout: Optional[int] = None,
                  cwd: Optional[Path] = None) -> CommandResult:
        """Run a command and capture its output."""
        logger.debug(f"Running: {shlex.join(cmd)}" + (f" (in {cwd})" if cwd else ""))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, cwd=cwd)
        except OSError as e:
            raise ValueError(f"Cannot run {cmd[0]}: {e}") from e

        result = CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
        if check and not result.success:
            if result.stderr.strip():
                raise ValueError(f"Local command failed: {result.stderr.strip()}")
            raise ValueError(f"Command failed with exit code {result.returncode}")
        return result

    @staticmethod
    def run_with_progress(cmd: list[str], verbose: bool = False) -> CommandResult:
        """Run a long transfer command.

        In verbose mode the command writes straight to the terminal so rsync
        progress is visible; otherwise output is captured and only logged.
        """
        logger.debug(f"Running: {shlex.join(cmd)}")
        try:
            if verbose:
                proc = subprocess.run(cmd)
            else:
                proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ValueError(f"Cannot run {cmd[0]}: {e}") from e

        if verbose:
            result = CommandResult(returncode=proc.returncode, stdout="", stderr="")
        else:
            result = CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
            if result.stdout:
                logger.debug(result.stdout.rstrip())

        if not result.success:
            detail = result.stderr.strip() or f"exit code {result.returncode}"
            raise ValueError(f"Command failed: {detail}")
        return result
