# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py

"""
Shared test fixtures for the snapvault test suite.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import orjson
import pytest
from loguru import logger

from snapvault.config.manager import BackupConfig
from snapvault.core import lifecycle


@pytest.fixture(autouse=True)
def reset_loguru():
    """Put loguru back to a single stderr handler after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def storage_dir(tmp_path) -> Path:
    path = tmp_path / "storage"
    path.mkdir()
    return path


@pytest.fixture
def resource_dir(tmp_path) -> Path:
    """A small directory resource with text, binary and nested content."""
    path = tmp_path / "resource"
    path.mkdir()
    (path / "a.txt").write_text("alpha\nsecond line\n")
    (path / "sub").mkdir()
    (path / "sub" / "b.bin").write_bytes(bytes(range(256)))
    return path


@pytest.fixture
def resource_file(tmp_path) -> Path:
    path = tmp_path / "notes.txt"
    path.write_bytes(b"line one\nline two\x00\xff\n")
    return path


@pytest.fixture
def make_config(storage_dir):
    """Build a local BackupConfig; keyword arguments override the defaults."""
    def _make(**overrides) -> BackupConfig:
        data = {
            "type": "local",
            "name": "docs",
            "description": "test backups",
            "acl": False,
            "resource_type": "directory",
            "resource_path": "resource",
            "storage_path": str(storage_dir),
        }
        data.update(overrides)
        return BackupConfig.from_data(data)
    return _make


@pytest.fixture
def dir_config(make_config, resource_dir) -> BackupConfig:
    return make_config(resource_path=str(resource_dir))


@pytest.fixture
def file_config(make_config, resource_file) -> BackupConfig:
    return make_config(resource_type="file", resource_path=str(resource_file))


@pytest.fixture
def write_info(storage_dir):
    """Write an info.json (dict, or raw bytes) into storage_dir/<dirname>."""
    def _write(dirname: str, data) -> Path:
        backup_dir = storage_dir / dirname
        backup_dir.mkdir(parents=True, exist_ok=True)
        content = data if isinstance(data, bytes) else orjson.dumps(data)
        (backup_dir / "info.json").write_bytes(content)
        return backup_dir
    return _write


class FakeClock:
    """Stands in for the wall clock used when naming snapshots."""

    def __init__(self, start: datetime):
        self.now = start

    def advance(self, seconds: float = 1.0) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock(datetime(2024, 3, 9, 7, 5, 1, 250000))
    monkeypatch.setattr(lifecycle, "_now", lambda: fake.now)
    monkeypatch.setattr(lifecycle.time, "sleep", fake.advance)
    return fake
