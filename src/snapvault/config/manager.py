# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/snapvault/config/manager.py

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Final, Literal, Optional

import orjson
import pydantic
import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from snapvault.system.exceptions import ConfigError, ValidationError


# ---- Constants ----

CONFIG_ENV: Final = "BACKUP_CONFIG"
DEFAULT_CONFIG: Final = "backup.json"

# (key, type, description) for every key of the configuration file
CONFIG_FIELDS: Final[tuple[tuple[str, str, str], ...]] = (
    (".", "object", "Backup configuration"),
    (".type", "string", "Backup storage type (local, or remote/ssh)"),
    (".name", "string", "Backup name, the base of every snapshot name and group"),
    (".acl", "bool", "Whether access control lists, i.e. permissions, are backed up"),
    (".description", "string", "Backup description, purely informative"),
    (".resource_type", "string", "Backup resource type (file or directory)"),
    (".resource_path", "string", "Path to the backup resource"),
    (".storage_path", "string", "Path of the directory where backups are stored"),
    (".storage_host", "string", "[Remote] Storage server hostname"),
    (".storage_port", "int", "[Remote] Storage server SSH port"),
    (".storage_username", "string", "[Remote] Storage server username"),
    (".storage_private_key_path", "string", "[Remote] Path to the storage server private key"),
    (".storage_password_path", "string", "[Remote] Path to a file holding the storage server password"),
    (".local_log", "string", "Directory for a debug log file (optional)"),
)


def default_config_path() -> Path:
    """Config path from BACKUP_CONFIG, evaluated at call time rather than import time."""
    return Path(os.getenv(CONFIG_ENV) or DEFAULT_CONFIG)


def _strip_trailing_slash(value: Any) -> Any:
    if isinstance(value, (str, Path)):
        text = str(value)
        if len(text) > 1:
            text = text.rstrip("/") or "/"
        return text
    return value


def _read_config_data(config_path: Path) -> dict:
    """Parse a JSON or YAML config file into a dict."""
    raw = config_path.read_bytes()

    data = None
    if config_path.suffix.lower() == ".json":
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {config_path}: {e}") from e
    else:
        # YAML is a superset of JSON, so this also covers JSON without the suffix
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Configuration in {config_path} must be an object")
    return data


class BackupConfig(BaseModel):
    """Immutable description of one backup target and where its snapshots live."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: Literal["local", "remote"]
    name: str = Field(min_length=1)
    description: str = ""
    acl: bool = False
    resource_type: Literal["file", "directory"]
    resource_path: Path
    storage_path: str  # may name a path on the storage host

    # Remote storage connection
    storage_host: Optional[str] = None
    storage_port: Optional[int] = None
    storage_username: Optional[str] = None
    storage_private_key_path: Optional[Path] = None
    storage_password_path: Optional[Path] = None

    local_log: Optional[Path] = None

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        """Accept the legacy 'ssh' spelling for remote storage."""
        if value == "ssh":
            return "remote"
        if value not in ("local", "remote"):
            raise ValueError(f"Unknown backup type '{value}'")
        return value

    @field_validator("resource_type", mode="before")
    @classmethod
    def check_resource_type(cls, value: Any) -> Any:
        if value not in ("file", "directory"):
            raise ValueError(f"Unknown backup resource type '{value}'")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def null_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("resource_path", "storage_path", mode="before")
    @classmethod
    def strip_slash(cls, value: Any) -> Any:
        return _strip_trailing_slash(value)

    @model_validator(mode="after")
    def validate_remote(self) -> "BackupConfig":
        if self.type == "remote" and not self.storage_host:
            raise ValueError("Hostname (storage_host) is required for remote storage")
        return self

    @property
    def is_remote(self) -> bool:
        return self.type == "remote"

    @classmethod
    def from_data(cls, data: dict) -> "BackupConfig":
        """Validate raw config data, reporting problems as ValidationError."""
        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ValidationError(f"Invalid configuration: {problems}") from e

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "BackupConfig":
        """Load the configuration from a JSON or YAML file."""
        config_path = Path(config_path) if config_path else default_config_path()
        if not config_path.is_file():
            raise ConfigError(f"Configuration file '{config_path}' doesn't exist")

        data = _read_config_data(config_path)
        config = cls.from_data(data)
        logger.debug(f"Loaded config '{config.name}' from {config_path}")
        return config

    def dump_json(self) -> bytes:
        """The parsed configuration as indented JSON."""
        return orjson.dumps(self.model_dump(mode="json"), option=orjson.OPT_INDENT_2)


# done.
