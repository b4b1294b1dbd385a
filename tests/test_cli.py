# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_cli.py

"""Test suite for CLI functionality."""

import shutil
from pathlib import Path

import orjson
import pytest
from typer.testing import CliRunner

from snapvault.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, resource_dir, storage_dir) -> Path:
    path = tmp_path / "backup.json"
    path.write_bytes(orjson.dumps({
        "type": "local",
        "name": "docs",
        "description": "cli backups",
        "resource_type": "directory",
        "resource_path": str(resource_dir),
        "storage_path": str(storage_dir),
    }))
    return path


@pytest.fixture
def invoke(config_file):
    def _invoke(*args: str):
        return runner.invoke(app, list(args), env={"BACKUP_CONFIG": str(config_file)})
    return _invoke


def flat(result) -> str:
    """Console output with line wrapping undone."""
    return " ".join(result.stdout.split())


def json_output(result):
    assert result.exit_code == 0, result.output
    return orjson.loads(result.stdout)


class TestCatalogCommands:
    def test_get_empty(self, invoke):
        result = invoke("get")
        assert result.exit_code == 0
        assert "No backups found" in flat(result)

    def test_get_json(self, invoke, clock):
        invoke("create", "groups", "weekly")

        summaries = json_output(invoke("get", "--json"))

        assert summaries == [{
            "name": "docs-2024-03-09-07-05-01",
            "created_at": "2024-03-09-07-05-01",
            "groups": ["docs", "2024-03-09-07-05-01", "weekly"],
        }]

    def test_get_filtered_by_group(self, invoke, clock):
        invoke("create", "groups", "weekly")
        clock.advance(60)
        invoke("create")

        assert [s["name"] for s in json_output(invoke("get", "groups", "weekly", "--json"))] == [
            "docs-2024-03-09-07-05-01"
        ]
        assert len(json_output(invoke("get", "--json"))) == 2

    def test_describe_json(self, invoke, clock, storage_dir):
        invoke("create")

        [described] = json_output(invoke("describe", "name", "docs-2024-03-09-07-05-01", "--json"))

        assert described["description"] == "cli backups"
        assert described["acl"] is False
        assert described["meta"]["backup_path"] == str(storage_dir / "docs-2024-03-09-07-05-01")

    def test_invalid_filter(self, invoke):
        result = invoke("get", "tags", "x")

        assert result.exit_code == 1
        assert "Invalid filter 'tags'" in flat(result)

    def test_filter_without_value(self, invoke):
        result = invoke("get", "groups")

        assert result.exit_code == 1
        assert "no filter value provided" in flat(result)


class TestBackupCommands:
    def test_create(self, invoke, clock, storage_dir):
        result = invoke("create")

        assert result.exit_code == 0, result.output
        assert "Created backup docs-2024-03-09-07-05-01" in flat(result)
        assert (storage_dir / "docs-2024-03-09-07-05-01" / "info.json").exists()

    def test_create_rejects_name_option(self, invoke, storage_dir):
        result = invoke("create", "name", "x")

        assert result.exit_code == 1
        assert "Invalid filter 'name'" in flat(result)
        assert list(storage_dir.iterdir()) == []

    def test_create_missing_resource(self, invoke, resource_dir):
        shutil.rmtree(resource_dir)

        result = invoke("create")

        assert result.exit_code == 1
        assert "doesn't exist" in flat(result)

    def test_restore_latest(self, invoke, clock, resource_dir):
        invoke("create")
        (resource_dir / "a.txt").write_text("changed")
        clock.advance(5)
        invoke("create", "--quiet")
        (resource_dir / "a.txt").write_text("broken")
        (resource_dir / "junk.txt").write_text("junk")

        result = invoke("restore")

        assert result.exit_code == 0, result.output
        assert "docs-2024-03-09-07-05-06" in flat(result)
        assert (resource_dir / "a.txt").read_text() == "changed"
        assert not (resource_dir / "junk.txt").exists()

    def test_restore_by_name(self, invoke, clock, resource_dir):
        invoke("create")
        (resource_dir / "a.txt").write_text("changed")
        clock.advance(5)
        invoke("create")

        result = invoke("restore", "name", "docs-2024-03-09-07-05-01", "--quiet")

        assert result.exit_code == 0, result.output
        assert (resource_dir / "a.txt").read_text() == "alpha\nsecond line\n"

    def test_restore_nothing(self, invoke):
        result = invoke("restore")

        assert result.exit_code == 1
        assert "No backup to restore from" in flat(result)

    def test_delete_by_group(self, invoke, clock, storage_dir):
        invoke("create", "groups", "old")
        clock.advance(1)
        invoke("create", "groups", "old")
        clock.advance(1)
        invoke("create")

        deleted = json_output(invoke("delete", "groups", "old", "--json"))

        assert deleted == ["docs-2024-03-09-07-05-01", "docs-2024-03-09-07-05-02"]
        assert [p.name for p in storage_dir.iterdir()] == ["docs-2024-03-09-07-05-03"]

    def test_delete_nothing_matched(self, invoke):
        result = invoke("delete", "groups", "none")

        assert result.exit_code == 0
        assert "nothing deleted" in flat(result)


class TestConfigCommands:
    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["get"], env={"BACKUP_CONFIG": str(tmp_path / "nope.json")})

        assert result.exit_code == 1
        assert "Configuration error" in flat(result)

    def test_config_option_overrides_env(self, config_file, tmp_path):
        result = runner.invoke(
            app, ["--config", str(config_file), "get", "--json"],
            env={"BACKUP_CONFIG": str(tmp_path / "nope.json")},
        )

        assert json_output(result) == []

    def test_dump(self, invoke, resource_dir):
        dumped = json_output(invoke("dump"))

        assert dumped["name"] == "docs"
        assert dumped["type"] == "local"
        assert dumped["resource_path"] == str(resource_dir)

    def test_help_config(self):
        result = runner.invoke(app, ["help-config"])

        assert result.exit_code == 0
        assert ".storage_host" in flat(result)


def test_bracketed_names_print_literally(tmp_path, storage_dir, clock):
    resource = tmp_path / "res[old]"
    resource.mkdir()
    (resource / "a.txt").write_text("alpha")
    config_file = tmp_path / "bracket.json"
    config_file.write_bytes(orjson.dumps({
        "type": "local",
        "name": "docs[v1]",
        "resource_type": "directory",
        "resource_path": str(resource),
        "storage_path": str(storage_dir),
    }))
    env = {"BACKUP_CONFIG": str(config_file)}

    created = runner.invoke(app, ["create"], env=env)
    restored = runner.invoke(app, ["restore"], env=env)
    deleted = runner.invoke(app, ["delete", "groups", "docs[v1]"], env=env)

    assert created.exit_code == 0, created.output
    assert "Created backup docs[v1]-2024-03-09-07-05-01" in flat(created)
    assert restored.exit_code == 0, restored.output
    assert "res[old]" in "".join(restored.stdout.splitlines())
    assert "from docs[v1]-2024-03-09-07-05-01" in flat(restored)
    assert deleted.exit_code == 0, deleted.output
    assert "Deleted backup docs[v1]-2024-03-09-07-05-01" in flat(deleted)
