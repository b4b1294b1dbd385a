# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_logging_setup.py

from unittest.mock import patch

import pytest
from loguru import logger

from snapvault.system.logging_setup import console_level, enable_file_logging, setup_logging


@pytest.mark.parametrize("verbose,debug,level", [
    (False, False, "WARNING"),
    (True, False, "INFO"),
    (False, True, "DEBUG"),
    (True, True, "DEBUG"),
])
def test_console_level(verbose, debug, level):
    assert console_level(verbose, debug) == level


class TestSetupLogging:
    def test_default_hides_info(self, capsys):
        setup_logging()
        logger.info("Invalid archive: /srv/x/info.json")
        logger.warning("something odd")

        err = capsys.readouterr().err
        assert "Invalid archive" not in err
        assert "something odd" in err

    def test_verbose_shows_info(self, capsys):
        setup_logging(verbose=True)
        logger.info("Invalid archive: /srv/x/info.json")
        logger.debug("Running: rsync")

        err = capsys.readouterr().err
        assert "Invalid archive: /srv/x/info.json" in err
        assert "Running: rsync" not in err

    def test_debug_shows_everything(self, capsys):
        setup_logging(debug=True)
        logger.debug("Running: rsync")

        assert "Running: rsync" in capsys.readouterr().err


class TestFileLogging:
    def test_no_log_dir_adds_nothing(self, make_config):
        with patch.object(logger, "add") as add:
            enable_file_logging(make_config())
        add.assert_not_called()

    def test_log_file_written(self, make_config, tmp_path):
        log_dir = tmp_path / "logs"
        enable_file_logging(make_config(local_log=str(log_dir)))

        logger.debug("hello from the file log")
        logger.remove()

        log_file = log_dir / "snapvault-docs.log"
        assert log_file.exists()
        assert "hello from the file log" in log_file.read_text()

    def test_failure_is_a_warning(self, make_config, tmp_path, capsys):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("x")
        setup_logging()

        enable_file_logging(make_config(local_log=str(blocker / "logs")))

        assert "Failed to setup file logging" in capsys.readouterr().err
