import logging
import subprocess
import sys

import pytest

from influxdb_zabbix_build.tools import common


def test_command_is_logged(caplog):
    with caplog.at_level(logging.INFO):
        output = common.check_output_with_log([sys.executable, "-c", "print('hello')"])

    assert output.decode().strip() == "hello"
    assert "### RUN COMMAND #" in caplog.text
    assert "print('hello')" in caplog.text


def test_failed_command_is_logged(caplog):
    with caplog.at_level(logging.INFO):
        with pytest.raises(subprocess.CalledProcessError):
            common.check_call_with_log([sys.executable, "-c", "raise SystemExit(3)"])

    assert "FAILED" in caplog.text


def test_get_option(monkeypatch):
    monkeypatch.setenv("CIRCLE_BRANCH", "master")
    assert common.get_option("circle_branch") == "master"

    monkeypatch.setenv("CIRCLE_BRANCH", "")
    assert common.get_option("circle_branch", "default") == "default"

    monkeypatch.delenv("CIRCLE_BRANCH")
    assert common.get_option("circle_branch") is None


def test_missing_program_is_logged(caplog, tmp_path):
    with caplog.at_level(logging.INFO):
        with pytest.raises(OSError):
            common.check_call_with_log([str(tmp_path / "no-such-program")])

    assert "FAILED to start" in caplog.text
