import pathlib as pl
import subprocess
import tempfile
from typing import List

import mock
import pytest

from influxdb_zabbix_build.config import PackageSpec


class FakeCommands:
    """
    Replacement for the external tools (git, go, fpm). It records every executed command and imitates the
    side effects that the packaging relies on.
    """

    def __init__(self, source_root: pl.Path, gopath: pl.Path):
        self.source_root = source_root
        self.gopath = gopath
        self.calls: List[List[str]] = []
        self.describe_output = "v1.2.3"
        self.modified_files = ""
        self.failing = set()

    def _fail_if_needed(self, cmd: List[str]):
        for name in self.failing:
            if name in cmd:
                raise subprocess.CalledProcessError(returncode=1, cmd=cmd)

    def check_output(self, cmd, *args, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        self._fail_if_needed(cmd)

        if cmd[:2] == ["git", "describe"]:
            output = self.describe_output
        elif cmd[:3] == ["git", "rev-parse", "HEAD"]:
            output = "0123456789abcdef"
        elif cmd[:3] == ["git", "rev-parse", "--show-toplevel"]:
            output = str(self.source_root)
        elif cmd[:2] == ["git", "ls-files"]:
            output = self.modified_files
        else:
            output = ""

        return f"{output}\n".encode()

    def check_call(self, cmd, *args, cwd=None, **kwargs):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        self._fail_if_needed(cmd)

        if cmd[0] == "go":
            bin_path = self.gopath / "bin"
            bin_path.mkdir(parents=True, exist_ok=True)
            (bin_path / "influxdb-zabbix").write_text("binary")
        elif "fpm" in cmd:
            package_name = cmd[cmd.index("--package") + 1]
            (pl.Path(cwd) / package_name).write_text("package")

        return 0

    def commands(self, program: str) -> List[List[str]]:
        return [c for c in self.calls if program in c]


@pytest.fixture
def package_spec():
    return PackageSpec()


@pytest.fixture
def source_root(tmp_path):
    path = tmp_path / "influxdb-zabbix"
    scripts_path = path / "scripts"
    scripts_path.mkdir(parents=True)

    (path / "influxdb-zabbix.conf").write_text("[zabbix]\n")
    (scripts_path / "init.sh").write_text("#!/bin/sh\n")
    (scripts_path / "influxdb-zabbix.service").write_text("[Unit]\n")
    (scripts_path / "influxdb-zabbix").write_text("/var/log/influxdb-zabbix/*.log {}\n")
    return path


@pytest.fixture
def gopath(tmp_path):
    path = tmp_path / "go"
    path.mkdir()
    return path


@pytest.fixture
def temp_root(tmp_path, monkeypatch):
    """
    Directory for all temporary files of the packaging, so tests can check that nothing is left there.
    """
    path = tmp_path / "tmp"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


@pytest.fixture
def output_path(tmp_path):
    return tmp_path / "output"


@pytest.fixture
def fake_commands(source_root, gopath):
    commands = FakeCommands(source_root=source_root, gopath=gopath)

    with mock.patch(
        "influxdb_zabbix_build.tools.common.check_output_with_log",
        side_effect=commands.check_output,
    ), mock.patch(
        "influxdb_zabbix_build.tools.common.check_call_with_log",
        side_effect=commands.check_call,
    ):
        yield commands
