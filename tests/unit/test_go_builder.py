import pytest

from influxdb_zabbix_build import go_builder
from influxdb_zabbix_build.errors import BuildEnvironmentError, BuildError


class TestCheckGopath:
    def test_not_set(self, monkeypatch):
        monkeypatch.delenv("GOPATH", raising=False)
        with pytest.raises(BuildEnvironmentError, match="GOPATH is not set"):
            go_builder.check_gopath()

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(BuildEnvironmentError, match="not a directory"):
            go_builder.check_gopath(str(tmp_path / "missing"))

    def test_first_entry_is_used(self, gopath, tmp_path):
        assert go_builder.check_gopath(f"{gopath}:{tmp_path / 'missing'}") == gopath

    def test_from_environment(self, gopath, monkeypatch):
        monkeypatch.setenv("GOPATH", str(gopath))
        assert go_builder.check_gopath() == gopath


@pytest.fixture
def builder(package_spec, source_root, gopath):
    return go_builder.GoBinaryBuilder(
        package_spec=package_spec,
        source_root=source_root,
        gopath_install=gopath,
    )


def test_build(fake_commands, builder, gopath):
    stale_binary = gopath / "bin" / "influxdb-zabbix"
    stale_binary.parent.mkdir()
    stale_binary.write_text("stale")

    builder.build("1.2.3")

    assert fake_commands.commands("go") == [
        ["go", "install", "-ldflags=-X main.Version=1.2.3", "./..."]
    ]
    assert stale_binary.read_text() == "binary"
    assert (gopath / "bin" / "influxdb-zabbix.conf").read_text() == "[zabbix]\n"


def test_compile_failure(fake_commands, builder, gopath):
    fake_commands.failing.add("go")
    with pytest.raises(BuildError, match="Build failed"):
        builder.build("1.2.3")
    assert not (gopath / "bin" / "influxdb-zabbix.conf").exists()


def test_missing_config_file(fake_commands, builder, source_root):
    (source_root / "influxdb-zabbix.conf").unlink()
    with pytest.raises(BuildError, match="configuration file"):
        builder.build("1.2.3")
