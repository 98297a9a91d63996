import pytest

from influxdb_zabbix_build import version
from influxdb_zabbix_build.errors import BuildEnvironmentError, VersionResolutionError


def test_explicit_version_is_used_verbatim(fake_commands, source_root):
    assert version.resolve_version("2.0.0-beta+weird name", source_root) == "2.0.0-beta+weird name"
    assert fake_commands.calls == []


def test_leading_v_is_stripped_from_tag(fake_commands, source_root):
    assert version.resolve_version(None, source_root) == "1.2.3"
    assert fake_commands.calls == [["git", "describe", "--always", "--tags"]]


def test_only_leading_v_is_stripped(fake_commands, source_root):
    fake_commands.describe_output = "v1.2.3-4-gdev"
    assert version.resolve_version(None, source_root) == "1.2.3-4-gdev"


def test_untagged_commit_hash(fake_commands, source_root):
    fake_commands.describe_output = "0123abc"
    assert version.resolve_version(None, source_root) == "0123abc"


def test_git_failure(fake_commands, source_root):
    fake_commands.failing.add("describe")
    with pytest.raises(VersionResolutionError):
        version.resolve_version(None, source_root)


def test_source_root(fake_commands, tmp_path, source_root):
    assert version.get_source_root(tmp_path) == source_root


def test_commit_failure(fake_commands, source_root):
    fake_commands.failing.add("HEAD")
    with pytest.raises(VersionResolutionError, match="commit"):
        version.get_commit(source_root)


class TestCleanTree:
    def test_clean(self, fake_commands, source_root):
        version.check_clean_tree(source_root)

    def test_modified(self, fake_commands, source_root):
        fake_commands.modified_files = "main.go"
        with pytest.raises(BuildEnvironmentError, match="not clean"):
            version.check_clean_tree(source_root)
