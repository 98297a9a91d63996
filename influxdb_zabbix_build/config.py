# Copyright 2014-2021 Scalyr Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
This module defines the constants of the influxdb-zabbix packages: the filesystem layout on the target machine,
the package metadata and the files of the source tree that are put into the packages.
"""

import dataclasses
import logging
import pathlib as pl
from typing import List, Union

import yaml

from influxdb_zabbix_build.errors import ConfigurationError


@dataclasses.dataclass
class PackageSpec:
    name: str = "influxdb-zabbix"

    # Layout of the installation on the target machine.
    install_root_dir: str = "/opt/influxdb-zabbix"
    config_root_dir: str = "/etc/influxdb-zabbix"
    config_file: str = "influxdb-zabbix.conf"
    log_dir: str = "/var/log/influxdb-zabbix"
    registry_root_dir: str = "/var/lib/influxdb-zabbix"
    registry_file: str = "influxdb-zabbix.json"
    logrotate_dir: str = "/etc/logrotate.d"

    # Files of the source tree, relative to its root.
    logrotate_configuration: str = "scripts/influxdb-zabbix"
    initd_script: str = "scripts/init.sh"
    systemd_script: str = "scripts/influxdb-zabbix.service"

    # Package metadata.
    license: str = "MIT"
    url: str = "https://github.com/voyagerwoo/influxdb-zabbix"
    maintainer: str = "sqlzen@hotmail.com"
    vendor: str = "sqlzenmonitor"
    description: str = "Gather data from Zabbix back-end and load to InfluxDB in near real-time"
    depends: List[str] = dataclasses.field(default_factory=lambda: ["coreutils"])

    # Binaries produced by the 'go install' and the linker symbol which receives the version.
    binaries: List[str] = dataclasses.field(default_factory=lambda: ["influxdb-zabbix"])
    version_symbol: str = "main.Version"

    @property
    def user(self) -> str:
        """The system user and group which owns the installation."""
        return self.name

    def versioned_install_dir(self, version: str) -> str:
        return f"{self.install_root_dir.rstrip('/')}/versions/{version}"

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls)]


def load_package_spec(config_path: Union[str, pl.Path] = None) -> PackageSpec:
    """
    Create the package spec. Values from the optional YAML file override the defaults.
    :param config_path: Path to the YAML file with a mapping of the spec fields.
    """
    if config_path is None:
        return PackageSpec()

    config_path = pl.Path(config_path)

    try:
        content = yaml.safe_load(config_path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Unable to read package config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Package config {config_path} is not a valid YAML: {e}") from e

    if content is None:
        content = {}

    if not isinstance(content, dict):
        raise ConfigurationError(f"Package config {config_path} has to be a mapping.")

    unknown = sorted(set(content) - set(PackageSpec.field_names()))
    if unknown:
        raise ConfigurationError(
            f"Unknown options in package config {config_path}: {', '.join(str(u) for u in unknown)}"
        )

    for list_field in ("depends", "binaries"):
        value = content.get(list_field)
        if isinstance(value, str):
            content[list_field] = [value]

    for key, value in content.items():
        if key in ("depends", "binaries"):
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigurationError(
                    f"Option '{key}' in package config {config_path} has to be a list of strings."
                )
        elif not isinstance(value, str):
            raise ConfigurationError(
                f"Option '{key}' in package config {config_path} has to be a string."
            )

    logging.info(f"Using package config {config_path}.")
    return PackageSpec(**content)
