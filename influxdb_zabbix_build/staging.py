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
This module recreates the filesystem layout of the installation inside a staging directory, which is then given to
the packager.

In the end, the staging tree will look like:
    <install_root>/versions/<version>/<binaries>       -- The agent executables.
    <install_root>/versions/<version>/scripts/         -- The systemd unit and the init.d script.
    <config_root>/<config_file>                        -- The configuration file.
    <log_dir>/                                         -- Empty log directory.
    <registry_root>/                                   -- Empty registry directory.
    <logrotate_dir>/<name>                             -- The logrotate configuration.
"""

import logging
import pathlib as pl
import shutil
from typing import Union

from influxdb_zabbix_build.config import PackageSpec
from influxdb_zabbix_build.errors import StagingError


def staged_path(work_dir: Union[str, pl.Path], target_path: str) -> pl.Path:
    """
    Return the path inside the staging directory which corresponds to the absolute path on the target machine.
    """
    return pl.Path(work_dir) / target_path.lstrip("/")


class StagingTree:
    def __init__(
            self,
            work_dir: Union[str, pl.Path],
            package_spec: PackageSpec,
            version: str,
    ):
        self.work_dir = pl.Path(work_dir)
        self._spec = package_spec
        self.version = version

    @property
    def versioned_install_path(self) -> pl.Path:
        return staged_path(self.work_dir, self._spec.versioned_install_dir(self.version))

    @property
    def scripts_path(self) -> pl.Path:
        return self.versioned_install_path / "scripts"

    @property
    def config_path(self) -> pl.Path:
        return staged_path(self.work_dir, self._spec.config_root_dir)

    @property
    def log_path(self) -> pl.Path:
        return staged_path(self.work_dir, self._spec.log_dir)

    @property
    def registry_path(self) -> pl.Path:
        return staged_path(self.work_dir, self._spec.registry_root_dir)

    @property
    def logrotate_path(self) -> pl.Path:
        return staged_path(self.work_dir, self._spec.logrotate_dir)

    def make_dir_tree(self):
        """
        Create the directory structure within the packages.
        """
        directories = [
            ("installation", self.scripts_path),
            ("configuration", self.config_path),
            ("log", self.log_path),
            ("registry", self.registry_path),
            ("log rotate temporary", self.logrotate_path),
        ]

        for kind, path in directories:
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StagingError(f"Failed to create {kind} directory -- aborting.") from e

    @staticmethod
    def _copy(source: pl.Path, destination: pl.Path, what: str):
        try:
            shutil.copy2(source, destination)
        except OSError as e:
            raise StagingError(f"Failed to copy {what} to packaging directory -- aborting.") from e

        logging.info(f"{source} copied to {destination}")

    def populate(
            self,
            source_root: Union[str, pl.Path],
            bin_path: Union[str, pl.Path],
    ):
        """
        Copy the assets to the installation directories.
        :param source_root: Root of the source tree with the service scripts and the logrotate configuration.
        :param bin_path: Directory where the build step has put the binaries and the configuration file.
        """
        source_root = pl.Path(source_root)
        bin_path = pl.Path(bin_path)

        for binary_name in self._spec.binaries:
            self._copy(bin_path / binary_name, self.versioned_install_path, "binaries")

        self._copy(bin_path / self._spec.config_file, self.config_path, "configuration file")

        self._copy(source_root / self._spec.systemd_script, self.scripts_path, "systemd file")
        self._copy(source_root / self._spec.initd_script, self.scripts_path, "init.d script")

        self._copy(
            source_root / self._spec.logrotate_configuration,
            self.logrotate_path / self._spec.name,
            self._spec.logrotate_configuration,
        )

    def stage(
            self,
            source_root: Union[str, pl.Path],
            bin_path: Union[str, pl.Path],
    ):
        self.make_dir_tree()
        self.populate(source_root=source_root, bin_path=bin_path)
