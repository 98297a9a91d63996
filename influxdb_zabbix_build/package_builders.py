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
This module defines the packages of the influxdb-zabbix and how they are produced from the staging tree by the 'fpm'
packager.
"""

import abc
import logging
import pathlib as pl
import subprocess
from typing import List, Union

from influxdb_zabbix_build.config import PackageSpec
from influxdb_zabbix_build.errors import PackagingToolError
from influxdb_zabbix_build.tools import common
from influxdb_zabbix_build.tools import constants


class FpmBasedPackageBuilder(abc.ABC):
    """
    Base builder for packages which are produced by the 'fpm' packager.
    """

    # Type of the package to build.
    PACKAGE_TYPE: constants.PackageType

    # Human readable name of the package type for the log messages.
    DISPLAY_NAME: str

    def __init__(
            self,
            package_spec: PackageSpec,
            version: str,
            architecture: constants.Architecture,
    ):
        self._spec = package_spec
        self.version = version
        self.architecture = architecture

    @property
    def package_arch_name(self) -> str:
        return constants.PACKAGE_FILENAME_ARCHITECTURE_NAMES[type(self).PACKAGE_TYPE][self.architecture]

    @property
    @abc.abstractmethod
    def filename(self) -> str:
        """
        File name of the result package.
        """
        pass

    def _command_prefix(self) -> List[str]:
        return []

    def _fpm_type_args(self) -> List[str]:
        return []

    def get_fpm_command(
            self,
            staging_path: Union[str, pl.Path],
            postinstall_path: Union[str, pl.Path],
    ) -> List[str]:
        depends_args = []
        for dependency in self._spec.depends:
            depends_args.extend(["--depends", dependency])

        # fmt: off
        return [
            *self._command_prefix(),
            "fpm",
            "-s", "dir",
            "-t", type(self).PACKAGE_TYPE.value,
            *self._fpm_type_args(),
            "--description", self._spec.description,
            "-C", str(staging_path),
            "--vendor", self._spec.vendor,
            "--url", self._spec.url,
            "--license", self._spec.license,
            "--maintainer", self._spec.maintainer,
            "--after-install", str(postinstall_path),
            "--name", self._spec.name,
            "--provides", self._spec.name,
            "--version", self.version,
            *depends_args,
            "--config-files", self._spec.config_root_dir,
            "--package", f"./{self.filename}",
        ]
        # fmt: on

    def build(
            self,
            staging_path: Union[str, pl.Path],
            postinstall_path: Union[str, pl.Path],
            output_path: Union[str, pl.Path],
    ) -> pl.Path:
        """
        Build the package from the staging directory.
        :param staging_path: Directory with the filesystem layout of the package.
        :param postinstall_path: Script which has to be run by the package manager after installation.
        :param output_path: The directory where the result package is stored.
        :return: Path to the result package.
        """
        output_path = pl.Path(output_path)

        try:
            common.check_call_with_log(
                self.get_fpm_command(
                    staging_path=staging_path,
                    postinstall_path=postinstall_path,
                ),
                cwd=str(output_path),
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise PackagingToolError(
                f"Failed to create {type(self).DISPLAY_NAME} package -- aborting."
            ) from e

        logging.info(f"{type(self).DISPLAY_NAME} package created successfully.")
        return output_path / self.filename


class RpmPackageBuilder(FpmBasedPackageBuilder):
    PACKAGE_TYPE = constants.PackageType.RPM
    DISPLAY_NAME = "RPM"

    @property
    def filename(self) -> str:
        return f"{self._spec.name}-{self.version}-1.{self.package_arch_name}.rpm"

    def _command_prefix(self) -> List[str]:
        setarch_name = self.architecture.setarch_name
        if setarch_name:
            return ["setarch", setarch_name]
        return []


class DebPackageBuilder(FpmBasedPackageBuilder):
    PACKAGE_TYPE = constants.PackageType.DEB
    DISPLAY_NAME = "Debian"

    @property
    def filename(self) -> str:
        return f"{self._spec.name}_{self.version}_{self.package_arch_name}.deb"

    def _fpm_type_args(self) -> List[str]:
        if self.architecture == constants.Architecture.I686:
            return ["-a", self.package_arch_name]
        return []


# Packages are produced in this order.
PACKAGE_BUILDERS = [RpmPackageBuilder, DebPackageBuilder]
