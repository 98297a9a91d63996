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

import logging
import pathlib as pl
import shutil
import subprocess
from typing import Union

from influxdb_zabbix_build import version as version_tools
from influxdb_zabbix_build.config import PackageSpec
from influxdb_zabbix_build.errors import BuildEnvironmentError, BuildError
from influxdb_zabbix_build.tools import common


def check_gopath(gopath: str = None) -> pl.Path:
    """
    Sanity check of the GOPATH and find the path where the build artifacts are installed.
    GOPATH may be a colon-delimited list of directories, the first one is used.
    :param gopath: Value of the GOPATH. If None, it is taken from the environment.
    """
    if gopath is None:
        gopath = common.get_option("gopath")

    if not gopath:
        raise BuildEnvironmentError("GOPATH is not set.")

    gopath_install = pl.Path(gopath.split(":")[0])

    if not gopath_install.is_dir():
        raise BuildEnvironmentError(f"GOPATH_INSTALL ({gopath_install}) is not a directory.")

    logging.info(f"GOPATH ({gopath}) looks sane, using {gopath_install} for installation.")
    return gopath_install


class GoBinaryBuilder:
    """
    Builds the agent's binaries with the 'go install' and puts the configuration file beside them.
    """

    def __init__(
            self,
            package_spec: PackageSpec,
            source_root: Union[str, pl.Path],
            gopath_install: Union[str, pl.Path],
    ):
        self._spec = package_spec
        self.source_root = pl.Path(source_root)
        self.gopath_install = pl.Path(gopath_install)

    @property
    def bin_path(self) -> pl.Path:
        return self.gopath_install / "bin"

    @property
    def config_file_path(self) -> pl.Path:
        return self.bin_path / self._spec.config_file

    def binary_path(self, binary_name: str) -> pl.Path:
        return self.bin_path / binary_name

    def build(self, version: str):
        """
        Build the code with the version embedded into the binaries.
        """

        commit = version_tools.get_commit(self.source_root)
        logging.info(f"Building commit {commit}.")

        for binary_name in self._spec.binaries:
            self.binary_path(binary_name).unlink(missing_ok=True)

        logging.info("Building...")
        try:
            common.check_call_with_log(
                [
                    "go",
                    "install",
                    f"-ldflags=-X {self._spec.version_symbol}={version}",
                    "./...",
                ],
                cwd=str(self.source_root),
            )
        except (subprocess.CalledProcessError, OSError) as e:
            raise BuildError("Build failed, unable to create package -- aborting.") from e

        logging.info("Copying configuration file...")
        try:
            self.bin_path.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self.source_root / self._spec.config_file, self.config_file_path)
        except OSError as e:
            raise BuildError(
                "Build failed, unable to copy configuration file -- aborting."
            ) from e

        logging.info("Build completed successfully.")
