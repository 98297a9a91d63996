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
The packaging process: resolve version -> build -> stage -> generate post-install script -> emit rpm -> emit deb.
Every step fails fast and the temporary files of the run are removed on every exit path.
"""

import logging
import os
import pathlib as pl
import shutil
import tempfile
from typing import Callable, List, Optional, Union

from influxdb_zabbix_build import go_builder
from influxdb_zabbix_build import package_builders
from influxdb_zabbix_build import postinstall
from influxdb_zabbix_build import version as version_tools
from influxdb_zabbix_build.config import PackageSpec
from influxdb_zabbix_build.errors import PackagingAborted
from influxdb_zabbix_build.staging import StagingTree
from influxdb_zabbix_build.tools import common
from influxdb_zabbix_build.tools import constants


class PackagingWorkspace:
    """
    Temporary staging directory and post-install script file which are owned by a single run.
    """

    def __init__(self, temp_root: Union[str, pl.Path] = None):
        self._temp_root = str(temp_root) if temp_root else None
        self.work_dir: Optional[pl.Path] = None
        self.postinstall_path: Optional[pl.Path] = None

    def __enter__(self) -> 'PackagingWorkspace':
        self.work_dir = pl.Path(tempfile.mkdtemp(dir=self._temp_root))
        fd, postinstall_path = tempfile.mkstemp(dir=self._temp_root)
        os.close(fd)
        self.postinstall_path = pl.Path(postinstall_path)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()

    def cleanup(self):
        """Remove all resources created during the process."""
        if self.work_dir is not None:
            shutil.rmtree(self.work_dir, ignore_errors=True)
            self.work_dir = None
        if self.postinstall_path is not None:
            self.postinstall_path.unlink(missing_ok=True)
            self.postinstall_path = None


def confirm(
        version: str,
        architecture: constants.Architecture,
        input_func: Callable[[str], str] = input,
):
    """
    Ask the operator before creating the packages. Only an explicit 'n' aborts.
    """
    # A closed stdin reads as an empty reply, which accepts.
    try:
        response = input_func(
            f"Commence creation of {architecture.value} packages, version {version}? [Y/n] "
        )
    except EOFError:
        response = ""
    if response.strip().lower() == "n":
        raise PackagingAborted("Packaging aborted.")


class PackagingPipeline:
    def __init__(
            self,
            package_spec: PackageSpec,
            version: Optional[str] = None,
            source_root: Union[str, pl.Path] = None,
            output_path: Union[str, pl.Path] = None,
            architecture: constants.Architecture = None,
            require_clean_tree: bool = False,
            interactive: Optional[bool] = None,
            temp_root: Union[str, pl.Path] = None,
            gopath: Optional[str] = None,
            input_func: Callable[[str], str] = input,
    ):
        """
        :param version: Explicit version of the packages. If None, it is taken from git.
        :param source_root: Root of the influxdb-zabbix source tree. If None, the top level of the current git
            working tree is used.
        :param output_path: Directory for the result packages. Defaults to the current working directory.
        :param architecture: Architecture of the packages. Detected from the current machine if None.
        :param require_clean_tree: Abort if any file of the source tree is locally modified.
        :param interactive: Ask for confirmation before creating the packages. If None, the confirmation is skipped
            only in the CI/CD, which is recognized by the CIRCLE_BRANCH environment variable.
        :param temp_root: Directory where the temporary files are created. System default if None.
        :param gopath: Value of the GOPATH. Taken from the environment if None.
        """
        self._spec = package_spec
        self._explicit_version = version
        self._source_root = pl.Path(source_root) if source_root else None
        self._output_path = pl.Path(output_path) if output_path else pl.Path.cwd()
        self._architecture = architecture or constants.Architecture.from_machine()
        self._require_clean_tree = require_clean_tree

        if interactive is None:
            interactive = not common.get_option("circle_branch")
        self._interactive = interactive

        self._temp_root = temp_root
        self._gopath = gopath
        self._input_func = input_func

    def run(self) -> List[pl.Path]:
        """
        Perform the whole packaging process.
        :return: Paths of the result packages.
        """
        with PackagingWorkspace(temp_root=self._temp_root) as workspace:
            source_root = self._source_root or version_tools.get_source_root()
            version = version_tools.resolve_version(
                version=self._explicit_version,
                source_root=source_root,
            )
            logging.info(f"Starting packaging process, version: {version}")

            gopath_install = go_builder.check_gopath(self._gopath)

            if self._require_clean_tree:
                version_tools.check_clean_tree(source_root)

            builder = go_builder.GoBinaryBuilder(
                package_spec=self._spec,
                source_root=source_root,
                gopath_install=gopath_install,
            )
            builder.build(version)

            staging_tree = StagingTree(
                work_dir=workspace.work_dir,
                package_spec=self._spec,
                version=version,
            )
            staging_tree.stage(source_root=source_root, bin_path=builder.bin_path)

            postinstall.generate_postinstall_script(
                package_spec=self._spec,
                version=version,
                output_path=workspace.postinstall_path,
            )

            if self._interactive:
                confirm(version, self._architecture, input_func=self._input_func)

            self._output_path.mkdir(parents=True, exist_ok=True)

            result_packages = []
            for builder_cls in package_builders.PACKAGE_BUILDERS:
                package_builder = builder_cls(
                    package_spec=self._spec,
                    version=version,
                    architecture=self._architecture,
                )
                result_packages.append(
                    package_builder.build(
                        staging_path=workspace.work_dir,
                        postinstall_path=workspace.postinstall_path,
                        output_path=self._output_path,
                    )
                )

        logging.info("Packaging process complete.")
        return result_packages
