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
Generation of the post-install script of the packages. The script is run by the package manager on the machine where
the package is installed, so it has to handle both systemd and sysvinit regardless of the machine that builds it.
"""

import logging
import pathlib as pl
from typing import Union

import jinja2

from influxdb_zabbix_build.config import PackageSpec
from influxdb_zabbix_build.errors import StagingError

_PARENT_DIR = pl.Path(__file__).parent.absolute()

POSTINSTALL_TEMPLATE_PATH = _PARENT_DIR / "linux" / "deb_or_rpm" / "postinstall.sh.j2"


def render_postinstall_script(package_spec: PackageSpec, version: str) -> str:
    template = jinja2.Template(
        POSTINSTALL_TEMPLATE_PATH.read_text(),
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )

    return template.render(
        name=package_spec.name,
        user=package_spec.user,
        install_root=package_spec.install_root_dir.rstrip("/"),
        versioned_install_dir=package_spec.versioned_install_dir(version),
        systemd_unit=pl.PurePosixPath(package_spec.systemd_script).name,
        initd_script=pl.PurePosixPath(package_spec.initd_script).name,
        log_dir=package_spec.log_dir,
        registry_root=package_spec.registry_root_dir,
    )


def generate_postinstall_script(
        package_spec: PackageSpec,
        version: str,
        output_path: Union[str, pl.Path],
):
    """
    Create the post-install script for the package.
    :param output_path: Path of the file where the script is written.
    """
    output_path = pl.Path(output_path)
    try:
        output_path.write_text(render_postinstall_script(package_spec, version))
    except OSError as e:
        raise StagingError(f"Failed to create post-install script at {output_path} -- aborting.") from e

    logging.info(f"Post-install script created successfully at {output_path}")
