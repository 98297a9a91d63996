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
Queries to git, which is used only as a source of the version, the commit and the source root.
"""

import logging
import pathlib as pl
import subprocess
from typing import List, Optional, Union

from influxdb_zabbix_build.errors import BuildEnvironmentError, VersionResolutionError
from influxdb_zabbix_build.tools import common


def _git(args: List[str], cwd: Union[str, pl.Path], error_message: str) -> str:
    try:
        output = common.check_output_with_log(
            ["git", *args],
            cwd=str(cwd),
        )
    except (subprocess.CalledProcessError, OSError) as e:
        raise VersionResolutionError(error_message) from e

    return output.decode().strip()


def get_source_root(cwd: Union[str, pl.Path] = None) -> pl.Path:
    """Return the top level directory of the git working tree."""
    cwd = cwd or pl.Path.cwd()
    output = _git(
        ["rev-parse", "--show-toplevel"],
        cwd=cwd,
        error_message="Unable to find the root of the source tree -- aborting.",
    )
    return pl.Path(output)


def resolve_version(
        version: Optional[str] = None,
        source_root: Union[str, pl.Path] = None
) -> str:
    """
    Return the version of the packages.
    :param version: Explicit version. It is used as it is, without any validation.
    :param source_root: The git working tree to describe if the version is not specified.
    """
    if version:
        return version

    described = _git(
        ["describe", "--always", "--tags"],
        cwd=source_root or pl.Path.cwd(),
        error_message="Unable to determine the version from git -- aborting.",
    )

    if described.startswith("v"):
        described = described[1:]

    return described


def get_commit(source_root: Union[str, pl.Path]) -> str:
    return _git(
        ["rev-parse", "HEAD"],
        cwd=source_root,
        error_message="Unable to retrieve current commit -- aborting.",
    )


def check_clean_tree(source_root: Union[str, pl.Path]):
    """
    Make sure that no source file is locally modified.
    """
    output = _git(
        ["ls-files", "--modified"],
        cwd=source_root,
        error_message="Unable to list modified files -- aborting.",
    )

    if output:
        raise BuildEnvironmentError("The source tree is not clean -- aborting.")

    logging.info("Git tree is clean.")
