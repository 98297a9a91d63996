#!/usr/bin/env python3
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

# Packaging script which creates debian and RPM packages for influxdb-zabbix.
# Requirements:
#   - GOPATH must be set
#   - 'fpm' must be on the path
#
# The script automatically determines the version number from git by using 'git describe --always --tags', unless
# the version is passed as an argument.

import argparse
import logging
import pathlib as pl
import sys

__PARENT_DIR__ = pl.Path(__file__).absolute().parent
__SOURCE_ROOT__ = __PARENT_DIR__

# This file can be executed as script. Add source root to the PYTHONPATH in order to be able to import
# local packages. All such imports also have to be done after that.
sys.path.append(str(__SOURCE_ROOT__))

from influxdb_zabbix_build import config
from influxdb_zabbix_build.errors import PackagingError
from influxdb_zabbix_build.pipeline import PackagingPipeline
from influxdb_zabbix_build.tools import common
from influxdb_zabbix_build.tools import constants


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Build the debian and RPM packages of the influxdb-zabbix."
    )

    parser.add_argument(
        "version",
        nargs="?",
        default=None,
        help="Version of the packages. If not specified, it is taken from 'git describe --always --tags'.",
    )

    parser.add_argument(
        "--source-root",
        dest="source_root",
        help="Root of the influxdb-zabbix source tree. Defaults to the top level of the current git working tree.",
    )

    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        help="The directory where the result packages have to be stored. Defaults to the current directory.",
    )

    parser.add_argument(
        "--package-config",
        dest="package_config",
        help="YAML file which overrides the package layout and metadata.",
    )

    parser.add_argument(
        "--architecture",
        choices=[a.value for a in constants.Architecture],
        help="Architecture of the packages. Detected from the current machine by default.",
    )

    parser.add_argument(
        "--require-clean-tree",
        dest="require_clean_tree",
        action="store_true",
        help="Abort if any file in the source tree is locally modified.",
    )

    parser.add_argument(
        "-y",
        "--yes",
        dest="yes",
        action="store_true",
        help="Do not ask for confirmation before creating the packages.",
    )

    parser.add_argument("--debug", action="store_true")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    common.init_logging(debug=args.debug)

    architecture = None
    if args.architecture:
        architecture = constants.Architecture(args.architecture)

    try:
        package_spec = config.load_package_spec(args.package_config)

        pipeline = PackagingPipeline(
            package_spec=package_spec,
            version=args.version,
            source_root=args.source_root,
            output_path=args.output_dir,
            architecture=architecture,
            require_clean_tree=args.require_clean_tree,
            interactive=False if args.yes else None,
        )
        packages = pipeline.run()
    except PackagingError as e:
        logging.error(str(e))
        return 1

    for package_path in packages:
        logging.info(f"Package: {package_path}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
