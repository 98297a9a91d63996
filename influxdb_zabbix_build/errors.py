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


class PackagingError(Exception):
    """
    Base error for every step of the packaging. The message is a one-line diagnostic which names the failed step.
    """
    pass


class ConfigurationError(PackagingError):
    pass


class BuildEnvironmentError(PackagingError):
    pass


class VersionResolutionError(PackagingError):
    pass


class BuildError(PackagingError):
    pass


class StagingError(PackagingError):
    pass


class PackagingAborted(PackagingError):
    pass


class PackagingToolError(PackagingError):
    pass
