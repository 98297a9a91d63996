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
import os
import shlex
import subprocess
from typing import Optional

# A counter for all commands that have been executed since start of the program.
# Just for more informative logging.
_COMMAND_COUNTER = 0


def init_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s][%(module)s] %(message)s",
    )


def subprocess_command_run_with_log(func):
    """
    Wrap 'subprocess.check_call' or 'subprocess.check_output' so every external command of the packaging is
    numbered and logged, together with its failure.
    """

    def wrapper(cmd, *args, **kwargs):
        global _COMMAND_COUNTER

        number = _COMMAND_COUNTER
        _COMMAND_COUNTER += 1

        if isinstance(cmd, list):
            cmd_str = shlex.join([str(a) for a in cmd])
        else:
            cmd_str = str(cmd)

        logging.info(f"### RUN COMMAND #{number}: '{cmd_str}'. ###")
        try:
            return func(cmd, *args, **kwargs)
        except subprocess.CalledProcessError as e:
            logging.error(f"### COMMAND #{number} FAILED with exit code {e.returncode}. ###")
            raise
        except OSError as e:
            logging.error(f"### COMMAND #{number} FAILED to start: {e}. ###")
            raise

    return wrapper


check_call_with_log = subprocess_command_run_with_log(subprocess.check_call)
check_output_with_log = subprocess_command_run_with_log(subprocess.check_output)


def get_option(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Find the value of the option by looking for the environment variable with the upper-cased name.
    Empty values are treated as missing.
    """
    value = os.environ.get(name.upper(), None)
    if value:
        return value

    return default
