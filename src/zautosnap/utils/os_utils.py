# Copyright 2022 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import subprocess
import sys

from typing import Any, NoReturn


class CommandError(Exception):
    """Raised when a command is unsuccesful."""

    def __init__(self, msg: str, stderr: str = "") -> None:
        super().__init__(msg)
        # Kept separately so that callers can classify the failure.
        self.stderr = stderr


def fatal_error(msg: str) -> NoReturn:
    """Shows a fatal error and exits.

    This produces a cleaner than raising an error. However, this also hides any
    backtrace that can be useful for debugging. Use it where it is easy to
    determine exactly what went wrong beyond any doubt from the message, both
    for a developer and the user.
    """
    logging.error(msg)
    sys.exit(-1)


def runsh_or_error(command: list[str]) -> str:
    """Runs a command without a shell.

    Args:
      command: Command to run, e.g. ["zfs", "list", "-H", "-o", "name"].
        Arguments are passed as is, so dataset names may contain spaces.

    Returns:
      Output of command.
    """
    command_str = " ".join(command)
    logging.debug(f"Running {command_str}")
    try:
        return subprocess.check_output(command, stderr=subprocess.PIPE).decode()
    except FileNotFoundError as exc:
        raise CommandError(f"Command not found: '{command[0]}'") from exc
    except subprocess.CalledProcessError as exc:
        # If we are here, the command could not be run.
        stderr = exc.stderr.decode() if exc.stderr else ""
        error_msg = (
            f"Error running shell command: '{command_str}'"
            f"\nstdout: {exc.stdout.decode() if exc.stdout else ''}"
            f"\nstderr: {stderr}"
        )
        raise CommandError(error_msg, stderr=stderr) from exc


def eprint(*args: Any, **kwargs: Any) -> None:
    """Notifications meant for user, but not for redirection to any file."""
    print(*args, file=sys.stderr, **kwargs)
