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
import os
import platform
import sys

from typing import TextIO

# Lines in the log file look like "2024-05-01T13:00:00: Deleting snapshot tank@x".
_FILE_FORMAT = "%(asctime)s: %(message)s"
_FILE_DATEFMT = "%Y-%m-%dT%H:%M:%S"
_FILE_MODE = 0o640


# Based on https://stackoverflow.com/q/7445658/196462, https://gist.github.com/ssbarnea/1316877
def _is_ansi_color_supported(textout: TextIO) -> bool:
    if (hasattr(textout, "isatty") and textout.isatty()) or (
        "TERM" in os.environ and os.environ["TERM"] == "ANSI"
    ):
        if platform.system() == "Windows" and not (
            "TERM" in os.environ and os.environ["TERM"] == "ANSI"
        ):
            # Windows console, no ANSI support.
            return False
        else:
            return True
    return False


# Based on https://stackoverflow.com/a/56944256/196462
class _CustomFormatter(logging.Formatter):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        grey = "\x1b[38;5;240m"
        yellow = "\x1b[33;20m"
        red = "\x1b[31;20m"
        bold_red = "\x1b[31;1m"
        reset = "\x1b[0m"

        level_colors = {
            logging.DEBUG: grey,
            logging.INFO: grey,
            logging.WARNING: yellow,
            logging.ERROR: red,
            logging.CRITICAL: bold_red,
        }

        common_fmt = "%(asctime)s %(levelname)s: %(message)s"
        self._level_formats = {level: common_fmt for level in level_colors}

        if _is_ansi_color_supported(sys.stderr):
            self._level_formats = {
                level: color + self._level_formats[level] + reset
                for level, color in level_colors.items()
            }

    def format(self, record: logging.LogRecord) -> str:
        log_fmt = self._level_formats.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


def setup_logging(level: int):
    logger = logging.getLogger()
    # The file handler, if any, always records INFO and above.
    logger.setLevel(min(level, logging.INFO))

    ch = logging.StreamHandler()
    ch.setLevel(level)

    ch.setFormatter(_CustomFormatter())

    logger.addHandler(ch)


def add_file_handler(log_file: str) -> logging.Handler | None:
    """Appends all INFO and above messages to log_file.

    Returns the handler, or None if the file could not be opened.
    """
    try:
        handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        logging.warning(f"Cannot open log file {log_file}, logging to console only: {exc}")
        return None
    try:
        os.chmod(log_file, _FILE_MODE)
    except OSError as exc:
        logging.info(f"Could not set permissions on {log_file}: {exc}")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    logging.getLogger().addHandler(handler)
    return handler
