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

import argparse
import configparser
import dataclasses
import datetime
import logging
import os
import pathlib

from .snapshot_logic import deletion_throttle
from .utils import human_interval
from .utils import run_lock

from typing import Optional

DEFAULT_LOG_FILE = "/var/log/snapshots.log"

# Values accepted for intraday_scope.
INTRADAY_SCOPES = ("all", "pool")

# Fields that may be set from a config file. Other Config fields are set only
# from the command line.
_FILE_FIELDS = {
    "min_free_space_gb",
    "keep_days",
    "keep_intraday_days",
    "max_concurrent_deletes",
    "settle_interval",
    "log_file",
    "lock_file",
    "intraday_scope",
}


def _example_config_fname() -> pathlib.Path:
    script_dir = pathlib.Path(os.path.realpath(__file__)).parent
    return script_dir / "example_config.conf"


@dataclasses.dataclass(frozen=True)
class Thresholds:
    """Retention limits of one run, as absolute values."""

    # Gigabytes of free space to aim for.
    min_free_space: int
    # Epoch seconds. Snapshots created after this are never evicted for space.
    max_age_ceiling: int
    # Epoch seconds. Intraday snapshots created before this are consolidated.
    intraday_ceiling: int


@dataclasses.dataclass
class Config:
    pool: str
    # Try to keep at least this much free space in the pool.
    min_free_space_gb: int = 200
    # Snapshots younger than this are never deleted to free space.
    keep_days: int = 30
    # Intraday snapshots younger than this are not consolidated.
    keep_intraday_days: int = 7
    # Cap on destroy operations running at once.
    max_concurrent_deletes: int = deletion_throttle.DEFAULT_MAX_IN_FLIGHT
    # Seconds to wait after deletions before measuring free space again.
    settle_interval: float = 5.0
    # Empty disables logging to a file.
    log_file: str = DEFAULT_LOG_FILE
    # None uses a per-pool default. Empty disables locking.
    lock_file: Optional[str] = None
    # One of INTRADAY_SCOPES. "all" consolidates every visible dataset, "pool"
    # only those of the target pool.
    intraday_scope: str = "all"
    # Whether new snapshots are created at the end of the run.
    create: bool = True

    def validate(self) -> None:
        if not self.pool:
            raise ValueError("Pool must not be empty.")
        for key in ("min_free_space_gb", "keep_days", "keep_intraday_days"):
            if getattr(self, key) < 0:
                raise ValueError(f"{key} must not be negative.")
        if self.max_concurrent_deletes < 1:
            raise ValueError("max_concurrent_deletes must be at least 1.")
        if self.settle_interval < 0:
            raise ValueError("settle_interval must not be negative.")
        if self.intraday_scope not in INTRADAY_SCOPES:
            raise ValueError(
                f"intraday_scope must be one of {INTRADAY_SCOPES}, got {self.intraday_scope!r}"
            )

    def thresholds(self, now: datetime.datetime) -> Thresholds:
        return Thresholds(
            min_free_space=self.min_free_space_gb,
            max_age_ceiling=int(
                (now - datetime.timedelta(days=self.keep_days)).timestamp()
            ),
            intraday_ceiling=int(
                (now - datetime.timedelta(days=self.keep_intraday_days)).timestamp()
            ),
        )

    @property
    def effective_lock_file(self) -> str:
        if self.lock_file is None:
            return run_lock.default_lock_file(self.pool)
        return self.lock_file

    def update_from_configfile(self, config_file: str) -> None:
        if not os.path.isfile(config_file):
            raise ValueError(f"Could not find config file: {config_file}")
        inifile = configparser.ConfigParser()
        inifile.read(config_file)
        section = inifile["DEFAULT"]
        for key, value in section.items():
            if key not in _FILE_FIELDS:
                logging.warning(f"Invalid field {key=} found in {config_file=}")
                continue
            value = value.strip()
            try:
                if key.endswith("_interval"):
                    setattr(self, key, human_interval.parse_to_secs(value))
                elif key in {"log_file", "lock_file", "intraday_scope"}:
                    setattr(self, key, value)
                else:
                    setattr(self, key, int(value))
            except ValueError as exc:
                raise ValueError(
                    f"Invalid value for {key} in {config_file=}: {exc}"
                ) from exc

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Config":
        """Built-in defaults, overridden by the config file, then by the command line."""
        result = cls(pool=args.pool)
        if args.config_file:
            logging.info(f"Using config {args.config_file}")
            result.update_from_configfile(args.config_file)
        for field in dataclasses.fields(cls):
            value = getattr(args, field.name, None)
            if field.name != "pool" and value is not None:
                setattr(result, field.name, value)
        result.validate()
        return result
