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

from . import abstract_mechanism
from .. import global_flags
from ..utils import os_utils

from typing_extensions import override

# Messages from `zfs destroy` meaning the snapshot is already gone.
_ALREADY_GONE = ("could not find any snapshots to destroy", "does not exist")


def _execute_sh(cmd: list[str]):
    if global_flags.FLAGS.dryrun:
        os_utils.eprint("Would run " + " ".join(cmd))
    else:
        os_utils.runsh_or_error(cmd)


def _parse_snapshot_line(line: str) -> tuple[int, str, str] | None:
    """Parses a line of `zfs list -H -p -o creation,name`."""
    creation, sep, name = line.partition("\t")
    dataset, at, label = name.partition("@")
    if not sep or not at or not dataset or not label:
        return None
    try:
        return int(creation), dataset, label
    except ValueError:
        return None


class ZfsSnapMechanism(abstract_mechanism.SnapMechanism):
    @override
    def list_datasets(self, root: str | None) -> list[str]:
        cmd = ["zfs", "list", "-H", "-o", "name"]
        if root:
            cmd += ["-r", root]
        output = os_utils.runsh_or_error(cmd)
        return [line for line in output.splitlines() if line]

    @override
    def list_snapshots(self) -> list[tuple[int, str, str]]:
        output = os_utils.runsh_or_error(
            ["zfs", "list", "-H", "-p", "-t", "snapshot", "-o", "creation,name"]
        )
        result: list[tuple[int, str, str]] = []
        for line in output.splitlines():
            if not line:
                continue
            parsed = _parse_snapshot_line(line)
            if parsed is None:
                logging.warning(f"Could not parse snapshot listing, ignoring: {line!r}")
                continue
            result.append(parsed)
        return result

    @override
    def available_space(self, pool: str) -> str:
        return os_utils.runsh_or_error(["zfs", "list", "-H", "-o", "available", pool]).strip()

    @override
    def create_snapshot(self, dataset: str, label: str) -> bool:
        try:
            _execute_sh(["zfs", "snapshot", f"{dataset}@{label}"])
        except os_utils.CommandError as exc:
            logging.error(f"Unable to create {dataset}@{label}: {exc.stderr.strip()}")
            return False
        return True

    @override
    def destroy_snapshot(self, dataset: str, label: str) -> bool:
        try:
            _execute_sh(["zfs", "destroy", f"{dataset}@{label}"])
        except os_utils.CommandError as exc:
            if any(msg in exc.stderr for msg in _ALREADY_GONE):
                logging.info(f"Snapshot already gone: {dataset}@{label}")
                return True
            logging.error(f"Unable to destroy {dataset}@{label}: {exc.stderr.strip()}")
            return False
        return True
