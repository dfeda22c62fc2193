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

"""
Deletes the oldest snapshots until the pool has enough free space.

Snapshots are walked oldest first. The walk stops when free space reaches the
floor, or when it reaches a snapshot younger than the age ceiling; those are
never deleted, however low the space.

Space freed by `zfs destroy` shows up with a delay, so free space is not
measured after each deletion. Snapshots sharing a creation time form a group
that is dispatched concurrently. Before moving to the next group, all in-flight
deletions are joined, the engine is given a moment to settle, and free space is
measured again.
"""

import dataclasses
import datetime
import enum
import logging
import time

from . import catalog
from . import deletion_throttle
from . import snapshot
from . import space_gauge
from .. import configs
from .. import global_flags
from ..mechanisms import abstract_mechanism
from ..utils import human_interval
from ..utils import os_utils

from typing import Callable, Optional


class StopReason(enum.Enum):
    # Free space was adequate to begin with; nothing was listed.
    ADEQUATE = "ADEQUATE"
    # Free space reached the floor during the walk.
    GOAL_MET = "GOAL_MET"
    # The next snapshot was younger than the age ceiling.
    AGE_CEILING = "AGE_CEILING"
    # Every listed snapshot was deleted.
    EXHAUSTED = "EXHAUSTED"
    NO_SNAPSHOTS = "NO_SNAPSHOTS"
    CATALOG_UNAVAILABLE = "CATALOG_UNAVAILABLE"


@dataclasses.dataclass
class EvictionResult:
    stop_reason: StopReason
    # In the order they were dispatched.
    deleted: list[snapshot.Snapshot] = dataclasses.field(default_factory=list)
    # Last reading of free space; None if unknown.
    free_gb: Optional[int] = None
    # Deletions that reported failure.
    failed: int = 0

    def is_degraded(self, floor_gb: int) -> bool:
        return space_gauge.is_below(self.free_gb, floor_gb)


def _epoch_str(epoch: int) -> str:
    return datetime.datetime.fromtimestamp(epoch).strftime(global_flags.TIME_FORMAT)


class SpaceEvictor:
    def __init__(
        self,
        engine: abstract_mechanism.SnapMechanism,
        gauge: space_gauge.SpaceGauge,
        throttle: deletion_throttle.DeletionThrottle,
        thresholds: configs.Thresholds,
        settle_secs: float = 5.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._engine = engine
        self._gauge = gauge
        self._throttle = throttle
        self._floor = thresholds.min_free_space
        self._age_ceiling = thresholds.max_age_ceiling
        self._settle_secs = settle_secs
        self._sleep = sleep

    def _settle_and_measure(self) -> Optional[int]:
        if self._settle_secs > 0:
            logging.info(
                f"Waiting {human_interval.humanize(self._settle_secs)} for freed space "
                "to show up."
            )
            self._sleep(self._settle_secs)
        return self._gauge.available()

    def _walk(
        self, snaps: tuple[snapshot.Snapshot, ...], free_gb: Optional[int]
    ) -> EvictionResult:
        result = EvictionResult(StopReason.EXHAUSTED, free_gb=free_gb)
        # Creation time of the group whose deletions are in flight.
        checkpoint = snaps[0].creation_epoch
        with deletion_throttle.TaskScope(
            max_workers=self._throttle.max_in_flight,
            throttle=self._throttle,
            name="evict",
        ) as scope:
            for snap in snaps:
                if snap.creation_epoch > self._age_ceiling:
                    logging.info(
                        f"Age ceiling reached at {snap.name}; keeping all snapshots "
                        f"created after {_epoch_str(self._age_ceiling)}."
                    )
                    result.stop_reason = StopReason.AGE_CEILING
                    break

                if snap.creation_epoch > checkpoint:
                    logging.info("Checking free space...")
                    scope.join()
                    result.free_gb = self._settle_and_measure()
                    checkpoint = snap.creation_epoch

                if not space_gauge.is_below(result.free_gb, self._floor):
                    logging.info("Adequate free space achieved.")
                    result.stop_reason = StopReason.GOAL_MET
                    break

                result.deleted.append(snap)
                scope.dispatch(snap.delete, self._engine)
        # Leaving the scope joined the remaining deletions.
        result.failed = scope.failed
        return result

    def run(self, settle_first: bool = False) -> EvictionResult:
        """
        Args:
          settle_first: Set if snapshots were just destroyed elsewhere, so that
            the first reading includes the space they freed.
        """
        free_gb = self._settle_and_measure() if settle_first else self._gauge.available()
        if not space_gauge.is_below(free_gb, self._floor):
            logging.info(f"Adequate free space in {self._gauge.pool}.")
            return EvictionResult(StopReason.ADEQUATE, free_gb=free_gb)

        logging.info("Deleting old snapshots to free space...")
        try:
            snaps = catalog.list_all(self._engine)
        except os_utils.CommandError as exc:
            logging.error(f"Cannot list snapshots, nothing will be evicted: {exc}")
            result = EvictionResult(StopReason.CATALOG_UNAVAILABLE, free_gb=free_gb)
        else:
            if not snaps:
                logging.warning(
                    "No snapshots found. Consider freeing some space as pool "
                    "performance may be degraded."
                )
                result = EvictionResult(StopReason.NO_SNAPSHOTS, free_gb=free_gb)
            else:
                result = self._walk(snaps, free_gb)

        if result.deleted:
            result.free_gb = self._settle_and_measure()
        else:
            result.free_gb = self._gauge.available()

        if result.failed:
            logging.warning(f"{result.failed} snapshots could not be deleted.")
        if result.is_degraded(self._floor):
            free_str = "unknown" if result.free_gb is None else f"{result.free_gb}G"
            logging.warning(
                "Couldn't free up enough space by deleting old snapshots. Consider "
                "freeing some space as pool performance may be degraded. "
                f"Free space: {free_str}"
            )
        return result
