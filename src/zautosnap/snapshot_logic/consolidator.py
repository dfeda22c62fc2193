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
Collapses intraday snapshots to one per calendar day once they are old enough.

For each dataset, snapshots are grouped by the day written in their label. The
last snapshot of a day is always kept. Every other snapshot of that day is
deleted once it is older than the intraday ceiling. This is purely age driven;
free space plays no part.
"""

import collections
import logging

from . import catalog
from . import deletion_throttle
from . import snapshot
from ..mechanisms import abstract_mechanism
from ..utils import os_utils

from typing import Iterable, Iterator, Optional


def plan(
    snaps: Iterable[snapshot.Snapshot], intraday_ceiling: int
) -> list[snapshot.Snapshot]:
    """Returns the snapshots to delete, in chronological order."""
    to_delete: list[snapshot.Snapshot] = []
    for dataset_snaps in catalog.group_by_dataset(snaps).values():
        by_day: dict[str, list[snapshot.Snapshot]] = collections.defaultdict(list)
        for snap in dataset_snaps:
            by_day[snap.day].append(snap)
        to_delete.extend(_outdated_in_days(by_day.values(), intraday_ceiling))
    return sorted(to_delete)


def _outdated_in_days(
    days: Iterable[list[snapshot.Snapshot]], intraday_ceiling: int
) -> Iterator[snapshot.Snapshot]:
    for members in days:
        if len(members) < 2:
            continue
        survivor = max(members, key=lambda s: (s.creation_epoch, s.label))
        for snap in members:
            if snap is not survivor and snap.creation_epoch < intraday_ceiling:
                yield snap


class IntradayConsolidator:
    def __init__(
        self,
        engine: abstract_mechanism.SnapMechanism,
        throttle: deletion_throttle.DeletionThrottle,
        intraday_ceiling: int,
        pool: Optional[str] = None,
    ) -> None:
        """
        Args:
          intraday_ceiling: Epoch seconds; only snapshots older than this are deleted.
          pool: If set, only datasets in this pool are consolidated. Otherwise all
            visible datasets are.
        """
        self._engine = engine
        self._throttle = throttle
        self._intraday_ceiling = intraday_ceiling
        self._pool = pool
        # Set by run().
        self.deleted: list[snapshot.Snapshot] = []

    def run(self) -> int:
        """Deletes outdated intraday snapshots. Returns how many deletions failed."""
        try:
            snaps: Iterable[snapshot.Snapshot] = catalog.list_all(self._engine)
        except os_utils.CommandError as exc:
            logging.error(f"Cannot list snapshots, skipping intraday consolidation: {exc}")
            return 0
        if self._pool is not None:
            snaps = catalog.within_pool(snaps, self._pool)

        self.deleted = plan(snaps, self._intraday_ceiling)
        if not self.deleted:
            logging.info("No outdated intraday snapshots.")
            return 0

        with deletion_throttle.TaskScope(
            max_workers=self._throttle.max_in_flight,
            throttle=self._throttle,
            name="consolidate",
        ) as scope:
            for snap in self.deleted:
                logging.info(f"Removing outdated intraday snapshot: {snap.name}")
                scope.dispatch(snap.delete, self._engine)
        if scope.failed:
            logging.warning(f"{scope.failed} intraday snapshots could not be removed.")
        return scope.failed
