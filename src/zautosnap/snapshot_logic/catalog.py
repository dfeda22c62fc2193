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
"""Point-in-time listing of all snapshots.

Each pass lists afresh; a listing is never reused once deletions have started
elsewhere.
"""

import collections
import logging

from . import snapshot
from ..mechanisms import abstract_mechanism

from typing import Iterable, Iterator


def list_all(engine: abstract_mechanism.SnapMechanism) -> tuple[snapshot.Snapshot, ...]:
    """Returns all snapshots in chronological order.

    Ties on creation time are ordered by (dataset, label).
    Raises os_utils.CommandError if the listing fails.
    """
    snaps = sorted(
        snapshot.Snapshot(creation_epoch, dataset, label)
        for creation_epoch, dataset, label in engine.list_snapshots()
    )
    logging.info(f"Listed {len(snaps)} snapshots.")
    return tuple(snaps)


def is_in_pool(dataset: str, pool: str) -> bool:
    return dataset == pool or dataset.startswith(pool + "/")


def within_pool(
    snaps: Iterable[snapshot.Snapshot], pool: str
) -> Iterator[snapshot.Snapshot]:
    for snap in snaps:
        if is_in_pool(snap.dataset, pool):
            yield snap


def group_by_dataset(
    snaps: Iterable[snapshot.Snapshot],
) -> dict[str, list[snapshot.Snapshot]]:
    """Groups by dataset, keeping the input order within each group."""
    result: dict[str, list[snapshot.Snapshot]] = collections.defaultdict(list)
    for snap in snaps:
        result[snap.dataset].append(snap)
    return dict(result)
