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
"""In-memory storage engine for tests.

Destroying a snapshot frees its modeled size immediately.
"""

import dataclasses
import threading

from . import abstract_mechanism
from ..utils import os_utils

from typing_extensions import override


@dataclasses.dataclass
class _FakeSnap:
    creation_epoch: int
    size_gb: float


class FakeSnapMechanism(abstract_mechanism.SnapMechanism):
    def __init__(self, available_gb: float, datasets: list[str] | None = None) -> None:
        self._lock = threading.Lock()
        self.available_gb = available_gb
        self.datasets = list(datasets or [])
        self.snaps: dict[tuple[str, str], _FakeSnap] = {}
        # Names in the order their destroy/create calls were received.
        self.destroyed: list[str] = []
        self.created: list[str] = []
        # Failure injection.
        self.fail_space_query = False
        self.fail_listing = False
        self.fail_create_for: set[str] = set()
        self.space_queries = 0
        self.listings = 0
        # Creation epoch given to snapshots made by create_snapshot().
        self.now_epoch = 2_000_000_000

    def add_snapshot(
        self, dataset: str, label: str, creation_epoch: int, size_gb: float = 0
    ) -> None:
        if dataset not in self.datasets:
            self.datasets.append(dataset)
        self.snaps[(dataset, label)] = _FakeSnap(creation_epoch, size_gb)

    def names(self) -> set[str]:
        return {f"{dataset}@{label}" for dataset, label in self.snaps}

    @override
    def list_datasets(self, root: str | None) -> list[str]:
        if self.fail_listing:
            raise os_utils.CommandError("listing failed")
        if root is None:
            return list(self.datasets)
        return [d for d in self.datasets if d == root or d.startswith(root + "/")]

    @override
    def list_snapshots(self) -> list[tuple[int, str, str]]:
        with self._lock:
            self.listings += 1
            if self.fail_listing:
                raise os_utils.CommandError("listing failed")
            return [
                (snap.creation_epoch, dataset, label)
                for (dataset, label), snap in self.snaps.items()
            ]

    @override
    def available_space(self, pool: str) -> str:
        with self._lock:
            self.space_queries += 1
            if self.fail_space_query:
                raise os_utils.CommandError(f"cannot open '{pool}': pool is busy")
            return f"{self.available_gb}G"

    @override
    def create_snapshot(self, dataset: str, label: str) -> bool:
        with self._lock:
            if dataset in self.fail_create_for:
                return False
            self.created.append(f"{dataset}@{label}")
            self.snaps[(dataset, label)] = _FakeSnap(self.now_epoch, 0)
            return True

    @override
    def destroy_snapshot(self, dataset: str, label: str) -> bool:
        with self._lock:
            self.destroyed.append(f"{dataset}@{label}")
            snap = self.snaps.pop((dataset, label), None)
            if snap is not None:
                self.available_gb += snap.size_gb
            return True
