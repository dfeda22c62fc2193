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

from . import catalog
from . import deletion_throttle
from ..mechanisms import abstract_mechanism
from ..utils import os_utils

# Cap on snapshot creations running at once.
_MAX_WORKERS = 16


class SnapshotCreator:
    def __init__(self, engine: abstract_mechanism.SnapMechanism, label: str) -> None:
        """
        Args:
          label: Shared by every snapshot created, so that all datasets of one run
            form one generation, e.g. for incremental sends.
        """
        self._engine = engine
        self._label = label

    def _create(self, dataset: str) -> bool:
        logging.info(f"Creating snapshot for dataset: {dataset}")
        if not self._engine.create_snapshot(dataset, self._label):
            logging.warning(f"Snapshot not created: {dataset}@{self._label}")
            return False
        logging.info(f"Snapshot created: {dataset}@{self._label}")
        return True

    def create_all(self, pool: str) -> list[str]:
        """Snapshots the pool and every dataset under it.

        Returns the names of the snapshots created.
        """
        try:
            datasets = [
                d for d in self._engine.list_datasets(pool) if catalog.is_in_pool(d, pool)
            ]
        except os_utils.CommandError as exc:
            logging.error(f"Cannot list datasets of {pool}, no snapshot created: {exc}")
            return []

        created: list[str] = []
        with deletion_throttle.TaskScope(
            max_workers=_MAX_WORKERS, name="create"
        ) as scope:
            for dataset in datasets:
                scope.dispatch(self._create_and_record, dataset, created)
        if scope.failed:
            logging.warning(f"{scope.failed} of {len(datasets)} snapshots not created.")
        return sorted(created)

    def _create_and_record(self, dataset: str, created: list[str]) -> bool:
        if not self._create(dataset):
            return False
        created.append(f"{dataset}@{self._label}")
        return True
