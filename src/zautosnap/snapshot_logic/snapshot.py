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
"""Encapsulates a zfs snapshot as seen when the catalog was listed.

The existence of this object doesn't mean the snapshot still exists; it may
have been destroyed since.
"""

import dataclasses
import logging

from ..mechanisms import abstract_mechanism


@dataclasses.dataclass(frozen=True, order=True)
class Snapshot:
    # Field order gives the chronological sort order, with ties broken by name.
    creation_epoch: int
    dataset: str
    label: str

    @property
    def name(self) -> str:
        return f"{self.dataset}@{self.label}"

    @property
    def day(self) -> str:
        """Calendar day, taken from the label text.

        E.g. '2024-05-01' for label '2024-05-01T13:00:00'. A label without 'T'
        forms a day of its own.
        """
        day, sep, _ = self.label.rpartition("T")
        return day if sep else self.label

    def delete(self, engine: abstract_mechanism.SnapMechanism) -> bool:
        logging.info(f"Deleting snapshot {self.name}")
        return engine.destroy_snapshot(self.dataset, self.label)
