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

import abc


class SnapMechanism(abc.ABC):
    """Interface with the storage engine primitives used by the controller.

    Listing and space queries raise os_utils.CommandError on failure. Create and
    destroy report failure by returning False, since a failure there only
    affects one dataset or snapshot.

    Implementations must be safe to call from several threads at once.
    """

    @abc.abstractmethod
    def list_datasets(self, root: str | None) -> list[str]:
        """Returns dataset paths under root (including root), or all if None."""

    @abc.abstractmethod
    def list_snapshots(self) -> list[tuple[int, str, str]]:
        """Returns (creation_epoch, dataset, label) for every visible snapshot.

        Order is unspecified.
        """

    @abc.abstractmethod
    def available_space(self, pool: str) -> str:
        """Returns available space of the pool as printed, e.g. '1.25T'."""

    @abc.abstractmethod
    def create_snapshot(self, dataset: str, label: str) -> bool:
        """Creates dataset@label. Returns True on success."""

    @abc.abstractmethod
    def destroy_snapshot(self, dataset: str, label: str) -> bool:
        """Destroys dataset@label. Returns True on success.

        A snapshot that no longer exists counts as success.
        """
