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

from ..mechanisms import abstract_mechanism
from ..utils import human_size
from ..utils import os_utils


class SpaceGauge:
    """Reads available space of a pool in whole gigabytes."""

    def __init__(self, engine: abstract_mechanism.SnapMechanism, pool: str) -> None:
        self._engine = engine
        self._pool = pool

    @property
    def pool(self) -> str:
        return self._pool

    def available(self) -> int | None:
        """Returns available space, or None if it could not be determined."""
        try:
            raw = self._engine.available_space(self._pool)
        except os_utils.CommandError as exc:
            logging.error(f"Could not query available space of {self._pool}: {exc}")
            return None
        try:
            free_gb = human_size.to_whole_gb(raw)
        except ValueError as exc:
            logging.error(f"Could not read available space of {self._pool}: {exc}")
            return None
        logging.info(f"Available space in {self._pool}: {free_gb}G")
        return free_gb


def is_below(free_gb: int | None, floor_gb: int) -> bool:
    """An unknown reading counts as below the floor."""
    return free_gb is None or free_gb < floor_gb
