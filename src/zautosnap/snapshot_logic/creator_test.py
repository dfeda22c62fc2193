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

import unittest

from . import creator
from ..mechanisms import fake_mechanism

_LABEL = "2024-05-01T13:00:00"


class SnapshotCreatorTest(unittest.TestCase):
    def setUp(self) -> None:
        self._engine = fake_mechanism.FakeSnapMechanism(
            available_gb=500,
            datasets=["tank", "tank/home", "tank/home/user", "tank2", "other/data"],
        )

    def test_creates_one_per_pool_dataset(self):
        created = creator.SnapshotCreator(self._engine, _LABEL).create_all("tank")
        self.assertEqual(
            created,
            [
                f"tank/home/user@{_LABEL}",
                f"tank/home@{_LABEL}",
                f"tank@{_LABEL}",
            ],
        )
        self.assertCountEqual(self._engine.created, created)

    def test_all_share_one_label(self):
        for n in range(20):
            self._engine.datasets.append(f"tank/ds{n}")
        creator.SnapshotCreator(self._engine, _LABEL).create_all("tank")
        labels = {name.split("@")[1] for name in self._engine.created}
        self.assertEqual(labels, {_LABEL})
        self.assertEqual(len(self._engine.created), 23)

    def test_failure_does_not_stop_others(self):
        self._engine.fail_create_for = {"tank/home"}
        with self.assertLogs(level="WARNING"):
            created = creator.SnapshotCreator(self._engine, _LABEL).create_all("tank")
        self.assertEqual(created, [f"tank/home/user@{_LABEL}", f"tank@{_LABEL}"])

    def test_listing_failure(self):
        self._engine.fail_listing = True
        with self.assertLogs(level="ERROR"):
            created = creator.SnapshotCreator(self._engine, _LABEL).create_all("tank")
        self.assertEqual(created, [])


if __name__ == "__main__":
    unittest.main()
