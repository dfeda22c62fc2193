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
from unittest import mock

from . import space_gauge
from ..mechanisms import fake_mechanism


class SpaceGaugeTest(unittest.TestCase):
    def setUp(self) -> None:
        self._engine = fake_mechanism.FakeSnapMechanism(available_gb=0)
        self._gauge = space_gauge.SpaceGauge(self._engine, "tank")

    def test_available(self):
        for raw, expected in [
            ("250G", 250),
            ("1.5T", 1536),
            ("1023M", 1),
            ("400M", 0),
            ("0", 0),
        ]:
            with self.subTest(raw=raw):
                with mock.patch.object(
                    self._engine, "available_space", return_value=raw
                ):
                    with self.assertLogs(level="INFO") as logs:
                        self.assertEqual(self._gauge.available(), expected)
                self.assertIn(f"Available space in tank: {expected}G", logs.output[0])

    def test_query_failure(self):
        self._engine.fail_space_query = True
        with self.assertLogs(level="ERROR"):
            self.assertIsNone(self._gauge.available())

    def test_unparsable(self):
        with mock.patch.object(self._engine, "available_space", return_value="-"):
            with self.assertLogs(level="ERROR"):
                self.assertIsNone(self._gauge.available())

    def test_is_below(self):
        self.assertTrue(space_gauge.is_below(150, 200))
        self.assertFalse(space_gauge.is_below(200, 200))
        self.assertFalse(space_gauge.is_below(250, 200))
        self.assertTrue(space_gauge.is_below(None, 0))


if __name__ == "__main__":
    unittest.main()
