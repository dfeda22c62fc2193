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

from . import human_size


class HumanSizeTest(unittest.TestCase):
    def test_parse_to_gb(self):
        cases = [
            ("512G", 512),
            ("1.5T", 1536),
            ("2T", 2048),
            ("1P", 1024 * 1024),
            ("512M", 0.5),
            ("1048576K", 1),
            ("0B", 0),
            ("1073741824", 1),
            (" 200G\n", 200),
            ("3GiB", 3),
            ("3gb", 3),
            ("12 X", None),
            ("G", None),
            ("-", None),
        ]
        for input, expected in cases:
            try:
                observed = human_size.parse_to_gb(input)
            except ValueError:
                observed = None
            if observed is None:
                self.assertIsNone(expected, msg=f"{input!r} --> {expected!r}")
            else:
                assert expected is not None
                self.assertAlmostEqual(observed, expected, msg=f"{input!r} --> {expected!r}")

    def test_to_whole_gb(self):
        self.assertEqual(human_size.to_whole_gb("199.6G"), 200)
        self.assertEqual(human_size.to_whole_gb("199.4G"), 199)
        self.assertEqual(human_size.to_whole_gb("1.21T"), 1239)
        self.assertEqual(human_size.to_whole_gb("100M"), 0)


if __name__ == "__main__":
    unittest.main()
