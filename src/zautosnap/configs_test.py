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

import datetime
import tempfile
import unittest

from . import arg_parser
from . import configs

# For testing, we can access private methods.
# pyright: reportPrivateUsage=false


def _write_config(text: str) -> tempfile._TemporaryFileWrapper:
    file = tempfile.NamedTemporaryFile(
        mode="w", prefix="zfs_autosnap_config_test_", suffix=".conf"
    )
    file.write(text)
    file.flush()
    return file


class ConfigsTest(unittest.TestCase):
    def test_default_config(self):
        # Check that the example config indeed encodes defaults.
        config = configs.Config(pool="tank")
        config.update_from_configfile(str(configs._example_config_fname()))
        self.assertEqual(config, configs.Config(pool="tank"))

    def test_thresholds(self):
        now = datetime.datetime(2024, 5, 31, 12, 0, 0)
        config = configs.Config(pool="tank", keep_days=30, keep_intraday_days=7)
        thresholds = config.thresholds(now)
        self.assertEqual(thresholds.min_free_space, 200)
        self.assertEqual(
            thresholds.max_age_ceiling,
            int(datetime.datetime(2024, 5, 1, 12, 0, 0).timestamp()),
        )
        self.assertEqual(
            thresholds.intraday_ceiling,
            int(datetime.datetime(2024, 5, 24, 12, 0, 0).timestamp()),
        )

    def test_zero_days_is_now(self):
        now = datetime.datetime(2024, 5, 31, 12, 0, 0)
        config = configs.Config(pool="tank", keep_days=0, keep_intraday_days=0)
        thresholds = config.thresholds(now)
        self.assertEqual(thresholds.max_age_ceiling, int(now.timestamp()))
        self.assertEqual(thresholds.intraday_ceiling, int(now.timestamp()))

    def test_from_args_defaults(self):
        args = arg_parser.make_parser().parse_args(["tank"])
        config = configs.Config.from_args(args)
        self.assertEqual(config, configs.Config(pool="tank"))

    def test_from_args_positionals(self):
        args = arg_parser.make_parser().parse_args(["tank", "500", "60", "10"])
        config = configs.Config.from_args(args)
        self.assertEqual(config.min_free_space_gb, 500)
        self.assertEqual(config.keep_days, 60)
        self.assertEqual(config.keep_intraday_days, 10)

    def test_config_file_precedence(self):
        with _write_config(
            "[DEFAULT]\n"
            "min_free_space_gb = 300\n"
            "keep_days = 14\n"
            "settle_interval = 1m\n"
            "intraday_scope = pool\n"
            "lock_file =\n"
        ) as file:
            args = arg_parser.make_parser().parse_args(
                ["--config-file", file.name, "tank", "400"]
            )
            config = configs.Config.from_args(args)
        # Command line wins over the file.
        self.assertEqual(config.min_free_space_gb, 400)
        # File wins over the defaults.
        self.assertEqual(config.keep_days, 14)
        self.assertEqual(config.settle_interval, 60)
        self.assertEqual(config.intraday_scope, "pool")
        self.assertEqual(config.lock_file, "")
        self.assertEqual(config.effective_lock_file, "")
        # Untouched.
        self.assertEqual(config.keep_intraday_days, 7)

    def test_unknown_key_warns(self):
        with _write_config("[DEFAULT]\nkeep_weeks = 3\n") as file:
            config = configs.Config(pool="tank")
            with self.assertLogs(level="WARNING") as logs:
                config.update_from_configfile(file.name)
        self.assertIn("keep_weeks", logs.output[0])
        self.assertEqual(config, configs.Config(pool="tank"))

    def test_invalid_value(self):
        with _write_config("[DEFAULT]\nkeep_days = many\n") as file:
            config = configs.Config(pool="tank")
            with self.assertRaisesRegex(ValueError, "keep_days"):
                config.update_from_configfile(file.name)

    def test_missing_file(self):
        config = configs.Config(pool="tank")
        with self.assertRaisesRegex(ValueError, "Could not find"):
            config.update_from_configfile("/nonexistent/zfs-autosnap.conf")

    def test_validate(self):
        for kwargs in (
            {"pool": ""},
            {"pool": "tank", "min_free_space_gb": -1},
            {"pool": "tank", "max_concurrent_deletes": 0},
            {"pool": "tank", "settle_interval": -1.0},
            {"pool": "tank", "intraday_scope": "dataset"},
        ):
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    configs.Config(**kwargs).validate()

    def test_default_lock_file_per_pool(self):
        self.assertNotEqual(
            configs.Config(pool="tank").effective_lock_file,
            configs.Config(pool="backup").effective_lock_file,
        )
        self.assertEqual(
            configs.Config(pool="tank", lock_file="/run/x.lock").effective_lock_file,
            "/run/x.lock",
        )


if __name__ == "__main__":
    unittest.main()
