import contextlib
import io
import unittest

from . import arg_parser


class ArgParserTest(unittest.TestCase):
    def setUp(self) -> None:
        self._parser = arg_parser.make_parser()

    def test_pool_only(self):
        args = self._parser.parse_args(["tank"])
        self.assertEqual(args.pool, "tank")
        # Unset values are left for the config file and defaults.
        self.assertIsNone(args.min_free_space_gb)
        self.assertIsNone(args.keep_days)
        self.assertIsNone(args.keep_intraday_days)
        self.assertIsNone(args.create)
        self.assertIsNone(args.settle_interval)
        self.assertFalse(args.dry_run)
        self.assertFalse(args.verbose)

    def test_all_options(self):
        args = self._parser.parse_args(
            [
                "--dry-run",
                "--verbose",
                "--no-create",
                "--max-concurrent-deletes=4",
                "--settle-interval=500ms",
                "--intraday-scope=pool",
                "--log-file=",
                "tank",
                "300",
                "20",
                "3",
            ]
        )
        self.assertEqual(args.min_free_space_gb, 300)
        self.assertEqual(args.keep_days, 20)
        self.assertEqual(args.keep_intraday_days, 3)
        self.assertFalse(args.create)
        self.assertEqual(args.max_concurrent_deletes, 4)
        self.assertEqual(args.settle_interval, 0.5)
        self.assertEqual(args.intraday_scope, "pool")
        self.assertEqual(args.log_file, "")
        self.assertTrue(args.dry_run)

    def test_missing_pool(self):
        with contextlib.redirect_stderr(io.StringIO()) as stderr:
            with self.assertRaises(SystemExit) as context:
                self._parser.parse_args([])
        self.assertEqual(context.exception.code, 2)
        self.assertIn("usage:", stderr.getvalue())

    def test_invalid_values(self):
        for argv in (
            ["tank", "-5"],
            ["tank", "lots"],
            ["--settle-interval=soon", "tank"],
            ["--intraday-scope=dataset", "tank"],
        ):
            with self.subTest(argv=argv):
                with contextlib.redirect_stderr(io.StringIO()):
                    with self.assertRaises(SystemExit) as context:
                        self._parser.parse_args(argv)
                self.assertEqual(context.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
