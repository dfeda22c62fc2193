"""Sets up ArgumentParser for zfs-autosnap.

This should be kept free of logic other than parsing.
"""

import argparse

from .utils import human_interval

_EPILOG = """\
examples:
  %(prog)s tank 300
      Keep 300G free in tank, defaults for everything else.
  %(prog)s tank
      Defaults to 200G of free space, a minimum of 30 days of snapshots,
      and 7 days of intraday snapshots.
  %(prog)s tank 500 30 10
      Try to keep 500G free for 30 days, consolidating intraday snapshots
      older than 10 days.
"""


def _non_negative_int(value: str) -> int:
    result = int(value)
    if result < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return result


def _interval(value: str) -> float:
    try:
        return human_interval.parse_to_secs(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zfs-autosnap",
        description=(
            "Snapshots every dataset of a ZFS pool, and deletes old snapshots to "
            "keep free space above a minimum. Meant to be run from cron or a timer."
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("pool", help="Pool to snapshot and keep free space in.")
    # Optional positionals default to None so that a config file can set them.
    parser.add_argument(
        "min_free_space_gb",
        type=_non_negative_int,
        nargs="?",
        default=None,
        help="Free space to keep in gigabytes (default: 200).",
    )
    parser.add_argument(
        "keep_days",
        type=_non_negative_int,
        nargs="?",
        default=None,
        help="Never delete snapshots younger than this many days (default: 30).",
    )
    parser.add_argument(
        "keep_intraday_days",
        type=_non_negative_int,
        nargs="?",
        default=None,
        help="Keep all intraday snapshots for this many days (default: 7).",
    )

    parser.add_argument("--config-file", help="Path to an INI config file to use.")
    parser.add_argument(
        "--log-file",
        help="File to append the log to (default: /var/log/snapshots.log). "
        "Use '' to disable.",
    )
    parser.add_argument(
        "--lock-file",
        help="Lock file preventing concurrent runs on the same pool. Use '' to disable.",
    )
    parser.add_argument(
        "--max-concurrent-deletes",
        type=int,
        help="How many snapshots may be destroyed at once (default: 16).",
    )
    parser.add_argument(
        "--settle-interval",
        type=_interval,
        help="Wait after deletions before measuring free space, e.g. '5s' (default: 5s).",
    )
    parser.add_argument(
        "--intraday-scope",
        choices=("all", "pool"),
        help="Consolidate intraday snapshots of all datasets, or only of the pool "
        "(default: all).",
    )
    parser.add_argument(
        "--no-create",
        dest="create",
        action="store_false",
        default=None,
        help="Only delete; do not create new snapshots.",
    )
    parser.add_argument(
        "--dry-run",
        help="Disable all snapshot creation and deletion (dry run mode).",
        action="store_true",
    )
    parser.add_argument("--verbose", help="Set log level to INFO.", action="store_true")
    return parser
