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

import argparse
import datetime
import logging
import sys
import time

from . import arg_parser
from . import configs
from . import global_flags
from .mechanisms import abstract_mechanism
from .mechanisms import zfs_mechanism
from .snapshot_logic import consolidator
from .snapshot_logic import creator
from .snapshot_logic import deletion_throttle
from .snapshot_logic import evictor
from .snapshot_logic import space_gauge
from .utils import colored_logs
from .utils import os_utils
from .utils import run_lock

from typing import Callable


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = arg_parser.make_parser()
    args = parser.parse_args(argv)
    return args


def run_once(
    config: configs.Config,
    engine: abstract_mechanism.SnapMechanism,
    now: datetime.datetime,
    sleep: Callable[[float], None] = time.sleep,
) -> evictor.EvictionResult:
    """One full pass: consolidate, evict, then snapshot the pool."""
    # Single timestamp for all operations.
    thresholds = config.thresholds(now)
    label = now.strftime(global_flags.TIME_FORMAT)

    gauge = space_gauge.SpaceGauge(engine, config.pool)
    gauge.available()

    # Shared, so that both deletion passes together stay under the cap.
    throttle = deletion_throttle.DeletionThrottle(config.max_concurrent_deletes)

    intraday = consolidator.IntradayConsolidator(
        engine,
        throttle,
        thresholds.intraday_ceiling,
        pool=config.pool if config.intraday_scope == "pool" else None,
    )
    intraday.run()

    result = evictor.SpaceEvictor(
        engine,
        gauge,
        throttle,
        thresholds,
        settle_secs=config.settle_interval,
        sleep=sleep,
    ).run(settle_first=bool(intraday.deleted))
    logging.info(f"Eviction finished: {result.stop_reason.value}")

    if config.create:
        created = creator.SnapshotCreator(engine, label).create_all(config.pool)
        logging.info(f"Created {len(created)} snapshots labelled {label}.")
    return result


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.dry_run:
        global_flags.FLAGS.dryrun = True

    colored_logs.setup_logging(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        config = configs.Config.from_args(args)
    except ValueError as exc:
        os_utils.fatal_error(str(exc))

    if config.log_file:
        colored_logs.add_file_handler(config.log_file)

    now = datetime.datetime.now()
    with run_lock.hold(config.effective_lock_file) as acquired:
        if not acquired:
            return 0
        run_once(config, zfs_mechanism.ZfsSnapMechanism(), now)
    return 0


if __name__ == "__main__":
    sys.exit(main())
