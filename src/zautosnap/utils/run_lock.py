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
"""Prevents two runs against the same pool from overlapping."""

import contextlib
import logging
import os
import tempfile

from filelock import FileLock, Timeout

from typing import Iterator


def default_lock_file(pool: str) -> str:
    return os.path.join(tempfile.gettempdir(), f"zfs-autosnap-{pool}.lock")


@contextlib.contextmanager
def hold(lock_file: str | None) -> Iterator[bool]:
    """Tries to take the lock without waiting.

    Yields True if the lock is held for the duration of the block, False if
    another process has it. If lock_file is empty or None, no lock is taken and
    True is yielded.
    """
    if not lock_file:
        yield True
        return

    lock = FileLock(lock_file, timeout=0)
    try:
        lock.acquire()
    except Timeout:
        logging.warning(
            f"Could not acquire {lock_file}. Another instance may be running."
        )
        yield False
        return

    logging.info(f"Acquired lock: {lock_file}")
    try:
        yield True
    finally:
        lock.release()
