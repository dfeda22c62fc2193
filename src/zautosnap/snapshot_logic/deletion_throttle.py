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
"""Concurrent dispatch of snapshot operations.

A TaskScope owns every task dispatched through it; join() waits for all of them.
A DeletionThrottle, shared by all scopes that destroy snapshots, caps how many
destroy operations are in flight across the process.
"""

import concurrent.futures
import logging
import threading

from typing import Any, Callable, Optional

# Default cap on concurrently running destroy operations.
DEFAULT_MAX_IN_FLIGHT = 16


class DeletionThrottle:
    def __init__(self, max_in_flight: int = DEFAULT_MAX_IN_FLIGHT) -> None:
        if max_in_flight < 1:
            raise ValueError(f"max_in_flight must be at least 1, got {max_in_flight}")
        self._max_in_flight = max_in_flight
        self._slots = threading.BoundedSemaphore(max_in_flight)
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def max_in_flight(self) -> int:
        return self._max_in_flight

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def acquire(self) -> None:
        """Blocks until fewer than max_in_flight operations are running."""
        if not self._slots.acquire(blocking=False):
            logging.debug(f"Waiting, {self.in_flight} deletions in flight.")
            self._slots.acquire()
        with self._lock:
            self._in_flight += 1

    def release(self) -> None:
        with self._lock:
            self._in_flight -= 1
        self._slots.release()


class TaskScope:
    """Runs fire-and-forget tasks on a thread pool until joined.

    Tasks return a bool for success. A task that returns False or raises is
    counted as failed; exceptions are logged and never propagate to the caller.
    """

    def __init__(
        self,
        max_workers: int,
        throttle: Optional[DeletionThrottle] = None,
        name: str = "task",
    ) -> None:
        self._throttle = throttle
        self._name = name
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=name
        )
        self._pending: list[concurrent.futures.Future[bool]] = []
        self.dispatched = 0
        self.failed = 0

    def __enter__(self) -> "TaskScope":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.join()
        self._executor.shutdown(wait=True)

    def _run(self, fn: Callable[..., bool], args: tuple[Any, ...]) -> bool:
        try:
            return fn(*args)
        finally:
            if self._throttle is not None:
                self._throttle.release()

    def dispatch(self, fn: Callable[..., bool], *args: Any) -> None:
        if self._throttle is not None:
            self._throttle.acquire()
        try:
            future = self._executor.submit(self._run, fn, args)
        except RuntimeError:
            if self._throttle is not None:
                self._throttle.release()
            raise
        self._pending.append(future)
        self.dispatched += 1

    def join(self) -> int:
        """Waits for all dispatched tasks. Returns how many failed since last join."""
        pending, self._pending = self._pending, []
        concurrent.futures.wait(pending)
        failed = 0
        for future in pending:
            exc = future.exception()
            if exc is not None:
                logging.error(f"{self._name} failed: {exc!r}")
                failed += 1
            elif not future.result():
                failed += 1
        self.failed += failed
        return failed
