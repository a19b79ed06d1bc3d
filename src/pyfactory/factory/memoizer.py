# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""One-time execution: run a zero-argument provider once and share its value."""

from __future__ import annotations

import enum
import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

from pyfactory.factory.exceptions import RecursiveExecutionError
from pyfactory.signature.types import type_name

T = TypeVar("T")

logger = structlog.get_logger("pyfactory.factory.memoizer")


class WaitStrategy(str, enum.Enum):
    """How callers losing the race wait for the running computation."""

    PARK = "park"
    SPIN = "spin"


class ExecutionState(enum.Enum):
    UNSTARTED = "unstarted"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class OneTimeExecution(Generic[T]):
    """Lazy single-flight memoizer around a zero-argument factory.

    The first caller acquires a single-permit semaphore and runs the factory;
    concurrent callers wait (parked on the semaphore, or spinning on
    non-blocking acquires) and then read the stored value. After the first
    success the accessor is swapped for a plain read, so later calls take no
    lock at all. A failure resets the slot so a later call retries, and a
    factory that calls back into its own memoizer on the same thread gets a
    :class:`RecursiveExecutionError` instead of a deadlock.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        *,
        name: str | None = None,
        wait_strategy: WaitStrategy = WaitStrategy.PARK,
        spin_interval: float = 0.0,
    ) -> None:
        self._factory = factory
        self._name = name or type_name(factory)
        self._wait_strategy = WaitStrategy(wait_strategy)
        self._spin_interval = spin_interval
        self._permit = threading.Semaphore(1)
        self._state = ExecutionState.UNSTARTED
        self._value: T | None = None
        self._owner: int | None = None
        self._accessor: Callable[[], T] = self._execute

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> ExecutionState:
        return self._state

    @property
    def is_done(self) -> bool:
        return self._state is ExecutionState.DONE

    def __call__(self) -> T:
        return self._accessor()

    def __repr__(self) -> str:
        return f"OneTimeExecution({self._name}, {self._state.value})"

    def reset(self) -> None:
        """Forget the memoized value; the next call runs the factory again."""
        self._acquire()
        try:
            self._value = None
            self._state = ExecutionState.UNSTARTED
            self._accessor = self._execute
        finally:
            self._permit.release()

    def update_to(self, value: T) -> None:
        """Replace the memoized value without running the factory."""
        self._acquire()
        try:
            self._store(value)
        finally:
            self._permit.release()

    def _stored(self) -> T:
        return self._value  # type: ignore[return-value]

    def _store(self, value: T) -> None:
        self._value = value
        self._state = ExecutionState.DONE
        self._accessor = self._stored

    def _execute(self) -> T:
        if self._owner == threading.get_ident():
            raise RecursiveExecutionError(self._name)
        self._acquire()
        try:
            if self._state is ExecutionState.DONE:
                return self._stored()
            self._state = ExecutionState.IN_PROGRESS
            self._owner = threading.get_ident()
            try:
                value = self._factory()
            except BaseException:
                self._state = ExecutionState.UNSTARTED
                raise
            finally:
                self._owner = None
            self._store(value)
            logger.debug("memoizer.executed", name=self._name)
            return value
        finally:
            self._permit.release()

    def _acquire(self) -> None:
        if self._wait_strategy is WaitStrategy.PARK:
            self._permit.acquire()
            return
        while not self._permit.acquire(blocking=False):
            time.sleep(self._spin_interval)
