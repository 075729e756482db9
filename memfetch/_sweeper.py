from __future__ import annotations

import logging
import math
import typing as tp

import anyio
from anyio.abc import TaskGroup

from ._controller import Controller
from ._exceptions import InvalidIntervalError
from ._storages import BaseStorage

logger = logging.getLogger("memfetch.sweeper")

__all__ = ("Sweeper", "DEFAULT_CLEANUP_INTERVAL", "MINIMUM_CLEANUP_INTERVAL")

DEFAULT_CLEANUP_INTERVAL = 10.0
MINIMUM_CLEANUP_INTERVAL = 0.001


def validate_interval(interval: tp.Any) -> float:
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise InvalidIntervalError(f"{interval!r} is an invalid time for the cache-cleanup interval.")
    if math.isnan(interval) or interval < MINIMUM_CLEANUP_INTERVAL:
        raise InvalidIntervalError(f"{interval!r} is an invalid time for the cache-cleanup interval.")
    return float(interval)


class Sweeper:
    """
    Periodically removes expired responses from a storage.

    The sweeper runs as a task inside an anyio task group. Every schedule gets
    its own cancel scope; rescheduling cancels the previous scope before the
    new task is started, so only one timer is ever active.

    :param storage: Storage to sweep
    :type storage: BaseStorage
    :param controller: Controller deciding whether a stored response is expired
    :type controller: Controller
    :param interval: Seconds between two sweeps, defaults to 10
    :type interval: float, optional
    """

    def __init__(
        self,
        storage: BaseStorage,
        controller: Controller,
        interval: float = DEFAULT_CLEANUP_INTERVAL,
    ) -> None:
        self._storage = storage
        self._controller = controller
        self._interval = validate_interval(interval)
        self._task_group: tp.Optional[TaskGroup] = None
        self._cancel_scope: tp.Optional[anyio.CancelScope] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._cancel_scope is not None

    def sweep(self) -> tp.List[str]:
        now = self._controller.clock.now()
        removed = self._storage.evict(lambda entry: self._controller.is_expired(entry.headers, now))
        logger.debug(f"Sweep finished, {len(removed)} expired responses removed.")
        return removed

    def start(self, task_group: TaskGroup) -> None:
        if self._task_group is not None:
            raise RuntimeError("The sweeper is already started.")
        self._task_group = task_group
        self._schedule()

    def stop(self) -> None:
        self._cancel()
        self._task_group = None

    def reschedule(self, interval: tp.Any) -> None:
        """
        Replaces the sweep interval.

        An invalid interval raises `InvalidIntervalError` and leaves the current
        interval and the running timer untouched.
        """
        self._interval = validate_interval(interval)
        logger.debug(f"Cache-cleanup interval set to {self._interval} seconds.")

        if self._task_group is not None:
            self._schedule()

    def _schedule(self) -> None:
        if self._task_group is None:
            raise RuntimeError("The sweeper is not started.")
        self._cancel()
        cancel_scope = anyio.CancelScope()
        self._cancel_scope = cancel_scope
        self._task_group.start_soon(self._run, cancel_scope, self._interval)

    def _cancel(self) -> None:
        if self._cancel_scope is not None:
            self._cancel_scope.cancel()
            self._cancel_scope = None

    async def _run(self, cancel_scope: anyio.CancelScope, interval: float) -> None:
        with cancel_scope:
            while True:
                await anyio.sleep(interval)
                try:
                    self.sweep()
                except Exception:
                    logger.exception("Sweeping the cache failed, retrying on the next tick.")
