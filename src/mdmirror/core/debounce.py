"""Cancellable scheduled tasks with "coalesce to latest" semantics.

A ``Debouncer`` owns at most one outstanding timer.  Calling ``schedule()``
again before it fires cancels the previous timer and starts a new one, so
a burst of calls results in exactly one execution after activity pauses.

Callbacks may be plain functions or coroutine functions.  Coroutines are
launched as tasks on the running loop and tracked until they finish, so
callers can ``await drain()`` before tearing a session down.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

from .async_utils import settle

logger = logging.getLogger(__name__)


class Debouncer:
    """Debounced invocation of *callback* after *delay* seconds of quiet.

    Args:
        delay: Quiet period in seconds.
        callback: Function or coroutine function taking no arguments.
        name: Label used in log messages.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Any],
        name: str = "debounce",
    ) -> None:
        self.delay = delay
        self.name = name
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self.fired = 0

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self) -> None:
        """Arm the timer, replacing any outstanding one."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Disarm the timer.  Already-running callbacks are not interrupted."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for callbacks launched by this debouncer to complete."""
        await settle(self._tasks)

    def _fire(self) -> None:
        self._handle = None
        self.fired += 1
        logger.debug("%s timer fired", self.name)
        result = self._callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
