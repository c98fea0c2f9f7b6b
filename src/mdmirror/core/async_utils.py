"""Async utilities for bridging blocking calls into the editor event loop."""

import asyncio
import logging
from typing import Any, Callable, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Used for file I/O and for the diagram CLI subprocess, both of which
    would otherwise stall debounce timers and scroll callbacks.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        content, encoding = await run_sync(read_file_with_encoding, path)
    """
    return await asyncio.to_thread(func, *args, **kwargs)


async def settle(tasks: set[asyncio.Task]) -> None:
    """Wait until every task in *tasks* (including ones added meanwhile) is done.

    Exceptions are not re-raised here; the tasks' own handlers are
    responsible for logging them.
    """
    while True:
        pending = [t for t in tasks if not t.done()]
        if not pending:
            return
        await asyncio.gather(*pending, return_exceptions=True)
