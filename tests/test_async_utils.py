"""
Tests for async_utils module.

Covers run_sync and settle.
"""

import asyncio
import threading

from mdmirror.core.async_utils import run_sync, settle


def _sync_add(a: int, b: int) -> int:
    """Simple sync function for testing."""
    return a + b


async def test_run_sync_calls_function():
    """run_sync delegates to asyncio.to_thread with correct args."""
    result = await run_sync(_sync_add, 3, 4)
    assert result == 7


async def test_run_sync_passes_kwargs():
    """run_sync forwards keyword arguments."""

    def _kw_func(*, name: str) -> str:
        return f"hello {name}"

    result = await run_sync(_kw_func, name="world")
    assert result == "hello world"


async def test_run_sync_runs_off_loop_thread():
    """The function runs in a worker thread, not the event-loop thread."""
    loop_thread = threading.get_ident()
    worker_thread = await run_sync(threading.get_ident)
    assert worker_thread != loop_thread


async def test_run_sync_propagates_exceptions():
    def _boom():
        raise OSError("disk gone")

    try:
        await run_sync(_boom)
    except OSError as exc:
        assert str(exc) == "disk gone"
    else:
        raise AssertionError("OSError not propagated")


async def test_settle_empty_set():
    await settle(set())


async def test_settle_waits_for_tasks():
    done = []

    async def _work(n):
        await asyncio.sleep(0.01)
        done.append(n)

    tasks = {asyncio.ensure_future(_work(i)) for i in range(3)}
    await settle(tasks)
    assert sorted(done) == [0, 1, 2]


async def test_settle_waits_for_tasks_added_meanwhile():
    """Tasks spawned while waiting are waited for as well."""
    tasks: set[asyncio.Task] = set()
    done = []

    async def _second():
        await asyncio.sleep(0.01)
        done.append("second")

    async def _first():
        tasks.add(asyncio.ensure_future(_second()))
        done.append("first")

    tasks.add(asyncio.ensure_future(_first()))
    await settle(tasks)
    assert done == ["first", "second"]


async def test_settle_swallows_task_errors():
    async def _fail():
        raise RuntimeError("boom")

    task = asyncio.ensure_future(_fail())
    await settle({task})
    assert task.done()
    assert isinstance(task.exception(), RuntimeError)
