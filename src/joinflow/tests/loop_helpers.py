"""Loop timing helpers for driving callback-style code in tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable

from joinflow.runtime.concurrency import fill_from


async def ticks(n: int = 10) -> None:
    """Let the loop run ``n`` iterations."""
    for _ in range(n):
        await asyncio.sleep(0)


def soon(fn: Callable[..., object], *args: Any) -> None:
    """Invoke ``fn(*args)`` on the next loop iteration."""
    asyncio.get_running_loop().call_soon(fn, *args)


def later(delay: float, fn: Callable[..., object], *args: Any) -> None:
    """Invoke ``fn(*args)`` after ``delay`` seconds."""
    asyncio.get_running_loop().call_later(delay, fn, *args)


def echo_async(value: Any, callback: Callable[..., object]) -> None:
    """Error-first async operation reporting ``value`` on the next tick."""
    soon(callback, None, value)


def spread_async(callback: Callable[..., object], *values: Any) -> None:
    """Error-first async operation reporting several values."""
    soon(callback, None, *values)


def fail_async(err: object, callback: Callable[..., object]) -> None:
    soon(callback, err)


async def end_args(group: Any, timeout: float = 1.0) -> tuple[Any, ...]:
    """Arguments the group's naked end callback is invoked with."""
    future: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()
    group.end(lambda *args: future.done() or future.set_result(args))
    return await asyncio.wait_for(future, timeout)


def callback_future() -> tuple[asyncio.Future[tuple[Any, ...]], Callable[..., None]]:
    """Future completed with the arguments of the first call to the callback."""
    future: asyncio.Future[tuple[Any, ...]] = asyncio.get_running_loop().create_future()

    def callback(*args: Any) -> None:
        if not future.done():
            future.set_result(args)

    return future, callback


def read_file(path: str | Path, callback: Callable[..., object]) -> None:
    """Error-first file read performed in a worker thread."""
    fill_from(asyncio.to_thread(Path(path).read_text, encoding="utf-8"), callback)
