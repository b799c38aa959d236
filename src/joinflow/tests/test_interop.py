"""Tests for asyncio interop helpers."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable

import pytest

from joinflow import FlowException, Group, LoopScheduler, Ok, call_async, fill_from, gather_into, threadsafe
from loop_helpers import echo_async, soon, spread_async


async def delayed(value: Any, delay: float = 0.0) -> Any:
    await asyncio.sleep(delay)
    return value


async def failing(exc: BaseException) -> None:
    await asyncio.sleep(0)
    raise exc


@pytest.mark.asyncio
async def test_gather_into_keeps_argument_order() -> None:
    g = Group()
    gather_into(g, delayed("slow", 0.02), delayed("fast"))
    g.pass_("sync")

    assert (await g.wait()) == Ok(("slow", "fast", "sync"))


@pytest.mark.asyncio
async def test_gather_into_multi_spreads_sequences() -> None:
    g = Group()
    gather_into(g, delayed(("a", "b")), delayed(["c"]), multi=True)

    assert (await g.wait()) == Ok((["a", "b"], ["c"]))


@pytest.mark.asyncio
async def test_gather_into_multi_rejects_non_iterable_result() -> None:
    g = Group()
    gather_into(g, delayed(("a",)), delayed(7), multi=True)

    err = (await asyncio.wait_for(g.wait(), 1)).unwrap_err()
    assert isinstance(err, TypeError)
    assert g.outcome is not None and g.outcome.is_err()


@pytest.mark.asyncio
async def test_fill_from_reports_exceptions() -> None:
    error = ValueError("bad")
    g = Group()
    task = fill_from(failing(error), g.slot())

    assert (await g.wait()).unwrap_err() is error
    assert task.done()


@pytest.mark.asyncio
async def test_fill_from_reports_cancellation() -> None:
    g = Group()
    task = fill_from(delayed("never", 10), g.slot())
    await asyncio.sleep(0)
    task.cancel()

    assert isinstance((await g.wait()).unwrap_err(), asyncio.CancelledError)


@pytest.mark.asyncio
async def test_call_async_returns_first_value() -> None:
    assert await call_async(echo_async, "hello") == "hello"


@pytest.mark.asyncio
async def test_call_async_multi_returns_all_values() -> None:
    def legacy(a: int, b: int, callback: Callable[..., object]) -> None:
        spread_async(callback, a + b, a * b)

    assert await call_async(legacy, 2, 3, multi=True) == [5, 6]


@pytest.mark.asyncio
async def test_call_async_raises_exception_errors() -> None:
    def legacy(callback: Callable[..., object]) -> None:
        soon(callback, KeyError("missing"))

    with pytest.raises(KeyError):
        await call_async(legacy)


@pytest.mark.asyncio
async def test_call_async_wraps_plain_errors() -> None:
    def legacy(callback: Callable[..., object]) -> None:
        soon(callback, "not an exception")

    with pytest.raises(FlowException, match="not an exception"):
        await call_async(legacy)


@pytest.mark.asyncio
async def test_threadsafe_filler_from_worker_thread() -> None:
    g = Group()
    filler = threadsafe(g.slot())

    worker = threading.Thread(target=filler, args=(None, "from thread"))
    worker.start()
    await asyncio.to_thread(worker.join)

    assert (await asyncio.wait_for(g.wait(), 1)) == Ok(("from thread",))


@pytest.mark.asyncio
async def test_loop_scheduler_bound_to_loop() -> None:
    loop = asyncio.get_running_loop()
    scheduler = LoopScheduler(loop)
    g = Group(scheduler=scheduler)
    g.pass_(1)

    assert (await g.wait()) == Ok((1,))


@pytest.mark.asyncio
async def test_loop_scheduler_threadsafe_post() -> None:
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    scheduler = LoopScheduler(loop)

    threading.Thread(target=scheduler.call_soon_threadsafe, args=(done.set_result, "posted")).start()

    assert await asyncio.wait_for(done, 1) == "posted"


def test_unbound_scheduler_rejects_threadsafe_post() -> None:
    with pytest.raises(RuntimeError):
        LoopScheduler().call_soon_threadsafe(print)


def test_scheduling_without_running_loop_raises() -> None:
    g = Group()
    with pytest.raises(RuntimeError):
        g.pass_("no loop")
