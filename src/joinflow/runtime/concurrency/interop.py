"""Bridges between error-first callbacks and asyncio.

Provides utilities for mixing callback-style groups with coroutine code:
    - fill_from: Feed an awaitable's outcome into a slot filler
    - gather_into: Reserve one slot per awaitable, in order
    - call_async: Await a function that reports through an error-first callback
    - threadsafe: Let a worker thread invoke a filler safely

Example:
    >>> g = Group()
    >>> gather_into(g, fetch("a"), fetch("b"))
    >>> outcome = await g.wait()

    >>> # Callback-style API used from a coroutine
    >>> data = await call_async(legacy_read, "file.txt")
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any, Callable, NoReturn, TypeVar

from joinflow.foundation.errors import FlowException

if TYPE_CHECKING:
    from joinflow.runtime.group import Group

T = TypeVar("T")

logger = logging.getLogger("joinflow.interop")

ErrorFirst = Callable[..., object]

# Strong references to bridge tasks until they finish
_background: set[asyncio.Task[Any]] = set()


def fill_from(awaitable: Awaitable[T], filler: ErrorFirst) -> asyncio.Task[T]:
    """Run ``awaitable`` as a task and report its outcome to ``filler``.

    A raised exception (cancellation included) is passed as the error;
    otherwise the filler receives ``(None, result)``.
    """
    task: asyncio.Task[T] = asyncio.ensure_future(awaitable)
    _background.add(task)

    def _done(t: asyncio.Task[T]) -> None:
        _background.discard(t)
        if t.cancelled():
            filler(asyncio.CancelledError())
            return
        exc = t.exception()
        if exc is not None:
            filler(exc)
        else:
            filler(None, t.result())

    task.add_done_callback(_done)
    return task


def gather_into(group: Group, *awaitables: Awaitable[Any], multi: bool = False) -> list[asyncio.Task[Any]]:
    """Reserve a slot per awaitable (in argument order) and fill each one.

    With ``multi=True`` each awaitable's result is spread into the slot as a
    list; a result that is not iterable rejects the group with TypeError.
    """
    tasks: list[asyncio.Task[Any]] = []
    for aw in awaitables:
        filler = group.slot(multi)
        if multi:
            filler = _spreading(filler)
        tasks.append(fill_from(aw, filler))
    return tasks


def _spreading(filler: ErrorFirst) -> ErrorFirst:
    @functools.wraps(filler)
    def spread(err: object = None, values: Any = ()) -> None:
        if err:
            filler(err)
            return
        try:
            items = tuple(values)
        except TypeError as exc:
            filler(exc)
            return
        filler(None, *items)
    return spread


async def call_async(fn: Callable[..., object], *args: Any, multi: bool = False) -> Any:
    """Call ``fn(*args, callback)`` and await what the callback reports.

    Returns the first data value, or a list of all of them with ``multi``.

    Raises:
        BaseException: The reported error, if it is an exception
        FlowException: Wrapping any other truthy error value
    """
    from joinflow.runtime.group import Group

    g = Group()
    fn(*args, g.slot(multi))
    outcome = await g.wait()
    return outcome.match(ok=lambda values: values[0], err=_raise_error)


def _raise_error(err: object) -> NoReturn:
    if isinstance(err, BaseException):
        raise err
    raise FlowException.rejected(err)


def threadsafe(filler: ErrorFirst, loop: asyncio.AbstractEventLoop | None = None) -> ErrorFirst:
    """Wrap ``filler`` so it can be called from a thread outside the loop.

    The loop defaults to the one running when ``threadsafe`` is called.
    """
    target = loop or asyncio.get_running_loop()

    @functools.wraps(filler)
    def hop(*args: Any) -> None:
        if target.is_closed():
            logger.warning("Dropping callback for a closed event loop")
            return
        target.call_soon_threadsafe(lambda: filler(*args))

    return hop
