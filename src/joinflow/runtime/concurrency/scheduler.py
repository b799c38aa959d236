"""Next-tick scheduling on the asyncio event loop.

Groups never apply a slot fill or run a continuation inside the caller's
stack. Everything observable is posted to the loop with ``call_soon`` so
that a step body finishes reserving all of its slots before any of them
can complete the group.

Example:
    >>> scheduler = LoopScheduler()
    >>> scheduler.call_soon(print, "runs on the next loop iteration")
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


@runtime_checkable
class Scheduler(Protocol):
    """Posts a callable to run on a later turn of a single-threaded loop."""

    def call_soon(self, fn: Callable[..., object], /, *args: object) -> None: ...


@dataclass(slots=True)
class LoopScheduler:
    """Scheduler backed by an asyncio event loop.

    With no explicit loop, the running loop is looked up on every call so a
    scheduler can be shared by groups created before the loop started.

    Raises:
        RuntimeError: If no loop was given and none is running
    """

    loop: asyncio.AbstractEventLoop | None = None

    def call_soon(self, fn: Callable[..., object], /, *args: object) -> None:
        loop = self.loop or asyncio.get_running_loop()
        loop.call_soon(fn, *args)

    def call_soon_threadsafe(self, fn: Callable[..., object], /, *args: object) -> None:
        """Post from a foreign thread. Requires an explicit loop."""
        if self.loop is None:
            raise RuntimeError("call_soon_threadsafe() requires a scheduler bound to a loop")
        self.loop.call_soon_threadsafe(fn, *args)


_default = LoopScheduler()


def default_scheduler() -> LoopScheduler:
    """Shared scheduler that follows whichever loop is running."""
    return _default
