"""Scheduling and asyncio interop for groups.

Key Components:
    - Scheduler/LoopScheduler: next-tick posting on the asyncio loop
    - fill_from, gather_into: feed awaitables into group slots
    - call_async: await an error-first-callback style function
    - threadsafe: invoke fillers from worker threads

Design Philosophy:
    - Single-threaded: every group mutation happens on the loop thread
    - Never synchronous: fills and continuations run on a later iteration
    - Zero external dependencies: pure asyncio
"""

from __future__ import annotations

from .interop import call_async, fill_from, gather_into, threadsafe
from .scheduler import LoopScheduler, Scheduler, default_scheduler

__all__ = [
    # Scheduling
    "Scheduler",
    "LoopScheduler",
    "default_scheduler",
    # Interop
    "fill_from",
    "gather_into",
    "call_async",
    "threadsafe",
]
