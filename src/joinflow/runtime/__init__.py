"""Runtime: the Group primitive, its scheduler and asyncio bridges."""

from __future__ import annotations

from .concurrency import LoopScheduler, Scheduler, call_async, default_scheduler, fill_from, gather_into, threadsafe
from .group import OWNER_KEY, Group, GroupState, SlotFiller, group

__all__ = [
    # Group
    "Group",
    "GroupState",
    "SlotFiller",
    "OWNER_KEY",
    "group",
    # Scheduling & interop
    "Scheduler",
    "LoopScheduler",
    "default_scheduler",
    "fill_from",
    "gather_into",
    "call_async",
    "threadsafe",
]
