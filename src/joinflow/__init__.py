"""joinflow - join concurrent error-first callbacks into one result.

Fan out several asynchronous operations, wait until every one of them has
completed (or any one failed) and continue with all of their results at
once, in the order they were started.

Quick Start:
    >>> from joinflow import Group
    >>>
    >>> def fetch_both(g):
    ...     fetch("users", g.slot())      # fetch(name, callback(err, value))
    ...     fetch("orders", g.slot())
    ...     g.pass_("extra")
    >>>
    >>> Group.chain(fetch_both).then(
    ...     lambda g, err, users, orders, extra: g.pass_(len(users), len(orders))
    ... ).end(lambda err, n_users, n_orders: print(err, n_users, n_orders))

Chains of Steps:
    >>> from joinflow import compose, run
    >>>
    >>> run(
    ...     lambda g, err: fetch("users", g.slot()),
    ...     lambda g, err, users: g.pass_([u.name for u in users]),
    ...     lambda err, names: print(err or names),
    ... )

From Coroutines:
    >>> outcome = await Group.chain(fetch_both).wait()
    >>> users, orders, extra = outcome.unwrap()

All scheduling happens on the running asyncio event loop.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .foundation.config import JoinflowSettings, clear_settings_cache, get_settings
from .foundation.errors import ChainError, Err, ErrorCode, FlowError, FlowException, Ok, Result, SlotError
from .pipeline import ChainMethod, ComposedChain, compose, compose_handling, raise_if_error, run, run_handling
from .runtime import (
    OWNER_KEY,
    Group,
    GroupState,
    LoopScheduler,
    Scheduler,
    SlotFiller,
    call_async,
    fill_from,
    gather_into,
    group,
    threadsafe,
)
from .runtime.observability import configure_from_settings, configure_logging

__all__ = [
    "__version__",
    # Group
    "Group", "GroupState", "SlotFiller", "OWNER_KEY", "group",
    # Chains
    "ChainMethod", "ComposedChain", "compose", "compose_handling", "run", "run_handling", "raise_if_error",
    # Scheduling & interop
    "Scheduler", "LoopScheduler", "fill_from", "gather_into", "call_async", "threadsafe",
    # Errors
    "ErrorCode", "FlowError", "FlowException", "SlotError", "ChainError", "Result", "Ok", "Err",
    # Config & logging
    "JoinflowSettings", "get_settings", "clear_settings_cache", "configure_logging", "configure_from_settings",
]
