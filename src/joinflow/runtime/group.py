"""Group: join point for concurrent error-first callbacks.

A Group reserves ordered slots for the results of asynchronous operations
and resolves once every slot is filled or as soon as one of them reports an
error. Continuations attached with ``then``/``anyway``/``fail`` receive the
whole slot sequence, error first:

    callback(group, err, slot1, slot2, ...)

where ``group`` is a fresh child Group the continuation runs inside, so the
continuation can reserve slots of its own and the chain goes on from there.

Key Properties:
    - Slots are read back in reservation order, whatever the completion order
    - The first error wins; writes arriving after resolution are discarded
    - Slot fills and continuations always run on a later loop iteration
    - A subgroup collapses into exactly one slot of its parent

Example:
    >>> def body(g):
    ...     read_file("a.txt", g.slot())       # error-first async op
    ...     g.pass_("known value")
    ...     sub = g.subgroup()
    ...     for name in ("b.txt", "c.txt"):
    ...         read_file(name, sub.slot())
    >>> Group.chain(body).then(
    ...     lambda g, err, a, known, rest: g.pass_(a + known + "".join(rest))
    ... ).end(lambda err, text: print(err or text))
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections import deque
from enum import StrEnum
from typing import Any, Callable, Iterable

from joinflow.foundation.config import get_settings
from joinflow.foundation.errors import ErrorCode, Result, SlotError
from joinflow.runtime.concurrency.scheduler import Scheduler, default_scheduler

logger = logging.getLogger("joinflow.group")

# Context key under which the composer stores the receiver of a chain call
OWNER_KEY = "self"

Continuation = Callable[..., object]


class GroupState(StrEnum):
    """Resolution states. Terminal once left UNRESOLVED."""
    UNRESOLVED = "unresolved"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class SlotFiller:
    """Error-first callback bound to one reserved slot.

    Calling it with a truthy ``err`` fails the whole group. Otherwise the
    slot receives the first data argument, or all of them as a list when the
    slot was reserved with ``multi=True``. The write itself happens on the
    next loop iteration.
    """

    __slots__ = ("_group", "index", "multi", "_called")

    def __init__(self, group: Group, index: int, multi: bool) -> None:
        self._group = group
        self.index = index
        self.multi = multi
        self._called = False

    @property
    def called(self) -> bool:
        return self._called

    def __call__(self, err: object = None, *values: Any) -> None:
        if self._called:
            if self._group._strict:
                raise SlotError.create(
                    "slot filler invoked more than once",
                    ErrorCode.SLOT_ALREADY_FILLED,
                    details=f"slot={self.index}",
                )
            logger.warning("Ignoring repeated fill of slot %d", self.index, extra={"slot": self.index})
            return
        self._called = True
        self._group._scheduler.call_soon(self._group._settle_slot, self.index, self.multi, err, values)

    def __repr__(self) -> str:
        kind = "multi" if self.multi else "single"
        return f"<SlotFiller {self.index} {kind}{' called' if self._called else ''}>"


def _propagate(group: Group, *slots: Any) -> None:
    """Default callback: hand the slots on unchanged."""
    group.resolve(*slots)


def _forward_error(group: Group, err: object, *_: Any) -> None:
    """Default errback: pass the error down the chain as a value."""
    group.error(err)


class Group:
    """Join/resolution primitive over an ordered set of slots.

    Args:
        context: Mapping shared by reference with every group chained from
            this one via then/anyway/fail. A new dict is used when omitted.
        scheduler: Next-tick scheduler (defaults to the running asyncio loop)
    """

    __slots__ = (
        "context", "_scheduler", "_state", "_slots", "_pending",
        "_callbacks", "_errbacks", "_outcome", "_strict", "_log_discarded",
    )

    def __init__(self, context: dict[str, Any] | None = None, *, scheduler: Scheduler | None = None) -> None:
        settings = get_settings().group
        self.context: dict[str, Any] = context if context is not None else {}
        self._scheduler = scheduler or default_scheduler()
        self._state = GroupState.UNRESOLVED
        self._slots: list[Any] = [None]  # slot 0 holds the error
        self._pending = 0
        self._callbacks: deque[Continuation] = deque()
        self._errbacks: deque[Continuation] = deque()
        self._outcome: Result[tuple[Any, ...], Any] | None = None
        self._strict = settings.strict_fillers
        self._log_discarded = settings.log_discarded

    # ─── Constructors ────────────────────────────────────────────────

    @classmethod
    def when(
        cls,
        err: object = None,
        *values: Any,
        context: dict[str, Any] | None = None,
        scheduler: Scheduler | None = None,
    ) -> Group:
        """Start a chain from an already known ``(err, *values)``."""
        return cls(context, scheduler=scheduler).resolve(err, *values)

    @classmethod
    def chain(cls, fn: Callable[..., object], *args: Any) -> Group:
        """Start a chain by running ``fn(group, *args)`` inside a new group."""
        return cls().fapply(fn, args)

    # ─── Inspection ──────────────────────────────────────────────────

    @property
    def state(self) -> GroupState:
        return self._state

    @property
    def resolved(self) -> bool:
        return self._state is not GroupState.UNRESOLVED

    @property
    def pending(self) -> int:
        """Number of reserved slots not yet filled."""
        return self._pending

    @property
    def slots(self) -> tuple[Any, ...]:
        """Snapshot of the slot sequence, error first."""
        return tuple(self._slots)

    @property
    def outcome(self) -> Result[tuple[Any, ...], Any] | None:
        """Ok(values) or Err(error) once resolved, None before."""
        return self._outcome

    @property
    def owner(self) -> Any:
        """Receiver the surrounding composed chain was called on, if any."""
        return self.context.get(OWNER_KEY)

    # ─── Explicit resolution ─────────────────────────────────────────

    def resolve(self, err: object = None, *values: Any) -> Group:
        """Replace the slot sequence with ``[err, *values]`` and resolve.

        First caller wins: on a resolved group this is a no-op.
        """
        if self.resolved:
            self._discard("resolve", err)
            return self
        self._slots = [err, *values]
        self._on_resolve()
        return self

    def error(self, err: object) -> Group:
        """Reject the group with ``err`` unless it already resolved."""
        return self.resolve(err)

    # ─── Running code inside the group ───────────────────────────────

    def fcall(self, fn: Callable[..., object], *args: Any) -> Group:
        """Run ``fn(self, *args)``; a raised exception rejects the group.

        Returns the group itself so chaining works after a failure too.
        """
        try:
            fn(self, *args)
        except Exception as exc:
            self.error(exc)
        return self

    def fapply(self, fn: Callable[..., object], args: Iterable[Any] = ()) -> Group:
        return self.fcall(fn, *args)

    def fbind(self, fn: Callable[..., object]) -> Callable[..., Group]:
        """Reusable callable running ``fn`` inside this group on every call."""
        @functools.wraps(fn)
        def bound(*args: Any) -> Group:
            return self.fapply(fn, args)
        return bound

    # ─── Slots ───────────────────────────────────────────────────────

    def slot(self, multi: bool = False) -> SlotFiller:
        """Reserve the next slot and return its error-first filler.

        Args:
            multi: Keep every data argument as a list instead of the first one
        """
        if self.resolved:
            self._discard("slot reservation", None)
            return SlotFiller(self, len(self._slots), multi)
        self._pending += 1
        self._slots.append(None)
        return SlotFiller(self, len(self._slots) - 1, multi)

    reserve_slot = slot

    def subgroup(self) -> Group:
        """Reserve one slot filled with the values of a new nested group.

        The nested group's values land in the slot as a list; its error
        rejects this group.
        """
        filler = self.slot(multi=True)
        nested = Group(scheduler=self._scheduler)
        nested.end(filler)
        return nested

    slot_group = subgroup
    spawn_subgroup = subgroup

    def pass_(self, *values: Any) -> None:
        """Put already known values into their own slots, in order.

        Reserves one slot per value, so a call with no values reserves none.
        """
        for value in values:
            self.slot()(None, value)

    def _settle_slot(self, index: int, multi: bool, err: object, values: tuple[Any, ...]) -> None:
        if self.resolved:
            self._discard("slot fill", err)
            return
        if err:
            self.error(err)
            return
        self._slots[index] = list(values) if multi else (values[0] if values else None)
        self._pending -= 1
        if not self._pending:
            self._on_resolve()

    # ─── Continuations ───────────────────────────────────────────────

    def then(self, callback: Continuation | None = None, errback: Continuation | None = None) -> Group:
        """Queue a continuation pair and return the group it runs inside.

        Both run as ``fn(child, err, *values)`` within a new child group that
        shares this group's context. Without a callback the values are passed
        on unchanged; without an errback the error is.
        """
        child = Group(self.context, scheduler=self._scheduler)
        self._enqueue(child.fbind(callback or _propagate), child.fbind(errback or _forward_error))
        return child

    def anyway(self, callback: Continuation) -> Group:
        """Same continuation for both outcomes."""
        return self.then(callback, callback)

    def fail(self, errback: Continuation) -> Group:
        return self.then(None, errback)

    def end(self, callback: Callable[..., object]) -> None:
        """Terminate the chain with a plain ``callback(err, *values)``.

        The callback is not sandboxed: whatever it raises reaches the event
        loop's exception handler.
        """
        self._enqueue(callback, callback)

    async def wait(self) -> Result[tuple[Any, ...], Any]:
        """Await resolution and return the group's outcome."""
        future: asyncio.Future[Result[tuple[Any, ...], Any]] = asyncio.get_running_loop().create_future()

        def settle(*_: Any) -> None:
            if not future.done():
                future.set_result(self._outcome)  # type: ignore[arg-type]

        self.end(settle)
        return await future

    # ─── Resolution machinery ────────────────────────────────────────

    def _enqueue(self, callback: Callable[..., object], errback: Callable[..., object]) -> None:
        self._callbacks.append(callback)
        self._errbacks.append(errback)
        self._flush()

    def _on_resolve(self) -> None:
        if self.resolved:
            return
        self._outcome = Result.from_slots(self._slots)
        self._state = GroupState.FULFILLED if self._outcome.is_ok() else GroupState.REJECTED
        logger.debug(
            "Group %s with %d slot(s)",
            self._state,
            len(self._slots) - 1,
            extra={"state": str(self._state), "slots": len(self._slots) - 1},
        )
        self._flush()

    def _flush(self) -> None:
        """Schedule the queue matching the outcome; drop the other one."""
        if not self.resolved:
            return
        queue = self._callbacks if self._state is GroupState.FULFILLED else self._errbacks
        while queue:
            self._scheduler.call_soon(queue.popleft(), *self._slots)
        self._callbacks.clear()
        self._errbacks.clear()

    def _discard(self, what: str, err: object) -> None:
        if self._log_discarded:
            logger.debug(
                "Discarded %s on %s group (error=%r)",
                what,
                self._state,
                err,
                extra={"state": str(self._state)},
            )

    def __repr__(self) -> str:
        return f"<Group {self._state} slots={len(self._slots) - 1} pending={self._pending}>"


def group(context: dict[str, Any] | None = None) -> Group:
    """Create an empty group."""
    return Group(context)
