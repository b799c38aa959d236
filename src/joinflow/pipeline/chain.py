"""Step chaining over successive groups.

A chain turns a list of step functions into one callable taking leading
arguments and a final error-first callback. Each step runs inside its own
Group and whatever it reserves or passes becomes the next step's input:

    step(group, err, *values)

Two folding methods:
    - THEN (``compose``/``run``): a step runs only if the previous group
      fulfilled. An error skips straight to the final callback.
    - ANYWAY (``compose_handling``/``run_handling``): every step sees the
      error and decides what to do with it.

Example:
    >>> def read(g, err, path):
    ...     read_file(path, g.slot())
    >>> def upper(g, err, text):
    ...     g.pass_(text.upper())
    >>> shout = compose(read, upper)
    >>> shout("notes.txt", lambda err, text: print(err or text))
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Callable

from joinflow.foundation.errors import ChainError, ErrorCode, FlowException
from joinflow.runtime.group import OWNER_KEY, Group

logger = logging.getLogger("joinflow.chain")

Step = Callable[..., object]


class ChainMethod(StrEnum):
    """Group method used to attach each step."""
    THEN = "then"
    ANYWAY = "anyway"


def _validate_steps(steps: Sequence[Step]) -> tuple[Step, ...]:
    for i, step in enumerate(steps):
        if not callable(step):
            raise ChainError.create(
                f"step {i} is not callable",
                ErrorCode.INVALID_STEP,
                details=repr(step),
            )
    return tuple(steps)


def _split_callback(args: Sequence[Any]) -> tuple[tuple[Any, ...], Callable[..., object]]:
    if not args or not callable(args[-1]):
        raise ChainError.create("Callback is missing", ErrorCode.MISSING_CALLBACK)
    return tuple(args[:-1]), args[-1]


@dataclass(frozen=True, slots=True)
class ComposedChain:
    """Reusable chain of steps: ``chain(*args, callback)``.

    Stored as a class attribute it binds like a method: the instance it is
    accessed through becomes the chain's owner, readable from every step as
    ``group.owner``.

    Attributes:
        steps: Step functions in execution order
        method: How each step is attached (then or anyway)
        owner: Receiver stored in the shared context under ``"self"``
    """

    steps: tuple[Step, ...]
    method: ChainMethod = ChainMethod.THEN
    owner: Any = field(default=None, compare=False)

    def __call__(self, *args: Any) -> None:
        init_args, callback = _split_callback(args)
        start = Group({OWNER_KEY: self.owner}).resolve(None, *init_args)
        attach = self.method.value
        tail = functools.reduce(lambda chain, step: getattr(chain, attach)(step), self.steps, start)
        logger.debug(
            "Chain of %d step(s) started via %s",
            len(self.steps),
            attach,
            extra={"steps": len(self.steps), "method": attach},
        )
        tail.end(callback)

    def bind(self, owner: Any) -> ComposedChain:
        """Copy of this chain with ``owner`` as receiver."""
        return replace(self, owner=owner)

    def __get__(self, instance: Any, objtype: type | None = None) -> ComposedChain:
        return self if instance is None else self.bind(instance)


def compose(*steps: Step) -> ComposedChain:
    """Chain steps with ``then``: errors skip the remaining steps."""
    return ComposedChain(_validate_steps(steps), ChainMethod.THEN)


def compose_handling(*steps: Step) -> ComposedChain:
    """Chain steps with ``anyway``: every step receives the error."""
    return ComposedChain(_validate_steps(steps), ChainMethod.ANYWAY)


def run(*steps_and_callback: Step) -> None:
    """Compose the steps with ``then`` and run them at once.

    The last argument is the final ``callback(err, *values)``.
    """
    steps, callback = _split_callback(steps_and_callback)
    compose(*steps)(callback)


def run_handling(*steps_and_callback: Step) -> None:
    """Like run(), folding with ``anyway``."""
    steps, callback = _split_callback(steps_and_callback)
    compose_handling(*steps)(callback)


def raise_if_error(fn: Step) -> Step:
    """Step decorator re-raising a truthy ``err`` before ``fn`` runs.

    Inside a handling chain this turns a step back into a pass-through for
    errors. Non-exception errors are raised wrapped in FlowException.
    """
    @functools.wraps(fn)
    def step(group: Group, err: object = None, *values: Any) -> object:
        if err:
            raise err if isinstance(err, BaseException) else FlowException.rejected(err)
        return fn(group, err, *values)
    return step
