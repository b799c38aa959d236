"""Result type for group outcomes.

A resolved Group is binary: it either fulfilled with an ordered tuple of
slot values or rejected with the first error it observed. ``Result`` makes
that explicit so error propagation through a chain is a value, not a raise.

Examples:
    >>> Result.from_slots([None, "a", "b"])
    Ok(('a', 'b'))
    >>> Result.from_slots(["boom", "a"]).unwrap_err()
    'boom'
    >>> outcome.match(ok=lambda values: values[0], err=report)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Result(Generic[T, E]):
    """Either the fulfilled values (Ok) or the rejecting error (Err)."""

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    @classmethod
    def from_slots(cls, slots: Sequence[Any]) -> Result[tuple[Any, ...], Any]:
        """Build from an error-first slot sequence ``[err, v1, v2, ...]``.

        A truthy slot 0 is the error; anything else fulfils with the rest.
        """
        err = slots[0] if slots else None
        if err:
            return Err(err)
        return Ok(tuple(slots[1:]))

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def unwrap(self) -> T:
        """Fulfilled values. Raises RuntimeError on Err."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap() on Err: {self._value!r}")

    def unwrap_err(self) -> E:
        """Rejecting error. Raises RuntimeError on Ok."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_err() on Ok: {self._value!r}")

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Dispatch on the outcome; exactly one branch runs."""
        if self._is_ok:
            return ok(self._value)  # type: ignore[arg-type]
        return err(self._value)  # type: ignore[arg-type]

    def __bool__(self) -> bool:
        return self._is_ok

    def __repr__(self) -> str:
        kind = "Ok" if self._is_ok else "Err"
        return f"{kind}({self._value!r})"

    def __hash__(self) -> int:
        return hash((self._is_ok, self._value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._is_ok == other._is_ok and self._value == other._value


def Ok(value: T) -> Result[T, Any]:  # noqa: N802
    return Result(value, True)


def Err(error: E) -> Result[Any, E]:  # noqa: N802
    return Result(error, False)
