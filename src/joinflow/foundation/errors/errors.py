"""Structured errors raised for caller mistakes.

Operation failures never raise through joinflow: they travel through slots
and errbacks. The exceptions here cover misuse of the API itself, such as
filling a slot twice or composing a chain without a final callback.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Machine-readable classification of joinflow errors."""
    SLOT_ALREADY_FILLED = "SLOT_ALREADY_FILLED"
    MISSING_CALLBACK = "MISSING_CALLBACK"
    INVALID_STEP = "INVALID_STEP"
    REJECTED = "REJECTED"
    UNKNOWN = "UNKNOWN"


# Codes describing a mistake at the call site rather than a failed operation
_USAGE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.SLOT_ALREADY_FILLED,
    ErrorCode.MISSING_CALLBACK,
    ErrorCode.INVALID_STEP,
})


class FlowError(BaseModel):
    """Structured description of a joinflow failure.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional extra information (offending value, slot index)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
    )

    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    details: str | None = Field(default=None, description="Optional detailed error info")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_usage_error(self) -> bool:
        """Whether the error points at a programming mistake by the caller."""
        return self.code in _USAGE_CODES

    def render(self) -> str:
        """Single-line rendering used as the exception message."""
        base = f"[{self.code}] {self.message}"
        return f"{base} ({self.details})" if self.details else base

    __str__ = render


class FlowException(Exception):
    """Exception wrapping a FlowError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: FlowError) -> None:
        self.error = error
        super().__init__(error.render())

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, message: str, code: ErrorCode = ErrorCode.UNKNOWN, *, details: str | None = None) -> Self:
        """Create exception from message and code."""
        return cls(FlowError(message=message, code=code, details=details))

    @classmethod
    def rejected(cls, err: object) -> Self:
        """Wrap a non-exception error value that has to be raised."""
        return cls(FlowError(message=f"group rejected with {err!r}", code=ErrorCode.REJECTED))


class SlotError(FlowException):
    """Misuse of a reserved slot (e.g. a filler invoked twice)."""


class ChainError(FlowException):
    """Misuse of the chain composer (missing callback, bad step)."""
