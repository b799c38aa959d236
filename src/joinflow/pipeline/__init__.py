"""Chain composition of step functions over groups."""

from .chain import (
    ChainMethod,
    ComposedChain,
    compose,
    compose_handling,
    raise_if_error,
    run,
    run_handling,
)

__all__ = [
    "ChainMethod",
    "ComposedChain",
    "compose",
    "compose_handling",
    "run",
    "run_handling",
    "raise_if_error",
]
