"""Error handling for joinflow.

- ErrorCode: Error classification
- FlowError/FlowException: Structured errors and exceptions for API misuse
- Result/Ok/Err: Explicit outcome of a resolved group
"""

from .errors import ChainError, ErrorCode, FlowError, FlowException, SlotError
from .result import Err, Ok, Result

__all__ = [
    # Core errors
    "ErrorCode", "FlowError", "FlowException", "SlotError", "ChainError",
    # Result type
    "Result", "Ok", "Err",
]
