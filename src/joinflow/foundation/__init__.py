"""Foundation layer: errors, result type and configuration."""

from .config import GroupSettings, JoinflowSettings, LoggingSettings, clear_settings_cache, get_settings
from .errors import ChainError, Err, ErrorCode, FlowError, FlowException, Ok, Result, SlotError

__all__ = [
    "GroupSettings", "JoinflowSettings", "LoggingSettings", "clear_settings_cache", "get_settings",
    "ChainError", "ErrorCode", "FlowError", "FlowException", "SlotError",
    "Result", "Ok", "Err",
]
