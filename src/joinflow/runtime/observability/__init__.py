"""Observability for joinflow: opt-in logging configuration."""

from .logging import ConsoleFormatter, JsonFormatter, configure_from_settings, configure_logging, record_context

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "configure_from_settings",
    "record_context",
]
