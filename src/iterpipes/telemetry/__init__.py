"""
Telemetry for iterpipes.

Structured logging of pipeline construction, source exhaustion and resets.
Stepping a pipe never logs on the success path.
"""

from iterpipes.telemetry.logger import (
    JsonFormatter,
    LogContext,
    LogLevel,
    PipeLogger,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    log_context,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "LogContext",
    "LogLevel",
    "PipeLogger",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "log_context",
    "set_log_context",
]
